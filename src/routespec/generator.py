"""Top-level document generator.

:class:`Generator` runs one batch pass over a pre-materialized route list:

1. Drop documentation-serving routes (name starts with
   ``config.docs_route_prefix``), then apply the route filter.
2. Resolve each remaining route with an
   :class:`~routespec.resolver.operation.OperationResolver`; closure-based
   routes resolve to nothing and are skipped.
3. Insert the operations, in route order, into a fresh document.
4. Run the document transform, if configured.

Example::

    generator = Generator(resolve_config(), Extensions(route_filter=lambda r: True))
    document = generator.generate(load_manifest("routes.yaml"))
    tree = document.to_dict()
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional, Sequence

from routespec.config import GeneratorConfig
from routespec.document import ComponentsRepository, DocumentAssembler, make_document
from routespec.extractors import DEFAULT_EXTRACTORS, ResponseResolver, RulesExtractor
from routespec.hooks import Extensions
from routespec.models import Document, RouteDescriptor
from routespec.registry import IdentifierRegistry, ResolutionContext
from routespec.resolver.operation import OperationResolver

logger = logging.getLogger(__name__)


class Generator:
    """Builds a :class:`~routespec.models.Document` from route descriptors.

    A generator may be reused; every call to :meth:`generate` starts from an
    empty document and an empty identifier registry.

    Args:
        config: Generator settings. Defaults to :class:`GeneratorConfig`.
        extensions: Route filter and hooks for the run.
        extractors: Rule extractor classes, tried in order.
        response_resolver: Supplies the responses of each operation.
    """

    def __init__(
        self,
        config: Optional[GeneratorConfig] = None,
        extensions: Optional[Extensions] = None,
        extractors: Sequence[type[RulesExtractor]] = DEFAULT_EXTRACTORS,
        response_resolver: Optional[ResponseResolver] = None,
    ) -> None:
        self.config = config or GeneratorConfig()
        self.extensions = extensions or Extensions()
        self.extractors = tuple(extractors)
        self.response_resolver = response_resolver
        self.identifiers: Optional[IdentifierRegistry] = None

    def select_routes(self, routes: Iterable[RouteDescriptor]) -> list[RouteDescriptor]:
        """Return the routes to document, keeping their order."""
        selected = []
        for route in routes:
            if route.name and route.name.startswith(self.config.docs_route_prefix):
                continue
            if not self.extensions.admits(route, self.config.middleware_group):
                continue
            selected.append(route)
        return selected

    def generate(self, routes: Iterable[RouteDescriptor]) -> Document:
        """Run one generation pass.

        Raises:
            InvalidRouteError: If a selected class-based route declares no
                HTTP method. Other failures outside the request-body boundary
                propagate unchanged.
        """
        document = make_document(self.config)
        components = ComponentsRepository(document.components)
        self.identifiers = IdentifierRegistry(components)
        context = ResolutionContext(
            document=document, components=components, identifiers=self.identifiers
        )
        resolver = OperationResolver(
            context,
            config=self.config,
            extensions=self.extensions,
            extractors=self.extractors,
            response_resolver=self.response_resolver,
        )
        assembler = DocumentAssembler(document, self.extensions)

        for route in self.select_routes(routes):
            resolved = resolver.resolve(route)
            if resolved is None:
                logger.debug("Skipping route '%s': handler is not a class method", route.uri)
                continue
            path, operation = resolved
            assembler.add(path, operation)

        return assembler.finish()
