"""Resolve one route into a ``(path, operation)`` pair.

:class:`OperationResolver` is the orchestrator of the resolution engine. For
every class-based route it:

1. registers the handler class for identifier resolution,
2. resolves path parameters and the placeholder alias map,
3. sets tags (class ``@tags`` values, then the class name without its
   ``Controller`` suffix),
4. composes query parameters or a request body, collecting a warning on
   failure,
5. appends the responses computed by the response resolver, in order,
6. sets summary and description,
7. hands the operation to the ``operation_resolver`` hook, if any.

Routes without a class-method handler resolve to ``None`` and are skipped by
the caller.
"""

from __future__ import annotations

from typing import Optional, Sequence

from routespec.config import GeneratorConfig
from routespec.document import normalize_path
from routespec.extractors import (
    DEFAULT_EXTRACTORS,
    NullResponseResolver,
    ResponseResolver,
    RulesExtractor,
)
from routespec.hooks import Extensions
from routespec.models import ClassInfo, DocBlock, Operation, RouteDescriptor, RouteInfo
from routespec.registry import ResolutionContext
from routespec.resolver.path_params import resolve_path_parameters
from routespec.resolver.request_body import compose_request


def extract_tags(class_doc: DocBlock) -> list[str]:
    """Return the comma-separated values of the first ``@tags`` annotation."""
    if not class_doc.tags:
        return []
    return class_doc.tags[0].split(",")


def controller_tag(class_info: ClassInfo) -> str:
    return class_info.basename.replace("Controller", "")


def append_warning(description: str, warning: str) -> str:
    if not description:
        return warning
    return f"{description}\n\n{warning}"


class OperationResolver:
    """Turns class-based routes into operations.

    Args:
        context: Document, components, and identifier registry of the run.
        config: Generator settings (path prefix, request types, query methods).
        extensions: Hooks; only ``operation_resolver`` is used here.
        extractors: Rule extractor classes, tried in order.
        response_resolver: Supplies the responses of each operation.
    """

    def __init__(
        self,
        context: ResolutionContext,
        config: Optional[GeneratorConfig] = None,
        extensions: Optional[Extensions] = None,
        extractors: Sequence[type[RulesExtractor]] = DEFAULT_EXTRACTORS,
        response_resolver: Optional[ResponseResolver] = None,
    ) -> None:
        self.context = context
        self.config = config or GeneratorConfig()
        self.extensions = extensions or Extensions()
        self.extractors = tuple(extractors)
        self.response_resolver = response_resolver or NullResponseResolver()

    def resolve(self, route: RouteDescriptor) -> Optional[tuple[str, Operation]]:
        """Resolve *route*, or return ``None`` if its handler is not a class method."""
        if not route.is_class_based():
            return None

        route_info = RouteInfo(route=route)
        self.context.identifiers.register(route_info.class_info)

        path_params = resolve_path_parameters(route, self.config.request_type_names)

        operation = Operation(
            method=route.method,
            tags=extract_tags(route_info.class_doc) + [controller_tag(route_info.class_info)],
        )
        operation.add_parameters(path_params.parameters)

        description = route_info.doc.description
        warning = compose_request(
            operation, route, self.extractors, self.config.query_methods
        )
        if warning:
            description = append_warning(description, warning)

        for response in self.response_resolver.resolve(route_info, self.context):
            operation.add_response(response)

        operation.summary = route_info.doc.summary.rstrip(".")
        operation.description = description

        self.extensions.apply_operation(operation, route_info)

        path = normalize_path(route.uri, path_params.aliases, self.config.path_prefix)
        return path, operation
