"""Document bootstrap, path normalization, and operation assembly.

This module owns the second half of the pipeline: turning resolved
``(path, operation)`` pairs into a :class:`~routespec.models.Document`.

* :func:`make_document` -- build an empty document from a
  :class:`~routespec.config.GeneratorConfig`.
* :func:`normalize_path` -- strip the host path prefix and substitute
  placeholders with their aliases.
* :class:`DocumentAssembler` -- insert operations in route order, then run
  the optional document transform once.
* :class:`ComponentsRepository` -- register reusable schemas and hand out
  ``$ref`` pointers to them.
"""

from __future__ import annotations

import logging
import re

from routespec.config import GeneratorConfig
from routespec.hooks import Extensions
from routespec.models import PLACEHOLDER_RE, Components, Document, InfoObject, Operation, Server
from routespec.types import ObjectType, ReferenceType

logger = logging.getLogger(__name__)


def make_document(config: GeneratorConfig) -> Document:
    """Create the empty document for one generation run.

    Args:
        config: Supplies the OpenAPI version, info title/version, and server URL.

    Returns:
        A :class:`~routespec.models.Document` with info and a single server,
        and no paths.
    """
    document = Document(
        openapi=config.openapi_version,
        info=InfoObject(title=config.title, version=config.version),
    )
    document.add_server(Server(url=config.server_url))
    return document


def normalize_path(uri: str, aliases: dict[str, str], prefix: str = "api/") -> str:
    """Turn a route URI template into the document's path key.

    The *prefix* is stripped once from the start of the URI (ignoring a
    leading ``/``), every ``{name}`` or ``{name?}`` placeholder is replaced by
    ``{alias}``, and the result always starts with ``/``.

    Example::

        normalize_path("api/users/{user}", {"user": "user_id"})
        # "/users/{user_id}"
    """
    path = uri.lstrip("/")
    if prefix and path.startswith(prefix.lstrip("/")):
        path = path[len(prefix.lstrip("/")):]

    def _substitute(match: re.Match[str]) -> str:
        name = match.group(1)
        return "{" + aliases.get(name, name) + "}"

    return "/" + PLACEHOLDER_RE.sub(_substitute, path)


class ComponentsRepository:
    """Registers named schemas under ``components.schemas``."""

    def __init__(self, components: Components) -> None:
        self._components = components

    def has(self, name: str) -> bool:
        return name in self._components.schemas

    def reference(self, fq_name: str) -> ReferenceType:
        """Return a ``$ref`` to the component for *fq_name*, registering it on first use.

        Components are keyed by the fully qualified name with ``.`` as the
        separator, so ``App\\Models\\User`` and ``App.Models.User`` share one
        entry while ``App.Admin.User`` gets its own.

        Example::

            repo.reference("App\\Models\\User").ref
            # "#/components/schemas/App.Models.User"
        """
        name = ".".join(part for part in re.split(r"[\\.]", fq_name) if part)
        if not self.has(name):
            self._components.schemas[name] = ObjectType()
        return ReferenceType(ref=f"#/components/schemas/{name}")


class DocumentAssembler:
    """Accumulates resolved operations into a document, grouped by path.

    Example::

        assembler = DocumentAssembler(make_document(config), extensions)
        for path, operation in resolved:
            assembler.add(path, operation)
        document = assembler.finish()
    """

    def __init__(self, document: Document, extensions: Extensions | None = None) -> None:
        self.document = document
        self._extensions = extensions or Extensions()

    def add(self, path: str, operation: Operation) -> None:
        self.document.add_path(path).add_operation(operation)

    def finish(self) -> Document:
        """Run the document transform, if configured, and return the final document."""
        logger.debug("Assembled %d paths", len(self.document.paths))
        return self._extensions.transform_document(self.document)
