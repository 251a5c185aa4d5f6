"""Extension points for route filtering, operation mutation, and document transform.

The generator never consults process-wide state. Instead every run receives an
:class:`Extensions` instance carrying up to three optional callables:

* ``route_filter(route) -> bool`` -- decides which routes are documented.
  When unset, the generator falls back to middleware-group membership (see
  :meth:`Extensions.admits`).
* ``operation_resolver(operation, route_info)`` -- called last for every
  resolved operation; may mutate it freely. Its return value is ignored.
* ``document_transform(document) -> document`` -- called once after all
  operations are inserted; its return value replaces the document.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Optional

if TYPE_CHECKING:
    from routespec.models import Document, Operation, RouteDescriptor, RouteInfo

logger = logging.getLogger(__name__)

RouteFilter = Callable[["RouteDescriptor"], bool]
OperationResolver = Callable[["Operation", "RouteInfo"], None]
DocumentTransform = Callable[["Document"], "Document"]


@dataclass
class Extensions:
    """Optional overrides applied by the generator during one run.

    Attributes:
        route_filter: Predicate selecting the routes to document.
        operation_resolver: Mutates each resolved operation.
        document_transform: Maps the finished document to its replacement.
    """

    route_filter: Optional[RouteFilter] = None
    operation_resolver: Optional[OperationResolver] = None
    document_transform: Optional[DocumentTransform] = None

    def admits(self, route: RouteDescriptor, middleware_group: str = "api") -> bool:
        """Return True if *route* should be documented.

        Uses ``route_filter`` when set, otherwise checks that the route
        belongs to *middleware_group*.
        """
        if self.route_filter is not None:
            return bool(self.route_filter(route))
        return middleware_group in route.middleware

    def apply_operation(self, operation: Operation, route_info: RouteInfo) -> Operation:
        if self.operation_resolver is not None:
            self.operation_resolver(operation, route_info)
        return operation

    def transform_document(self, document: Document) -> Document:
        if self.document_transform is None:
            return document
        logger.debug("Applying document transform %r", self.document_transform)
        return self.document_transform(document)
