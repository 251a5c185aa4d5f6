"""Collaborator interfaces for rule extraction and response resolution.

Handler source analysis happens outside routespec. The host's metadata
provider records what it found on :class:`~routespec.models.HandlerInfo`,
and the extractors here only decide whether a handler shape applies and read
the captured rules back.

Two rule extractors ship with the package and are tried in order by
:func:`extract_route_rules`:

* :class:`FormRequestRulesExtractor` -- the handler takes a form-request
  object that declares its own rules.
* :class:`ValidateCallExtractor` -- the handler body calls ``validate`` with
  an inline rule mapping.

Hosts can pass their own :class:`RulesExtractor` subclasses to the
generator. Any exception an extractor raises is recoverable: the request-body
composer turns it into a warning on the operation.

Example:
    Minimal custom extractor::

        class AttributeRulesExtractor(RulesExtractor):
            def should_handle(self) -> bool:
                return self.handler.method == "store"

            def extract(self, route):
                return {"name": "required|string"}
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Optional, Sequence

from routespec.exceptions import RuleExtractionError
from routespec.models import HandlerInfo, Response, RouteDescriptor, RouteInfo, RulesSpec

if TYPE_CHECKING:
    from routespec.registry import ResolutionContext


class RulesExtractor(ABC):
    """Reads the validation rules of one handler shape.

    Args:
        handler: Metadata of the handler being documented.
    """

    def __init__(self, handler: HandlerInfo) -> None:
        self.handler = handler

    @abstractmethod
    def should_handle(self) -> bool:
        """Return True if this extractor understands the handler's shape."""
        ...

    @abstractmethod
    def extract(self, route: RouteDescriptor) -> Optional[dict[str, Any]]:
        """Return the ``field -> rule specification`` mapping, or ``None``.

        Raises:
            RuleExtractionError: If the rules exist but cannot be read.
        """
        ...


def _materialize(rules: RulesSpec, route: RouteDescriptor, source: str) -> Optional[dict[str, Any]]:
    result = rules(route) if callable(rules) else rules
    if result is None:
        return None
    if not isinstance(result, dict):
        raise RuleExtractionError(
            f"Rules of {source} must be a mapping (got {type(result).__name__})"
        )
    return result


class FormRequestRulesExtractor(RulesExtractor):
    """Rules declared on a form-request object the handler receives."""

    def should_handle(self) -> bool:
        return self.handler.form_request is not None

    def extract(self, route: RouteDescriptor) -> Optional[dict[str, Any]]:
        form_request = self.handler.form_request
        if form_request is None:
            return None
        return _materialize(form_request.rules, route, form_request.class_name)


class ValidateCallExtractor(RulesExtractor):
    """Rules passed inline to a ``validate`` call in the handler body."""

    def should_handle(self) -> bool:
        return self.handler.validate_call is not None

    def extract(self, route: RouteDescriptor) -> Optional[dict[str, Any]]:
        validate_call = self.handler.validate_call
        if validate_call is None:
            return None
        return _materialize(validate_call.rules, route, f"{self.handler.method}() validate call")


DEFAULT_EXTRACTORS: tuple[type[RulesExtractor], ...] = (
    FormRequestRulesExtractor,
    ValidateCallExtractor,
)


def extract_route_rules(
    route: RouteDescriptor,
    extractors: Sequence[type[RulesExtractor]] = DEFAULT_EXTRACTORS,
) -> Optional[dict[str, Any]]:
    """Run the first applicable extractor for *route*'s handler.

    Returns:
        The rule mapping, or ``None`` when no extractor applies.
    """
    if route.handler is None:
        return None
    for extractor_cls in extractors:
        extractor = extractor_cls(route.handler)
        if extractor.should_handle():
            return extractor.extract(route)
    return None


class ResponseResolver(ABC):
    """Computes the response entries of an operation from handler analysis."""

    @abstractmethod
    def resolve(self, route_info: RouteInfo, context: ResolutionContext) -> list[Response]:
        """Return the responses to attach, in order."""
        ...


class NullResponseResolver(ResponseResolver):
    """Attaches no responses."""

    def resolve(self, route_info: RouteInfo, context: ResolutionContext) -> list[Response]:
        return []
