"""Decide how a route's validated fields are documented.

Fields come from the rule extractors (see :mod:`routespec.extractors`) and
are interpreted by :mod:`routespec.resolver.rules`:

* Query methods (``get``, ``head`` by default) list the fields as query
  parameters.
* Every other method gets one ``application/json`` request body holding an
  object schema with the fields as properties.
* A non-query method without rules gets a permissive empty-object body.

Extraction and interpretation run behind a single boundary,
:func:`collect_body_parameters`, which returns a :class:`RulesResult`. A
failed result still yields the default body, and its warning is appended to
the operation description by the caller.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional, Sequence

from routespec.extractors import DEFAULT_EXTRACTORS, RulesExtractor, extract_route_rules
from routespec.models import Operation, Parameter, RequestBody, RouteDescriptor
from routespec.resolver.rules import interpret_rules
from routespec.types import ObjectType

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json"
WARNING_MARKER = "⚠️"


@dataclass(frozen=True)
class RulesResult:
    """Outcome of extracting and interpreting a route's validation rules.

    Attributes:
        parameters: Rule-derived query parameters, in rule-mapping order.
        error: The failure that stopped extraction, or ``None``.
    """

    parameters: list[Parameter] = field(default_factory=list)
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def warning(self) -> Optional[str]:
        if self.error is None:
            return None
        return f"{WARNING_MARKER} Cannot generate request documentation: {self.error}"


def collect_body_parameters(
    route: RouteDescriptor,
    extractors: Sequence[type[RulesExtractor]] = DEFAULT_EXTRACTORS,
) -> RulesResult:
    """Extract and interpret the rules of *route*, capturing any failure."""
    try:
        rules = extract_route_rules(route, extractors)
        parameters = interpret_rules(rules) if rules else []
    except Exception as exc:
        logger.warning(
            "Cannot generate request documentation for %s %s: %s",
            route.methods[0] if route.methods else "?",
            route.uri,
            exc,
        )
        return RulesResult(error=exc)
    return RulesResult(parameters=parameters)


def body_schema(parameters: list[Parameter]) -> ObjectType:
    """Wrap rule-derived parameters into an object schema."""
    schema = ObjectType()
    for param in parameters:
        schema.add_property(param.name, param.schema_, required=param.required)
    return schema


def default_request_body() -> RequestBody:
    return RequestBody().set_content(JSON_CONTENT_TYPE, ObjectType())


def compose_request(
    operation: Operation,
    route: RouteDescriptor,
    extractors: Sequence[type[RulesExtractor]] = DEFAULT_EXTRACTORS,
    query_methods: Iterable[str] = ("get", "head"),
) -> Optional[str]:
    """Attach rule-derived query parameters or a request body to *operation*.

    Args:
        operation: The operation being resolved; mutated in place.
        route: The route the operation documents.
        extractors: Rule extractor classes, tried in order.
        query_methods: Methods whose fields become query parameters.

    Returns:
        The warning text to append to the description when extraction
        failed, otherwise ``None``.
    """
    is_query = operation.method in {m.lower() for m in query_methods}
    result = collect_body_parameters(route, extractors)

    if not result.ok:
        if not is_query:
            operation.request_body = default_request_body()
        return result.warning

    if result.parameters:
        if is_query:
            operation.add_parameters(result.parameters)
        else:
            operation.request_body = RequestBody().set_content(
                JSON_CONTENT_TYPE, body_schema(result.parameters)
            )
    elif not is_query:
        operation.request_body = default_request_body()

    return None
