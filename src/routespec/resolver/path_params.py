"""Resolve path parameters and their display aliases for a route.

The host framework reports placeholder names from the URI template
(``/users/{user}``) while the handler declares its own parameter names
(``def show(request, user_id)``). This module reconciles the two:

* Handler parameters typed as the inbound-request abstraction are dropped.
* The remaining handler names are zipped positionally with the placeholders
  to build the alias map. When the counts differ the lists cannot be aligned,
  so the alias map becomes the identity (each placeholder keeps its name).
* Each placeholder's type is taken from, in increasing priority, the
  documentation ``@param`` type and the handler's declared type. Known scalar
  names map to their schema kinds; any other non-empty name maps to Integer,
  on the assumption that it names a bound model whose key is numeric.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Iterable, Optional

from routespec.config import DEFAULT_REQUEST_TYPE_NAMES
from routespec.models import (
    DocParamTag,
    HandlerParameter,
    Parameter,
    ParameterLocation,
    RouteDescriptor,
)
from routespec.types import SchemaKind, make_type

logger = logging.getLogger(__name__)

_SCALAR_KINDS: dict[str, SchemaKind] = {
    "int": SchemaKind.INTEGER,
    "float": SchemaKind.NUMBER,
    "string": SchemaKind.STRING,
    "bool": SchemaKind.BOOLEAN,
}


@dataclass
class PathParameters:
    """Resolved path parameters of one route plus the placeholder alias map."""

    parameters: list[Parameter] = field(default_factory=list)
    aliases: dict[str, str] = field(default_factory=dict)


def _qualified_name(type_name: str) -> str:
    """Normalise *type_name* to dotted form, without a nullable marker or leading separator."""
    return ".".join(part for part in re.split(r"[\\.]", type_name.lstrip("?")) if part)


def _is_request(param: HandlerParameter, request_type_names: Iterable[str]) -> bool:
    if param.is_request:
        return True
    if not param.type_name:
        return False
    return _qualified_name(param.type_name) in {_qualified_name(n) for n in request_type_names}


def signature_parameters(
    params: list[HandlerParameter],
    request_type_names: Iterable[str] = DEFAULT_REQUEST_TYPE_NAMES,
) -> list[HandlerParameter]:
    """Return the handler parameters that can bind path placeholders, in position order."""
    names = tuple(request_type_names)
    ordered = sorted(params, key=lambda p: p.position)
    return [p for p in ordered if not _is_request(p, names)]


def build_alias_map(placeholders: list[str], real_names: list[str]) -> dict[str, str]:
    """Zip placeholder names with handler names positionally.

    When the two lists differ in length the identity mapping is returned.
    """
    if len(placeholders) != len(real_names):
        logger.debug(
            "Cannot align placeholders %s with handler parameters %s; keeping placeholder names",
            placeholders,
            real_names,
        )
        real_names = placeholders
    return dict(zip(placeholders, real_names))


def humanize(name: str) -> str:
    """Turn ``userId`` or ``user_id`` into ``user id``."""
    value = re.sub(r"\s+", "", name)
    value = re.sub(r"(.)(?=[A-Z])", r"\1-", value).lower()
    return value.replace("-", " ").replace("_", " ")


def schema_kind_for(type_name: Optional[str]) -> SchemaKind:
    """Map a declared type name to a schema kind.

    ``None`` (untyped) gives String. Unrecognised names give Integer.
    """
    if not type_name:
        return SchemaKind.STRING
    return _SCALAR_KINDS.get(type_name.lstrip("?"), SchemaKind.INTEGER)


def _resolve_parameter(
    name: str,
    reflection: Optional[HandlerParameter],
    doc_param: Optional[DocParamTag],
) -> Parameter:
    description = ""
    type_name: Optional[str] = None

    if doc_param is not None:
        if doc_param.type:
            type_name = doc_param.type
        if doc_param.description:
            description = doc_param.description

    if reflection is not None and reflection.type_name:
        type_name = reflection.type_name

    if type_name and type_name.lstrip("?") not in _SCALAR_KINDS and not description:
        description = f"The {humanize(name)} ID"

    return Parameter(
        name=name,
        location=ParameterLocation.PATH,
        description=description,
        required=True,
        schema=make_type(schema_kind_for(type_name)),
    )


def resolve_path_parameters(
    route: RouteDescriptor, request_type_names: Iterable[str] = DEFAULT_REQUEST_TYPE_NAMES
) -> PathParameters:
    """Resolve one path parameter per placeholder of *route*.

    Args:
        route: A class-based route.
        request_type_names: Type names identifying the inbound-request
            abstraction, in addition to parameters flagged ``is_request``.

    Returns:
        The parameters, named after their aliases and ordered like the
        placeholders, and the alias map.
    """
    handler = route.handler
    signature = signature_parameters(handler.parameters if handler else [], request_type_names)
    placeholders = route.placeholder_names()
    aliases = build_alias_map(placeholders, [p.name for p in signature])

    by_name = {p.name: p for p in signature}
    doc_params = handler.doc.params_by_name() if handler and handler.doc else {}

    parameters = []
    for placeholder in placeholders:
        name = aliases[placeholder]
        parameters.append(_resolve_parameter(name, by_name.get(name), doc_params.get(name)))

    return PathParameters(parameters=parameters, aliases=aliases)
