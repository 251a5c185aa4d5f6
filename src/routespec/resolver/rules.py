"""Interpret validation-rule tokens into query parameters with schemas.

Each field of a validation-rule mapping carries a rule specification: either a
``|``-joined string (``"required|integer|min:18"``) or an explicit list whose
elements may be strings or rule objects. Rule objects that define their own
``__str__`` are coerced to their textual form; anything else is kept as is and
never matches a token.

Tokens are applied in a fixed order, each step only narrowing the previous
result:

1. **Kind** -- ``bool``/``boolean`` gives Boolean, else ``numeric`` gives
   Number, else ``integer``/``int`` gives Integer, else String. ``numeric`` is
   checked before ``integer``, so a field tagged with both is a Number.
2. **Foreign key** -- an ``exists:<table>,id...`` token forces Integer.
3. **Enum** -- the first ``in:<csv>`` token becomes the enum list.
4. **Nullable** -- a ``nullable`` token.
5. **Bounds** -- the first ``min:<n>`` and ``max:<n>`` tokens, applied only
   when the kind is numeric (Number or its subtype Integer).
6. **Required** -- a ``required`` token; absence means optional.

Unrecognised tokens are ignored. The parameter description is always empty.
"""

from __future__ import annotations

import math
from fnmatch import fnmatchcase
from typing import Any, Optional

from routespec.exceptions import RuleTokenError
from routespec.models import Parameter, ParameterLocation
from routespec.types import NumberType, SchemaKind, SchemaType, is_numeric, make_type

_BOOLEAN_TOKENS = ("bool", "boolean")
_NUMBER_TOKENS = ("numeric",)
_INTEGER_TOKENS = ("integer", "int")

_FOREIGN_KEY_PATTERN = "exists:*,id*"
_ENUM_PREFIX = "in:"
_MIN_PREFIX = "min:"
_MAX_PREFIX = "max:"


def normalize_rules(spec: Any) -> list[Any]:
    """Split a rule specification into its list of tokens.

    Args:
        spec: A ``|``-joined string, a list/tuple of tokens, or a single
            rule object.

    Returns:
        The token list with stringable rule objects coerced to ``str``.
    """
    if isinstance(spec, str):
        tokens: list[Any] = spec.split("|")
    elif isinstance(spec, (list, tuple)):
        tokens = list(spec)
    else:
        tokens = [spec]
    return [_coerce_token(token) for token in tokens]


def _coerce_token(token: Any) -> Any:
    if isinstance(token, str):
        return token
    if type(token).__str__ is not object.__str__:
        return str(token)
    return token


def resolve_kind(tokens: list[str]) -> SchemaKind:
    """Pick the scalar kind from *tokens* (steps 1 and 2)."""
    if any(t in _BOOLEAN_TOKENS for t in tokens):
        kind = SchemaKind.BOOLEAN
    elif any(t in _NUMBER_TOKENS for t in tokens):
        kind = SchemaKind.NUMBER
    elif any(t in _INTEGER_TOKENS for t in tokens):
        kind = SchemaKind.INTEGER
    else:
        kind = SchemaKind.STRING

    if any(fnmatchcase(t, _FOREIGN_KEY_PATTERN) for t in tokens):
        kind = SchemaKind.INTEGER
    return kind


def parse_enum(token: str) -> list[str]:
    '''Decode the values of an ``in:`` token.

    Values are split on commas, trimmed, stripped of every leading and
    trailing double quote, and doubled quotes left inside are collapsed into
    one. This is not a full CSV decode: a quoted pair that ends a value loses
    its closing quote to the strip. Order and duplicates are preserved.

    Example::

        parse_enum('in:"admin","editor"')  # ["admin", "editor"]
        parse_enum('in:"say ""hi"""')      # ['say "hi']
    '''
    body = token[len(_ENUM_PREFIX):]
    if not body:
        return []
    return [value.strip().strip('"').replace('""', '"') for value in body.split(",")]


def _first_argument(tokens: list[str], prefix: str) -> Optional[str]:
    for token in tokens:
        if token.startswith(prefix):
            return token[len(prefix):]
    return None


def _parse_bound(field: str, prefix: str, value: str) -> float:
    try:
        bound: Optional[float] = float(value)
    except ValueError:
        bound = None
    if bound is None or not math.isfinite(bound):
        raise RuleTokenError(
            f"Invalid {prefix}{value} rule on field '{field}': expected a finite number"
        )
    return bound


def _apply_bounds(field: str, schema: NumberType, tokens: list[str]) -> None:
    minimum = _first_argument(tokens, _MIN_PREFIX)
    if minimum:
        schema.set_min(_parse_bound(field, _MIN_PREFIX, minimum))
    maximum = _first_argument(tokens, _MAX_PREFIX)
    if maximum:
        schema.set_max(_parse_bound(field, _MAX_PREFIX, maximum))


def build_schema(field: str, tokens: list[str]) -> SchemaType:
    """Build the schema for *field* from its string tokens (steps 1 to 5)."""
    schema = make_type(resolve_kind(tokens))

    enum_token = next((t for t in tokens if t.startswith(_ENUM_PREFIX)), None)
    if enum_token is not None:
        schema.set_enum(parse_enum(enum_token))

    if "nullable" in tokens:
        schema.set_nullable(True)

    if is_numeric(schema):
        _apply_bounds(field, schema, tokens)

    return schema


def interpret_field(field: str, spec: Any) -> Parameter:
    """Turn one field's rule specification into a query :class:`~routespec.models.Parameter`.

    Args:
        field: The request field name.
        spec: The field's rule specification (string or list).

    Returns:
        A query parameter with an empty description.

    Raises:
        RuleTokenError: If a ``min:``/``max:`` token on a numeric field does
            not hold a number.
    """
    tokens = [t for t in normalize_rules(spec) if isinstance(t, str)]
    return Parameter(
        name=field,
        location=ParameterLocation.QUERY,
        description="",
        required="required" in tokens,
        schema=build_schema(field, tokens),
    )


def interpret_rules(rules: dict[str, Any]) -> list[Parameter]:
    """Interpret a whole ``field -> rule specification`` mapping, keeping its order."""
    return [interpret_field(field, spec) for field, spec in rules.items()]
