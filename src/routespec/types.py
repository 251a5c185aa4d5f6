"""Schema type model used for parameters, request bodies, and components.

Every schema is a :class:`SchemaType` subclass. The variant is fixed by the
class, the modifiers live on the instance:

* ``nullable`` and ``enum`` are available on every variant.
* ``minimum`` and ``maximum`` only exist on :class:`NumberType` and its
  subclass :class:`IntegerType`, so a bound can never be attached to a string
  or boolean schema.

:func:`make_type` is the builder used by the resolvers: it takes a
:class:`SchemaKind` and returns a fresh, unconstrained instance.
"""

from __future__ import annotations

import enum
from typing import Any, ClassVar, Optional

from pydantic import BaseModel, Field


class SchemaKind(str, enum.Enum):
    """Scalar and composite kinds a schema can take."""

    STRING = "string"
    INTEGER = "integer"
    NUMBER = "number"
    BOOLEAN = "boolean"
    OBJECT = "object"


class SchemaType(BaseModel):
    """Base class for all schema variants."""

    kind: ClassVar[Optional[SchemaKind]] = None

    nullable: bool = False
    enum: list[str] = Field(default_factory=list)

    def set_nullable(self, nullable: bool = True) -> SchemaType:
        self.nullable = nullable
        return self

    def set_enum(self, values: list[str]) -> SchemaType:
        self.enum = list(values)
        return self

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON-compatible schema tree, omitting unset modifiers."""
        data: dict[str, Any] = {}
        if self.kind is not None:
            data["type"] = self.kind.value
        if self.nullable:
            data["nullable"] = True
        if self.enum:
            data["enum"] = list(self.enum)
        return data


class StringType(SchemaType):
    kind: ClassVar[Optional[SchemaKind]] = SchemaKind.STRING


class BooleanType(SchemaType):
    kind: ClassVar[Optional[SchemaKind]] = SchemaKind.BOOLEAN


class NumberType(SchemaType):
    """Floating-point number; the only variant family that carries bounds."""

    kind: ClassVar[Optional[SchemaKind]] = SchemaKind.NUMBER

    minimum: Optional[float] = None
    maximum: Optional[float] = None

    def set_min(self, value: float) -> NumberType:
        self.minimum = value
        return self

    def set_max(self, value: float) -> NumberType:
        self.maximum = value
        return self

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        if self.minimum is not None:
            data["minimum"] = self.minimum
        if self.maximum is not None:
            data["maximum"] = self.maximum
        return data


class IntegerType(NumberType):
    kind: ClassVar[Optional[SchemaKind]] = SchemaKind.INTEGER


class ObjectType(SchemaType):
    """Object schema with ordered properties and a required-name list."""

    kind: ClassVar[Optional[SchemaKind]] = SchemaKind.OBJECT

    properties: dict[str, SchemaType] = Field(default_factory=dict)
    required: list[str] = Field(default_factory=list)

    def add_property(self, name: str, schema: SchemaType, required: bool = False) -> ObjectType:
        self.properties[name] = schema
        if required and name not in self.required:
            self.required.append(name)
        return self

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        if self.properties:
            data["properties"] = {
                name: schema.to_dict() for name, schema in self.properties.items()
            }
        if self.required:
            data["required"] = list(self.required)
        return data


class ReferenceType(SchemaType):
    """Pointer to a schema registered under ``components.schemas``."""

    ref: str

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"$ref": self.ref}
        if self.nullable:
            data["nullable"] = True
        return data


_KIND_TO_CLASS: dict[SchemaKind, type[SchemaType]] = {
    SchemaKind.STRING: StringType,
    SchemaKind.INTEGER: IntegerType,
    SchemaKind.NUMBER: NumberType,
    SchemaKind.BOOLEAN: BooleanType,
    SchemaKind.OBJECT: ObjectType,
}


def make_type(kind: SchemaKind) -> SchemaType:
    """Build a default-constrained schema of the given kind.

    Args:
        kind: The schema kind to build.

    Returns:
        A new instance with no enum, not nullable, and no bounds.

    Example::

        schema = make_type(SchemaKind.INTEGER)
        schema.to_dict()  # {"type": "integer"}
    """
    return _KIND_TO_CLASS[SchemaKind(kind)]()


def is_numeric(schema: SchemaType) -> bool:
    """Return True if *schema* accepts ``minimum``/``maximum`` bounds."""
    return isinstance(schema, NumberType)
