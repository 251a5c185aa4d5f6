"""Canonical Pydantic models shared across all routespec modules.

This is the single source of truth for data shapes in the project. The models
fall into two groups:

**Input models** -- supplied by the host's route discovery and handler
metadata collaborators, read-only for the resolvers:
    :class:`RouteDescriptor`, :class:`HandlerInfo`, :class:`ClassInfo`,
    :class:`HandlerParameter`, :class:`DocBlock`, :class:`DocParamTag`,
    :class:`FormRequestInfo`, and :class:`ValidateCallInfo`.

**Document models** -- produced by the resolvers and owned by the
:class:`Document` once inserted:
    :class:`Parameter`, :class:`RequestBody`, :class:`Response`,
    :class:`Operation`, :class:`PathItem`, :class:`InfoObject`,
    :class:`Server`, :class:`Components`, and :class:`Document`.

Schemas are :class:`~routespec.types.SchemaType` instances. Every document
model exposes ``to_dict()`` returning the JSON-compatible tree handed to the
caller for serialization.
"""

from __future__ import annotations

import enum
import logging
import re
from typing import Any, Callable, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from routespec.exceptions import InvalidRouteError
from routespec.types import SchemaType, StringType

logger = logging.getLogger(__name__)

# Matches ``{name}`` and optional ``{name?}`` URI placeholders.
PLACEHOLDER_RE = re.compile(r"\{(\w+)\??\}")

RulesSpec = Union[dict[str, Any], Callable[..., Any]]
"""Validation rules: a ``field -> rule specification`` mapping, or a callable
receiving the :class:`RouteDescriptor` and returning one."""


# --- Input models ---


class HandlerParameter(BaseModel):
    """A parameter of the handler method, as reported by signature introspection.

    ``is_request`` is set by the metadata provider when the declared type is
    the framework's inbound-request abstraction (or a subclass of it).
    """

    name: str
    type_name: Optional[str] = None
    position: int = 0
    is_request: bool = False


class DocParamTag(BaseModel):
    """A ``@param`` annotation from a handler's documentation block."""

    name: str
    type: Optional[str] = None
    description: str = ""

    @property
    def key(self) -> str:
        """Parameter name without a leading ``$`` sigil."""
        return self.name.replace("$", "")


class DocBlock(BaseModel):
    """Structured documentation attached to a handler method or class.

    ``tags`` holds the raw values of ``@tags`` annotations, each a
    comma-separated list.
    """

    summary: str = ""
    description: str = ""
    params: list[DocParamTag] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)

    def params_by_name(self) -> dict[str, DocParamTag]:
        return {tag.key: tag for tag in self.params}


class ClassInfo(BaseModel):
    """Identity and name-resolution context of a handler class.

    ``name`` is fully qualified, using either ``.`` or ``\\`` as the
    namespace separator. ``imports`` maps short aliases to fully qualified
    names, as declared at the top of the class's source file.
    """

    name: str
    imports: dict[str, str] = Field(default_factory=dict)
    doc: Optional[DocBlock] = None

    @property
    def separator(self) -> str:
        return "\\" if "\\" in self.name else "."

    @property
    def basename(self) -> str:
        return self.name.rsplit(self.separator, 1)[-1]

    @property
    def namespace(self) -> str:
        head, sep, _ = self.name.rpartition(self.separator)
        return head if sep else ""

    def resolve_fq_name(self, name: str) -> str:
        """Resolve a short type reference used inside this class to a fully qualified name.

        Resolution order: an already-absolute name (leading separator), then
        the import table keyed by the first segment, then the class's own
        namespace.
        """
        sep = self.separator
        if name.startswith(sep):
            return name.lstrip(sep)
        head, has_rest, rest = name.partition(sep)
        if head in self.imports:
            return self.imports[head] + (sep + rest if has_rest else "")
        if self.namespace:
            return f"{self.namespace}{sep}{name}"
        return name


class FormRequestInfo(BaseModel):
    """A form-request object declared in the handler signature, carrying its own rules."""

    class_name: str
    rules: RulesSpec


class ValidateCallInfo(BaseModel):
    """An inline validate call found in the handler body."""

    rules: RulesSpec


class HandlerInfo(BaseModel):
    """Metadata about the handler bound to a route.

    A handler without ``class_info`` or ``method`` is closure based and is
    skipped by the generator.
    """

    class_info: Optional[ClassInfo] = None
    method: Optional[str] = None
    parameters: list[HandlerParameter] = Field(default_factory=list)
    doc: Optional[DocBlock] = None
    form_request: Optional[FormRequestInfo] = None
    validate_call: Optional[ValidateCallInfo] = None


class RouteDescriptor(BaseModel):
    """One route from the host's route table.

    ``parameter_names`` is the ordered list of placeholder names as reported
    by the host framework. When omitted it is derived from ``uri``.
    """

    methods: list[str]
    uri: str
    name: Optional[str] = None
    middleware: list[str] = Field(default_factory=list)
    parameter_names: Optional[list[str]] = None
    handler: Optional[HandlerInfo] = None

    @property
    def method(self) -> str:
        """The operation's HTTP method: the first declared method, lower-cased.

        Raises:
            InvalidRouteError: If the route declares no method.
        """
        if not self.methods:
            raise InvalidRouteError(f"Route '{self.uri}' declares no HTTP method")
        return self.methods[0].lower()

    def placeholder_names(self) -> list[str]:
        if self.parameter_names is not None:
            return list(self.parameter_names)
        return PLACEHOLDER_RE.findall(self.uri)

    def is_class_based(self) -> bool:
        return bool(
            self.handler is not None
            and self.handler.class_info is not None
            and self.handler.method
        )


class RouteInfo(BaseModel):
    """Read-only view over a class-based route, handed to hooks and collaborators."""

    route: RouteDescriptor

    @property
    def handler(self) -> HandlerInfo:
        assert self.route.handler is not None  # guarded by is_class_based()
        return self.route.handler

    @property
    def class_info(self) -> ClassInfo:
        assert self.handler.class_info is not None
        return self.handler.class_info

    @property
    def class_name(self) -> str:
        return self.class_info.name

    @property
    def method(self) -> str:
        return self.route.method

    @property
    def doc(self) -> DocBlock:
        """The method's documentation block, or an empty one."""
        return self.handler.doc or DocBlock()

    @property
    def class_doc(self) -> DocBlock:
        return self.class_info.doc or DocBlock()


# --- Document models ---


class ParameterLocation(str, enum.Enum):
    """Locations a resolved parameter can take, per OpenAPI ``in`` field."""

    PATH = "path"
    QUERY = "query"


class Parameter(BaseModel):
    """A resolved operation parameter, unique per ``(name, location)``."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    location: ParameterLocation
    description: str = ""
    required: bool = False
    schema_: SchemaType = Field(default_factory=StringType, alias="schema")

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "in": self.location.value,
            "description": self.description,
            "required": self.required,
            "schema": self.schema_.to_dict(),
        }


class RequestBody(BaseModel):
    """Request body keyed by content type."""

    description: str = ""
    content: dict[str, SchemaType] = Field(default_factory=dict)

    def set_content(self, content_type: str, schema: SchemaType) -> RequestBody:
        self.content[content_type] = schema
        return self

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        if self.description:
            data["description"] = self.description
        data["content"] = {
            content_type: {"schema": schema.to_dict()}
            for content_type, schema in self.content.items()
        }
        return data


class Response(BaseModel):
    """A response entry supplied by the response-resolution collaborator."""

    code: Union[int, str]
    description: str = ""
    content: dict[str, SchemaType] = Field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"description": self.description}
        if self.content:
            data["content"] = {
                content_type: {"schema": schema.to_dict()}
                for content_type, schema in self.content.items()
            }
        return data


class Operation(BaseModel):
    """The resolved document entry for one ``(path, method)`` pair.

    Tags keep their order and are never deduplicated.
    """

    method: str
    tags: list[str] = Field(default_factory=list)
    summary: str = ""
    description: str = ""
    parameters: list[Parameter] = Field(default_factory=list)
    request_body: Optional[RequestBody] = None
    responses: list[Response] = Field(default_factory=list)

    def add_parameters(self, parameters: list[Parameter]) -> Operation:
        """Append *parameters*, keeping ``(name, location)`` unique.

        A parameter whose name and location are already taken replaces the
        existing one in place.
        """
        for param in parameters:
            existing = self.find_parameter(param.name, param.location)
            if existing is None:
                self.parameters.append(param)
                continue
            logger.debug(
                "Replacing %s parameter '%s' on %s operation",
                param.location.value,
                param.name,
                self.method.upper(),
            )
            self.parameters[self.parameters.index(existing)] = param
        return self

    def add_response(self, response: Response) -> Operation:
        self.responses.append(response)
        return self

    def find_parameter(self, name: str, location: ParameterLocation) -> Optional[Parameter]:
        for param in self.parameters:
            if param.name == name and param.location == location:
                return param
        return None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "tags": list(self.tags),
            "summary": self.summary,
            "description": self.description,
            "parameters": [param.to_dict() for param in self.parameters],
        }
        if self.request_body is not None:
            data["requestBody"] = self.request_body.to_dict()
        data["responses"] = {
            str(response.code): response.to_dict() for response in self.responses
        }
        return data


class PathItem(BaseModel):
    """All operations registered under one normalized path, keyed by method."""

    path: str
    operations: dict[str, Operation] = Field(default_factory=dict)

    def add_operation(self, operation: Operation) -> PathItem:
        """Attach *operation* under its method; a second one for the same method replaces the first."""
        if operation.method in self.operations:
            logger.debug(
                "Replacing %s operation on '%s'", operation.method.upper(), self.path
            )
        self.operations[operation.method] = operation
        return self

    def to_dict(self) -> dict[str, Any]:
        return {method: op.to_dict() for method, op in self.operations.items()}


class InfoObject(BaseModel):
    title: str
    version: str = "0.0.1"


class Server(BaseModel):
    url: str
    description: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"url": self.url}
        if self.description:
            data["description"] = self.description
        return data


class Components(BaseModel):
    """Reusable schemas referenced from operations via ``$ref``."""

    schemas: dict[str, SchemaType] = Field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "schemas": {name: schema.to_dict() for name, schema in self.schemas.items()}
        }


class Document(BaseModel):
    """The assembled API specification for one generation run.

    See Also:
        :class:`~routespec.document.DocumentAssembler`: Populates a document
        from resolved operations.
    """

    openapi: str = "3.1.0"
    info: InfoObject
    servers: list[Server] = Field(default_factory=list)
    paths: dict[str, PathItem] = Field(default_factory=dict)
    components: Components = Field(default_factory=Components)

    def add_server(self, server: Server) -> Document:
        self.servers.append(server)
        return self

    def add_path(self, path: str) -> PathItem:
        """Return the entry for *path*, creating it on first use."""
        if path not in self.paths:
            self.paths[path] = PathItem(path=path)
        return self.paths[path]

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "openapi": self.openapi,
            "info": self.info.model_dump(),
            "servers": [server.to_dict() for server in self.servers],
            "paths": {path: item.to_dict() for path, item in self.paths.items()},
        }
        if self.components.schemas:
            data["components"] = self.components.to_dict()
        return data
