"""Shared test fixtures for routespec.

Provides a route factory for building class-based route descriptors, a fresh
resolution context, and the path to the JSON route manifest fixture. These
fixtures are automatically discovered by pytest and available to all test
modules without explicit imports.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Optional

import pytest

from routespec.document import ComponentsRepository, make_document
from routespec.config import GeneratorConfig
from routespec.models import (
    ClassInfo,
    DocBlock,
    HandlerInfo,
    HandlerParameter,
    RouteDescriptor,
)
from routespec.registry import IdentifierRegistry, ResolutionContext


FIXTURES_DIR = Path(__file__).parent / "fixtures"


# ---------------------------------------------------------------------------
# Route descriptors
# ---------------------------------------------------------------------------


RouteFactory = Callable[..., RouteDescriptor]


@pytest.fixture
def make_route() -> RouteFactory:
    """Factory for class-based routes on ``App.Http.Controllers.<controller>``.

    ``params`` is a list of ``(name, type_name)`` pairs; positions follow the
    list order. Any other keyword is forwarded to :class:`HandlerInfo`.
    """

    def _make(
        method: str,
        uri: str,
        params: Optional[list[tuple[str, Optional[str]]]] = None,
        controller: str = "UserController",
        doc: Optional[DocBlock] = None,
        class_doc: Optional[DocBlock] = None,
        middleware: Optional[list[str]] = None,
        name: Optional[str] = None,
        **handler_kwargs: Any,
    ) -> RouteDescriptor:
        parameters = [
            HandlerParameter(name=param_name, type_name=type_name, position=i)
            for i, (param_name, type_name) in enumerate(params or [])
        ]
        handler = HandlerInfo(
            class_info=ClassInfo(
                name=f"App.Http.Controllers.{controller}",
                imports={"User": "App.Models.User"},
                doc=class_doc,
            ),
            method="handle",
            parameters=parameters,
            doc=doc,
            **handler_kwargs,
        )
        return RouteDescriptor(
            methods=[method],
            uri=uri,
            name=name,
            middleware=["api"] if middleware is None else middleware,
            handler=handler,
        )

    return _make


@pytest.fixture
def closure_route() -> RouteDescriptor:
    """A route whose handler is a closure (no class, no method)."""
    return RouteDescriptor(
        methods=["GET"],
        uri="api/ping",
        middleware=["api"],
        handler=HandlerInfo(),
    )


# ---------------------------------------------------------------------------
# Resolution context
# ---------------------------------------------------------------------------


@pytest.fixture
def context() -> ResolutionContext:
    """A fresh document, components repository, and identifier registry."""
    document = make_document(GeneratorConfig())
    components = ComponentsRepository(document.components)
    return ResolutionContext(
        document=document,
        components=components,
        identifiers=IdentifierRegistry(components),
    )


# ---------------------------------------------------------------------------
# Manifest fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def manifest_path() -> Path:
    return FIXTURES_DIR / "routes.json"
