"""routespec -- Generate an OpenAPI-style document from discovered route handlers.

The host application supplies its route table as
:class:`~routespec.models.RouteDescriptor` objects, already enriched with
handler metadata (class, signature, documentation blocks, captured validation
rules). routespec reconciles those sources into parameters and schemas, and
assembles one versioned document per run.

Typical usage::

    from routespec import Generator, load_manifest

    document = Generator().generate(load_manifest("routes.json"))
    tree = document.to_dict()

Modules:
    models: Pydantic models for inputs and the produced document.
    types: Schema type variants.
    resolver: Route-to-operation resolution engine.
    document: Document bootstrap and assembly.
    generator: The batch entry point.
    hooks: Route filter, operation hook, and document transform.
    extractors: Rule extractor and response resolver interfaces.
    registry: Per-class identifier resolution.
    loader: Route manifest loading.
    config: Configuration loading and precedence.
    exceptions: Exception hierarchy.
"""

from routespec.config import GeneratorConfig, load_config, resolve_config
from routespec.generator import Generator
from routespec.hooks import Extensions
from routespec.loader import load_manifest

__version__ = "0.1.0"

__all__ = [
    "Extensions",
    "Generator",
    "GeneratorConfig",
    "load_config",
    "load_manifest",
    "resolve_config",
]
