"""Generator configuration with file loading and precedence resolution.

:class:`GeneratorConfig` holds every serialisable setting of a generation
run. Callables (route filter, hooks) are not configuration in this sense and
travel separately in :class:`~routespec.hooks.Extensions`.

Precedence, high to low, as applied by :func:`resolve_config`:

1. Environment variables (``ROUTESPEC_TITLE``, ``ROUTESPEC_VERSION``,
   ``ROUTESPEC_SERVER_URL``)
2. Config file (JSON or YAML), when a path is given
3. Defaults
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Optional, Union

import yaml
from pydantic import BaseModel, Field, ValidationError

from routespec.exceptions import ConfigError

_ENV_OVERRIDES = {
    "ROUTESPEC_TITLE": "title",
    "ROUTESPEC_VERSION": "version",
    "ROUTESPEC_SERVER_URL": "server_url",
}

# Bare names match only unqualified type names; qualified names match exactly,
# with ``.`` and ``\`` accepted as namespace separators.
DEFAULT_REQUEST_TYPE_NAMES = ("Request", "Illuminate.Http.Request")


class GeneratorConfig(BaseModel):
    """Settings for one document generation run."""

    title: str = Field(default="API", description="Info title of the document")
    version: str = Field(default="0.0.1", description="Info version of the document")
    openapi_version: str = Field(default="3.1.0", description="Value of the `openapi` field")
    server_url: str = Field(default="/api", description="URL of the single server entry")
    path_prefix: str = Field(
        default="api/", description="Prefix stripped from route URIs to build path keys"
    )
    middleware_group: str = Field(
        default="api", description="Middleware group admitted by the default route filter"
    )
    docs_route_prefix: str = Field(
        default="api-docs",
        description="Routes whose name starts with this prefix are never documented",
    )
    request_type_names: list[str] = Field(
        default_factory=lambda: list(DEFAULT_REQUEST_TYPE_NAMES),
        description=(
            "Type names, bare or fully qualified, treated as the inbound-request abstraction"
        ),
    )
    query_methods: list[str] = Field(
        default_factory=lambda: ["get", "head"],
        description="Methods whose rule-derived fields become query parameters",
    )


def load_config(path: Union[str, Path]) -> GeneratorConfig:
    """Load a :class:`GeneratorConfig` from a JSON or YAML file.

    The format is chosen from the extension (``.yaml``/``.yml`` are YAML,
    anything else is JSON).

    Raises:
        ConfigError: If the file is missing, unparsable, not a mapping, or
            fails Pydantic validation.
    """
    config_path = Path(path)
    if not config_path.is_file():
        raise ConfigError(f"Config file not found: {config_path}")
    try:
        text = config_path.read_text(encoding="utf-8")
        if config_path.suffix.lower() in (".yaml", ".yml"):
            data = yaml.safe_load(text) or {}
        else:
            data = json.loads(text)
    except (OSError, json.JSONDecodeError, yaml.YAMLError) as exc:
        raise ConfigError(f"Invalid config at {config_path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(
            f"Config at {config_path} must be a mapping (got {type(data).__name__})"
        )
    try:
        return GeneratorConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid config at {config_path}: {exc}") from exc


def resolve_config(path: Optional[Union[str, Path]] = None) -> GeneratorConfig:
    """Resolve the effective configuration: env > file > defaults."""
    config = load_config(path) if path is not None else GeneratorConfig()

    overrides: dict[str, Any] = {}
    for env_var, field_name in _ENV_OVERRIDES.items():
        value = os.environ.get(env_var)
        if value:
            overrides[field_name] = value

    if overrides:
        config = config.model_copy(update=overrides)
    return config
