"""Load pre-materialized route descriptors from a JSON or YAML manifest.

A manifest is either a list of route objects or a mapping with a ``routes``
key holding that list. Each route object is validated into a
:class:`~routespec.models.RouteDescriptor`::

    routes:
      - methods: [PUT]
        uri: api/users/{user}
        middleware: [api]
        handler:
          class_info: {name: App.Http.Controllers.UserController}
          method: update
          parameters:
            - {name: user, type_name: User}

Rules given in a manifest are always literal mappings; callables only come
from in-process metadata providers.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Union

import yaml
from pydantic import ValidationError

from routespec.exceptions import ManifestError
from routespec.models import RouteDescriptor


def load_manifest(source: Union[str, Path]) -> list[RouteDescriptor]:
    """Read and validate the route manifest at *source*.

    Args:
        source: Path to a ``.json``, ``.yaml`` or ``.yml`` file. Other
            extensions are parsed by content.

    Returns:
        The route descriptors, in manifest order.

    Raises:
        ManifestError: If the file is missing, empty, unparsable, or a route
            fails validation.
    """
    path = Path(source)
    if not path.is_file():
        raise ManifestError(f"Route manifest not found: {path}")
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ManifestError(f"Failed to read route manifest {path}: {exc}") from exc
    if not content.strip():
        raise ManifestError(f"Route manifest is empty: {path}")

    suffix = path.suffix.lower()
    hint = "json" if suffix == ".json" else "yaml" if suffix in (".yaml", ".yml") else ""
    return parse_manifest(_parse_content(content, hint))


def parse_manifest(data: Any) -> list[RouteDescriptor]:
    """Validate already-parsed manifest data into route descriptors."""
    if isinstance(data, dict):
        data = data.get("routes", [])
    if not isinstance(data, list):
        raise ManifestError(
            f"Route manifest must be a list of routes (got {type(data).__name__})"
        )

    routes = []
    for index, item in enumerate(data):
        try:
            routes.append(RouteDescriptor.model_validate(item))
        except ValidationError as exc:
            raise ManifestError(f"Invalid route at index {index}: {exc}") from exc
    return routes


def _parse_content(content: str, hint: str = "") -> Any:
    """Parse content as JSON, falling back to YAML unless *hint* is ``json``."""
    if hint != "yaml":
        try:
            return json.loads(content)
        except json.JSONDecodeError as exc:
            if hint == "json":
                raise ManifestError(f"Invalid JSON: {exc}") from exc

    try:
        return yaml.safe_load(content)
    except yaml.YAMLError as exc:
        raise ManifestError(f"Failed to parse route manifest as JSON or YAML: {exc}") from exc
