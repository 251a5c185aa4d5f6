"""Per-class identifier resolution for one generation run.

Short type names found in handler annotations (``User``, ``Resources\\UserResource``)
only make sense relative to the class they appear in. The
:class:`IdentifierRegistry` keeps a ``class name -> ClassInfo`` lookup table,
filled as the generator meets class-based routes, and resolves a short name
to a ``$ref`` into ``components.schemas``.

Registering the same class again simply overwrites the entry.
"""

from __future__ import annotations

from dataclasses import dataclass

from routespec.document import ComponentsRepository
from routespec.exceptions import UnknownClassError
from routespec.models import ClassInfo, Document
from routespec.types import ReferenceType


class IdentifierRegistry:
    """Lookup table from handler class name to its name-resolution context."""

    def __init__(self, components: ComponentsRepository) -> None:
        self._components = components
        self._classes: dict[str, ClassInfo] = {}

    def __contains__(self, class_name: object) -> bool:
        return class_name in self._classes

    def __len__(self) -> int:
        return len(self._classes)

    def register(self, class_info: ClassInfo) -> None:
        self._classes[class_info.name] = class_info

    def resolve(self, class_name: str, name: str) -> ReferenceType:
        """Resolve *name*, as written inside *class_name*, to a component reference.

        Raises:
            UnknownClassError: If *class_name* was never registered.
        """
        class_info = self._classes.get(class_name)
        if class_info is None:
            raise UnknownClassError(f"Class '{class_name}' is not registered")
        return self._components.reference(class_info.resolve_fq_name(name))


@dataclass
class ResolutionContext:
    """What a response resolver may consult while documenting a route."""

    document: Document
    components: ComponentsRepository
    identifiers: IdentifierRegistry
