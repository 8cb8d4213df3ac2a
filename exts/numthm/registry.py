from __future__ import annotations

from collections.abc import Iterable, Iterator

from sphinx.util import logging

from .constants import BUILTIN_ENVIRONMENTS
from .errors import DuplicateEnvironmentKey
from .types import EnvironmentSpec

LOGGER = logging.getLogger(__name__)


class EnvironmentRegistry:
    """Environment key -> display name and emphasis.

    Entries can only be added, never replaced or removed. Once ``freeze`` has
    been called the registry rejects further registrations.
    """

    def __init__(self) -> None:
        self._specs: dict[str, EnvironmentSpec] = {}
        self._frozen = False

    def register(self, key: str, name: str, emphasis: str) -> EnvironmentSpec:
        if self._frozen:
            raise RuntimeError("environment registry is frozen")
        existing = self._specs.get(key)
        if existing is not None:
            raise DuplicateEnvironmentKey(key, existing.name)
        spec = EnvironmentSpec(key=key, name=name, emphasis=emphasis)
        self._specs[key] = spec
        return spec

    def lookup(self, key: str) -> EnvironmentSpec | None:
        return self._specs.get(key)

    def freeze(self) -> EnvironmentRegistry:
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def keys(self) -> list[str]:
        return list(self._specs)

    def __contains__(self, key: object) -> bool:
        return key in self._specs

    def __iter__(self) -> Iterator[EnvironmentSpec]:
        return iter(self._specs.values())

    def __len__(self) -> int:
        return len(self._specs)


def build_registry(
    custom_environments: Iterable[tuple[str, str, str]] = (),
) -> EnvironmentRegistry:
    registry = EnvironmentRegistry()
    for key, name, emphasis in BUILTIN_ENVIRONMENTS:
        registry.register(key, name, emphasis)
    for key, name, emphasis in custom_environments:
        registry.register(key, name, emphasis)
        LOGGER.debug("registered custom environment %s (%s)", key, name)
    return registry.freeze()
