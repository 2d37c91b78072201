# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Explicit memo of generated systems keyed by what produced them.

There is no module-level cache: callers own a SystemCache and decide
when to clear it. Generation is deterministic, so an entry never goes
stale for the generators and config the cache was built with.
"""
from solargen.domain.system import SolarSystem
from solargen.domain.system_generator import (
    BodyGenerators,
    GenerationConfig,
    SystemSpec,
    generate_system,
)

_CacheKey = tuple[SystemSpec, bool, bool]


class SystemCache:
    """Generate-once store for systems built with fixed generators and config."""

    def __init__(
        self,
        generators: BodyGenerators,
        config: GenerationConfig | None = None,
    ) -> None:
        self._generators = generators
        self._config = config or GenerationConfig()
        self._systems: dict[_CacheKey, SolarSystem] = {}

    def __len__(self) -> int:
        return len(self._systems)

    def __contains__(self, primary: object) -> bool:
        spec = _as_spec(primary)
        return spec is not None and any(key[0] == spec for key in self._systems)

    def get_or_generate(
        self,
        primary: SystemSpec | int,
        include_belts: bool = True,
        include_moons: bool = True,
    ) -> SolarSystem | None:
        """
        Return the cached system for ``primary`` or generate and store it.

        Failed generations (None) are not cached.
        """
        spec = _as_spec(primary)
        if spec is None:
            return None
        key = (spec, include_belts, include_moons)
        cached = self._systems.get(key)
        if cached is not None:
            return cached
        system = generate_system(
            spec, self._generators,
            include_belts=include_belts, include_moons=include_moons, config=self._config,
        )
        if system is not None:
            self._systems[key] = system
        return system

    def clear(self) -> None:
        self._systems.clear()


def _as_spec(primary: object) -> SystemSpec | None:
    if isinstance(primary, SystemSpec):
        return primary
    if isinstance(primary, int) and not isinstance(primary, bool) and primary >= 0:
        return SystemSpec(seed=primary)
    return None
