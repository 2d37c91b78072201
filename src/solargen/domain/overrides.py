# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Per-body edits layered on top of a generated system.

An override targets one body of one seed. Applying overrides never
touches the input system: matched bodies are swapped into a copy via
``dataclasses.replace``. Orbits, ids and parent links are structural and
cannot be overridden; derived quantities (host zones, Hill spheres) are
not recomputed.
"""
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace
from typing import Any

from solargen.domain.system import SolarSystem

_log = logging.getLogger(__name__)

OVERRIDABLE_FIELDS: frozenset[str] = frozenset({
    "name",
    "mass_kg",
    "radius_m",
    "temperature_k",
    "luminosity_lsun",
    "body_class",
    "composition",
    "properties",
})

_POSITIVE_FIELDS = ("mass_kg", "radius_m")
_NON_NEGATIVE_FIELDS = ("temperature_k", "luminosity_lsun")


@dataclass(frozen=True)
class BodyOverride:
    """
    Edits to one body of the system generated from ``seed``.

    ``properties`` entries are merged into the body's existing
    properties; every other field is replaced outright.
    """
    seed: int
    body_id: str
    changes: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        unknown = sorted(set(self.changes) - OVERRIDABLE_FIELDS)
        if unknown:
            raise ValueError(
                f"cannot override {', '.join(unknown)} on {self.body_id}; "
                f"allowed: {', '.join(sorted(OVERRIDABLE_FIELDS))}"
            )
        for name in _POSITIVE_FIELDS + _NON_NEGATIVE_FIELDS:
            if name not in self.changes:
                continue
            value = self.changes[name]
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ValueError(f"{name} override must be a number, got {value!r}")
        for name in _POSITIVE_FIELDS:
            if name in self.changes and not self.changes[name] > 0.0:
                raise ValueError(f"{name} override must be > 0, got {self.changes[name]}")
        for name in _NON_NEGATIVE_FIELDS:
            if name in self.changes and self.changes[name] < 0.0:
                raise ValueError(f"{name} override must be >= 0, got {self.changes[name]}")
        if "properties" in self.changes and not isinstance(self.changes["properties"], Mapping):
            raise ValueError("properties override must be a mapping")


class BodyOverrides:
    """An ordered collection of overrides; later edits to a body win."""

    def __init__(self, overrides: Iterable[BodyOverride] = ()) -> None:
        self._overrides: list[BodyOverride] = list(overrides)

    def __len__(self) -> int:
        return len(self._overrides)

    def __iter__(self):
        return iter(self._overrides)

    def add(self, override: BodyOverride) -> None:
        self._overrides.append(override)

    def for_seed(self, seed: int) -> list[BodyOverride]:
        return [o for o in self._overrides if o.seed == seed]

    def apply(self, system: SolarSystem) -> SolarSystem:
        """
        Apply every override matching ``system.seed``.

        Returns:
            ``system`` itself when nothing matches; otherwise a new
            SolarSystem sharing the untouched bodies.
        """
        matching: list[BodyOverride] = []
        for override in self.for_seed(system.seed):
            if override.body_id in system.bodies:
                matching.append(override)
            else:
                _log.debug("override for unknown body %s ignored", override.body_id)
        if not matching:
            return system

        bodies = dict(system.bodies)
        for override in matching:
            body = bodies[override.body_id]
            changes = dict(override.changes)
            if "properties" in changes:
                changes["properties"] = {**body.properties, **changes["properties"]}
            bodies[override.body_id] = replace(body, **changes)

        return SolarSystem(
            seed=system.seed,
            name=system.name,
            bodies=bodies,
            root=system.root,
            barycenters=system.barycenters,
            hosts=dict(system.hosts),
            slots={host_id: [replace(s) for s in slots] for host_id, slots in system.slots.items()},
            belts=dict(system.belts),
        )
