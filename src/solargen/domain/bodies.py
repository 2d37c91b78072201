# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Celestial body value types.

Bodies live in a flat table keyed by id; parent links (planet → host,
moon → planet, asteroid → host) are plain string keys, not references.
An asteroid records its belt in ``properties["belt_id"]``.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from solargen.domain.orbital_mechanics import apoapsis_m, density_kg_m3, periapsis_m


class BodyKind(Enum):
    STAR = "star"
    PLANET = "planet"
    MOON = "moon"
    ASTEROID = "asteroid"


@dataclass(frozen=True)
class Orbit:
    """Keplerian elements at epoch zero."""
    semi_major_axis_m: float
    eccentricity: float
    inclination_deg: float = 0.0
    ascending_node_deg: float = 0.0
    argument_periapsis_deg: float = 0.0
    mean_anomaly_deg: float = 0.0
    period_s: float = 0.0

    @property
    def periapsis_m(self) -> float:
        return periapsis_m(self.semi_major_axis_m, self.eccentricity)

    @property
    def apoapsis_m(self) -> float:
        return apoapsis_m(self.semi_major_axis_m, self.eccentricity)

    @property
    def is_retrograde(self) -> bool:
        return self.inclination_deg > 90.0


@dataclass(frozen=True)
class CelestialBody:
    """
    One generated body.

    Physical detail beyond mass, radius and orbit is opaque to the
    generators and kept in ``body_class``, ``composition`` and
    ``properties``, as produced by the body-generation collaborators.
    """
    id: str
    name: str
    kind: BodyKind
    mass_kg: float
    radius_m: float
    seed: int
    orbit: Orbit | None = None
    parent_id: str | None = None
    temperature_k: float = 0.0
    luminosity_lsun: float = 0.0
    body_class: str = ""
    composition: str = ""
    properties: dict[str, Any] = field(default_factory=dict)

    @property
    def density_kg_m3(self) -> float:
        return density_kg_m3(self.mass_kg, self.radius_m)

    @property
    def semi_major_axis_m(self) -> float:
        return self.orbit.semi_major_axis_m if self.orbit is not None else 0.0


@dataclass(frozen=True)
class AsteroidBelt:
    """A reserved annulus of slots around one host, with its population."""
    id: str
    host_id: str
    name: str
    inner_edge_m: float
    outer_edge_m: float
    total_mass_kg: float
    composition: str
    slot_ids: tuple[str, ...] = ()
    asteroid_ids: tuple[str, ...] = ()
    major_asteroid_ids: tuple[str, ...] = ()

    @property
    def width_m(self) -> float:
        return self.outer_edge_m - self.inner_edge_m

    @property
    def center_m(self) -> float:
        return 0.5 * (self.inner_edge_m + self.outer_edge_m)

    def contains(self, distance_m: float) -> bool:
        return self.inner_edge_m <= distance_m <= self.outer_edge_m
