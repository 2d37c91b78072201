# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Assembled planetary system.

A SolarSystem is a flat arena of bodies keyed by id plus the structural
pieces produced along the way (hierarchy, hosts, slots, belts). Bodies
are append-only: adding an id twice is a programming error.
"""
from dataclasses import dataclass, field

from solargen.domain.bodies import AsteroidBelt, BodyKind, CelestialBody
from solargen.domain.hierarchy import BarycenterNode, HierarchyNode, OrbitHost
from solargen.domain.orbit_slots import OrbitSlot
from solargen.domain.planets import sort_by_distance


@dataclass
class SolarSystem:
    """
    One generated system.

    Attributes:
        seed: Root seed the system was generated from.
        name: System name; star, planet and belt names derive from it.
        bodies: Every body keyed by id, in insertion order.
        root: Root of the stellar hierarchy.
        barycenters: Barycenters innermost-first.
        hosts: Usable orbit hosts keyed by id, in traversal order.
        slots: Orbit slots keyed by host id.
        belts: Asteroid belts keyed by id.
    """
    seed: int
    name: str = ""
    bodies: dict[str, CelestialBody] = field(default_factory=dict)
    root: HierarchyNode | None = None
    barycenters: tuple[BarycenterNode, ...] = ()
    hosts: dict[str, OrbitHost] = field(default_factory=dict)
    slots: dict[str, list[OrbitSlot]] = field(default_factory=dict)
    belts: dict[str, AsteroidBelt] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.bodies)

    def __contains__(self, body_id: object) -> bool:
        return body_id in self.bodies

    # ── Mutation ──────────────────────────────────────────────────

    def add_body(self, body: CelestialBody) -> None:
        if body.id in self.bodies:
            raise ValueError(f"duplicate body id: {body.id}")
        self.bodies[body.id] = body

    def add_bodies(self, bodies: list[CelestialBody]) -> None:
        for body in bodies:
            self.add_body(body)

    def add_host(self, host: OrbitHost, slots: list[OrbitSlot] | None = None) -> None:
        if host.id in self.hosts:
            raise ValueError(f"duplicate host id: {host.id}")
        self.hosts[host.id] = host
        self.slots[host.id] = list(slots or [])

    def add_belt(self, belt: AsteroidBelt) -> None:
        if belt.id in self.belts:
            raise ValueError(f"duplicate belt id: {belt.id}")
        self.belts[belt.id] = belt

    # ── Queries ───────────────────────────────────────────────────

    def body(self, body_id: str) -> CelestialBody | None:
        return self.bodies.get(body_id)

    def host(self, host_id: str) -> OrbitHost | None:
        return self.hosts.get(host_id)

    def of_kind(self, kind: BodyKind) -> list[CelestialBody]:
        return [b for b in self.bodies.values() if b.kind is kind]

    @property
    def stars(self) -> list[CelestialBody]:
        return self.of_kind(BodyKind.STAR)

    @property
    def planets(self) -> list[CelestialBody]:
        return self.of_kind(BodyKind.PLANET)

    @property
    def moons(self) -> list[CelestialBody]:
        return self.of_kind(BodyKind.MOON)

    @property
    def asteroids(self) -> list[CelestialBody]:
        return self.of_kind(BodyKind.ASTEROID)

    def children_of(self, parent_id: str) -> list[CelestialBody]:
        """Bodies whose parent is ``parent_id``, innermost first."""
        return sort_by_distance(b for b in self.bodies.values() if b.parent_id == parent_id)

    def belt_members(self, belt_id: str) -> list[CelestialBody]:
        belt = self.belts.get(belt_id)
        if belt is None:
            return []
        return [self.bodies[i] for i in belt.asteroid_ids if i in self.bodies]

    def counts(self) -> dict[str, int]:
        """Body count per kind, plus hosts and belts."""
        result = {kind.value: 0 for kind in BodyKind}
        for body in self.bodies.values():
            result[body.kind.value] += 1
        result["host"] = len(self.hosts)
        result["belt"] = len(self.belts)
        return result


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of a structural check; ``is_valid`` iff there are no errors."""
    errors: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()

    @property
    def is_valid(self) -> bool:
        return not self.errors
