# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Asteroid belt occupancy in the gaps between planetary orbits.

After planets are placed, each maximal run of available slots that lies
between two planets or beyond the outermost one is a belt candidate.
A belt reserves up to ``max_belt_slots`` of its run, is clipped clear of
neighbouring planets' periapsis–apoapsis ranges, and is populated with a
few major asteroids plus a power-law population of minor ones. Belts
beyond the frost line are mostly icy; inside it they are mostly rocky.
"""
import logging
from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING

from solargen.domain.bodies import AsteroidBelt, BodyKind, CelestialBody, Orbit
from solargen.domain.hierarchy import OrbitHost
from solargen.domain.orbit_slots import OrbitSlot
from solargen.domain.orbital_mechanics import orbital_period_s
from solargen.domain.planets import GIANT_CLASSES, sort_by_distance, sort_by_mass
from solargen.domain.random_stream import RandomStream

if TYPE_CHECKING:
    from solargen.ports import AsteroidGenerator

_log = logging.getLogger(__name__)

MAJOR_ASTEROID_NAMES: tuple[str, ...] = (
    "Aster", "Brontes", "Calyx", "Doris", "Elpis", "Freya", "Galene", "Hestia",
    "Ione", "Kallisto", "Leto", "Metis", "Nysa", "Orithyia", "Pales", "Rhode",
)


@dataclass(frozen=True)
class BeltConfig:
    """Tunables for belt placement and population."""
    belt_probability: float = 0.3
    giant_neighbour_boost: float = 0.35
    beyond_frost_boost: float = 0.2
    max_belts_per_host: int = 2
    max_belt_slots: int = 2
    edge_fraction: float = 0.15
    planet_clearance: float = 0.1
    major_count: tuple[int, int] = (2, 5)
    minor_count: tuple[int, int] = (12, 40)
    major_mass_fraction: float = 0.5
    inner_belt_mass_kg: tuple[float, float] = (1.0e20, 5.0e21)
    outer_belt_mass_kg: tuple[float, float] = (1.0e21, 5.0e22)
    mass_power_law_alpha: float = 1.8
    max_eccentricity: float = 0.12
    max_inclination_deg: float = 12.0
    rocky_composition_weights: tuple[tuple[str, float], ...] = (
        ("rocky", 0.60), ("carbonaceous", 0.25), ("metallic", 0.15),
    )
    icy_composition_weights: tuple[tuple[str, float], ...] = (
        ("icy", 0.65), ("carbonaceous", 0.25), ("rocky", 0.10),
    )

    def __post_init__(self) -> None:
        if not 0.0 <= self.belt_probability <= 1.0:
            raise ValueError(f"belt_probability must be in [0, 1], got {self.belt_probability}")
        if self.max_belts_per_host < 0:
            raise ValueError("max_belts_per_host must be >= 0")
        if self.max_belt_slots < 1:
            raise ValueError("max_belt_slots must be >= 1")
        if not 0.0 <= self.edge_fraction < 1.0:
            raise ValueError(f"edge_fraction must be in [0, 1), got {self.edge_fraction}")
        if not 0.0 <= self.planet_clearance < 1.0:
            raise ValueError(f"planet_clearance must be in [0, 1), got {self.planet_clearance}")
        for name in ("major_count", "minor_count"):
            lo, hi = getattr(self, name)
            if lo < 0 or hi < lo:
                raise ValueError(f"{name} must satisfy 0 <= lo <= hi")
        if not 0.0 < self.major_mass_fraction < 1.0:
            raise ValueError("major_mass_fraction must be in (0, 1)")
        if not 0.0 <= self.max_eccentricity < 1.0:
            raise ValueError("max_eccentricity must be in [0, 1)")


@dataclass(frozen=True)
class AsteroidRequest:
    """What the asteroid collaborator is asked to build."""
    body_id: str
    belt_id: str
    host_id: str
    orbit: Orbit
    mass_kg: float
    composition: str
    major: bool
    system_seed: int = 0


@dataclass(frozen=True)
class BeltPopulation:
    """Belts around one host and the asteroids populating them."""
    host_id: str
    belts: list[AsteroidBelt] = field(default_factory=list)
    asteroids: list[CelestialBody] = field(default_factory=list)


@dataclass(frozen=True)
class _BeltCandidate:
    slots: tuple[OrbitSlot, ...]
    inner_planet: CelestialBody | None
    outer_planet: CelestialBody | None


def belt_candidates(
    slots: list[OrbitSlot],
    planets: Iterable[CelestialBody],
) -> list[_BeltCandidate]:
    """
    Maximal runs of available slots between or beyond planets.

    Runs entirely inside the innermost planet are skipped when the host
    has planets.
    """
    placed = sort_by_distance(p for p in planets if p.orbit is not None)
    runs: list[list[OrbitSlot]] = [[]]
    for slot in sorted(slots, key=lambda s: s.semi_major_axis_m):
        if slot.is_available:
            runs[-1].append(slot)
        elif runs[-1]:
            runs.append([])

    candidates: list[_BeltCandidate] = []
    for run in runs:
        if not run:
            continue
        first, last = run[0].semi_major_axis_m, run[-1].semi_major_axis_m
        inner = [p for p in placed if p.semi_major_axis_m < first]
        outer = [p for p in placed if p.semi_major_axis_m > last]
        if placed and not inner:
            continue
        candidates.append(_BeltCandidate(
            slots=tuple(run),
            inner_planet=inner[-1] if inner else None,
            outer_planet=outer[0] if outer else None,
        ))
    return candidates


def populate_belts(
    host: OrbitHost,
    slots: list[OrbitSlot],
    planets: list[CelestialBody],
    generator: "AsteroidGenerator",
    stream: RandomStream,
    config: BeltConfig | None = None,
    system_seed: int = 0,
) -> BeltPopulation:
    """
    Place and populate asteroid belts around one host.

    Args:
        host: Orbit host owning ``slots``.
        slots: The host's slots, with planets already bound.
        planets: Planets bound to those slots.
        generator: Asteroid body collaborator.
        stream: Stream dedicated to this host's belts; one fork per candidate.
        config: Placement tunables.
        system_seed: Root seed recorded on each asteroid.

    Returns:
        BeltPopulation; reserved slots are bound to the belt id.
    """
    config = config or BeltConfig()
    population = BeltPopulation(host_id=host.id)

    for candidate in belt_candidates(slots, planets):
        belt_stream = stream.fork()
        if len(population.belts) >= config.max_belts_per_host:
            continue
        if belt_stream.uniform() >= _belt_probability(candidate, host, config):
            continue

        reserved = candidate.slots[:config.max_belt_slots]
        inner, outer = _belt_edges(reserved, candidate, host, config)
        if outer <= inner:
            continue

        belt_id = f"belt-{host.node_id}-{reserved[0].index}"
        icy = inner > host.frost_line_m
        weights = dict(config.icy_composition_weights if icy else config.rocky_composition_weights)
        mass_range = config.outer_belt_mass_kg if icy else config.inner_belt_mass_kg
        total_mass = belt_stream.log_uniform(*mass_range)

        asteroids = _populate(
            belt_id, host, inner, outer, total_mass, weights, generator, belt_stream, config, system_seed,
        )
        if not asteroids:
            continue
        for slot in reserved:
            slot.bind(belt_id)

        majors = tuple(a.id for a in asteroids if a.properties.get("major", False))
        population.belts.append(AsteroidBelt(
            id=belt_id,
            host_id=host.id,
            name="",
            inner_edge_m=inner,
            outer_edge_m=outer,
            total_mass_kg=sum(a.mass_kg for a in asteroids),
            composition=dominant_composition(asteroids),
            slot_ids=tuple(s.id for s in reserved),
            asteroid_ids=tuple(a.id for a in asteroids),
            major_asteroid_ids=majors,
        ))
        population.asteroids.extend(asteroids)

    _log.debug("host %s: %d belts, %d asteroids",
               host.id, len(population.belts), len(population.asteroids))
    return population


def _belt_probability(candidate: _BeltCandidate, host: OrbitHost, config: BeltConfig) -> float:
    p = config.belt_probability
    outer = candidate.outer_planet
    if outer is not None and outer.body_class in GIANT_CLASSES:
        p += config.giant_neighbour_boost
    if outer is None and candidate.slots[0].semi_major_axis_m > host.frost_line_m:
        p += config.beyond_frost_boost
    return min(1.0, p)


def _belt_edges(
    reserved: tuple[OrbitSlot, ...],
    candidate: _BeltCandidate,
    host: OrbitHost,
    config: BeltConfig,
) -> tuple[float, float]:
    inner = reserved[0].semi_major_axis_m * (1.0 - config.edge_fraction)
    outer = reserved[-1].semi_major_axis_m * (1.0 + config.edge_fraction)
    inner = max(inner, host.inner_stability_m)
    outer = min(outer, host.outer_stability_m)
    if candidate.inner_planet is not None and candidate.inner_planet.orbit is not None:
        inner = max(inner, candidate.inner_planet.orbit.apoapsis_m * (1.0 + config.planet_clearance))
    if candidate.outer_planet is not None and candidate.outer_planet.orbit is not None:
        outer = min(outer, candidate.outer_planet.orbit.periapsis_m * (1.0 - config.planet_clearance))
    return inner, outer


def _populate(
    belt_id: str,
    host: OrbitHost,
    inner: float,
    outer: float,
    total_mass: float,
    composition_weights: dict[str, float],
    generator: "AsteroidGenerator",
    stream: RandomStream,
    config: BeltConfig,
    system_seed: int,
) -> list[CelestialBody]:
    n_major = stream.integers(config.major_count[0], config.major_count[1] + 1)
    n_minor = stream.integers(config.minor_count[0], config.minor_count[1] + 1)

    masses: list[tuple[float, bool]] = []
    remaining = total_mass * config.major_mass_fraction
    for _ in range(n_major):
        share = remaining * stream.uniform(0.2, 0.5)
        masses.append((share, True))
        remaining -= share
    smallest_major = min((m for m, _ in masses), default=total_mass * 1e-3)
    minor_hi = min(smallest_major, total_mass * 1e-3)
    for _ in range(n_minor):
        masses.append((stream.power_law(minor_hi * 1e-4, minor_hi, config.mass_power_law_alpha), False))

    asteroids: list[CelestialBody] = []
    for k, (mass, major) in enumerate(masses):
        axis = stream.uniform(inner, outer)
        e_max = min(config.max_eccentricity, (axis - inner) / axis, (outer - axis) / axis)
        orbit = Orbit(
            semi_major_axis_m=axis,
            eccentricity=stream.uniform(0.0, max(e_max, 0.0)),
            inclination_deg=stream.uniform(0.0, config.max_inclination_deg),
            ascending_node_deg=stream.uniform(0.0, 360.0),
            argument_periapsis_deg=stream.uniform(0.0, 360.0),
            mean_anomaly_deg=stream.uniform(0.0, 360.0),
        )
        request = AsteroidRequest(
            body_id=f"{belt_id}-ast-{k}",
            belt_id=belt_id,
            host_id=host.id,
            orbit=orbit,
            mass_kg=mass,
            composition=stream.weighted_choice(composition_weights),
            major=major,
            system_seed=system_seed,
        )
        body = generator.generate(request, host, stream)
        if body is None or body.kind is not BodyKind.ASTEROID:
            continue
        asteroids.append(replace(
            body,
            id=request.body_id,
            parent_id=host.id,
            seed=system_seed,
            orbit=replace(orbit, period_s=orbital_period_s(axis, host.mass_kg, body.mass_kg)),
            properties={**body.properties, "belt_id": belt_id, "major": major},
        ))
    return asteroids


# ── Post-processing ───────────────────────────────────────────────

def dominant_composition(asteroids: Iterable[CelestialBody]) -> str:
    """Composition carrying the most mass; ties resolved alphabetically."""
    totals: dict[str, float] = {}
    for a in asteroids:
        totals[a.composition] = totals.get(a.composition, 0.0) + a.mass_kg
    if not totals:
        return ""
    return min(totals, key=lambda c: (-totals[c], c))


def filter_by_composition(asteroids: Iterable[CelestialBody], composition: str) -> list[CelestialBody]:
    return [a for a in asteroids if a.composition == composition]


def major_asteroids(asteroids: Iterable[CelestialBody]) -> list[CelestialBody]:
    return [a for a in asteroids if a.properties.get("major", False)]


def validate_belts(
    belts: Iterable[AsteroidBelt],
    planets: Iterable[CelestialBody],
    asteroids: Iterable[CelestialBody],
) -> list[str]:
    """Errors for belts overlapping planet orbits or asteroids outside their belt."""
    errors: list[str] = []
    planets = [p for p in planets if p.orbit is not None]
    by_id = {a.id: a for a in asteroids}
    for belt in belts:
        if belt.outer_edge_m <= belt.inner_edge_m:
            errors.append(f"{belt.id}: empty annulus")
        for planet in planets:
            if planet.parent_id != belt.host_id:
                continue
            if planet.orbit.periapsis_m <= belt.outer_edge_m and planet.orbit.apoapsis_m >= belt.inner_edge_m:
                errors.append(f"{belt.id}: overlaps orbit of {planet.id}")
        for asteroid_id in belt.asteroid_ids:
            asteroid = by_id.get(asteroid_id)
            if asteroid is None:
                errors.append(f"{belt.id}: missing asteroid {asteroid_id}")
            elif not belt.contains(asteroid.semi_major_axis_m):
                errors.append(f"{asteroid_id}: outside {belt.id}")
    return errors


def assign_asteroid_names(asteroids: Iterable[CelestialBody], prefix: str) -> list[CelestialBody]:
    """
    Catalogue numbers by descending mass.

    Major asteroids take a proper name, minor ones a numbered designation.
    """
    named: list[CelestialBody] = []
    for n, asteroid in enumerate(sort_by_mass(asteroids), start=1):
        if asteroid.properties.get("major", False):
            proper = MAJOR_ASTEROID_NAMES[(n - 1) % len(MAJOR_ASTEROID_NAMES)]
            named.append(replace(asteroid, name=f"({n}) {proper}"))
        else:
            named.append(replace(asteroid, name=f"{prefix} {n:04d}"))
    return named


def assign_belt_names(belts: Iterable[AsteroidBelt], host_name: str) -> list[AsteroidBelt]:
    ordered = sorted(belts, key=lambda b: (b.inner_edge_m, b.id))
    return [replace(belt, name=f"{host_name} Belt {i + 1}") for i, belt in enumerate(ordered)]
