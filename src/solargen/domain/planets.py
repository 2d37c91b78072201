# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Planet occupancy: fill an orbit host's slots with planets.

Slots are visited in increasing distance. Each slot gets its own fork of
the planet stream whether or not it is filled, so the fate of one slot
never shifts the draws of the next. Occupancy is a single draw against
the slot's fill probability; the body itself comes from the planet
collaborator, biased by orbital zone.
"""
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING

from solargen.domain.bodies import BodyKind, CelestialBody, Orbit
from solargen.domain.hierarchy import OrbitHost
from solargen.domain.orbit_slots import OrbitSlot
from solargen.domain.orbital_mechanics import (
    OrbitalZone,
    mutual_hill_radius_m,
    orbital_period_s,
    orbits_overlap,
    perturbation_strength,
)
from solargen.domain.random_stream import RandomStream

if TYPE_CHECKING:
    from solargen.ports import PlanetGenerator

_log = logging.getLogger(__name__)

GIANT_CLASSES: tuple[str, ...] = ("gas_giant", "ice_giant")
PLANET_LETTERS = "bcdefghijklmnopqrstuvwxyz"

_DEFAULT_ZONE_WEIGHTS: tuple[tuple[OrbitalZone, tuple[tuple[str, float], ...]], ...] = (
    (OrbitalZone.HOT, (
        ("rocky", 0.45), ("super_earth", 0.30), ("dwarf", 0.15),
        ("gas_giant", 0.08), ("ice_giant", 0.02),
    )),
    (OrbitalZone.TEMPERATE, (
        ("rocky", 0.35), ("super_earth", 0.30), ("dwarf", 0.10),
        ("gas_giant", 0.15), ("ice_giant", 0.10),
    )),
    (OrbitalZone.COLD, (
        ("rocky", 0.08), ("super_earth", 0.10), ("dwarf", 0.15),
        ("gas_giant", 0.35), ("ice_giant", 0.32),
    )),
)


@dataclass(frozen=True)
class PlanetConfig:
    """Tunables for planet placement."""
    zone_class_weights: tuple[tuple[OrbitalZone, tuple[tuple[str, float], ...]], ...] = (
        _DEFAULT_ZONE_WEIGHTS
    )
    eccentricity_jitter: float = 0.3
    max_eccentricity: float = 0.6
    inclination_sigma_deg: float = 1.5
    min_mutual_hill_separation: float = 7.0
    perturbation_reference: float = 0.01

    def __post_init__(self) -> None:
        if not 0.0 <= self.eccentricity_jitter < 1.0:
            raise ValueError(f"eccentricity_jitter must be in [0, 1), got {self.eccentricity_jitter}")
        if not 0.0 <= self.max_eccentricity < 1.0:
            raise ValueError(f"max_eccentricity must be in [0, 1), got {self.max_eccentricity}")
        if self.min_mutual_hill_separation < 0.0:
            raise ValueError("min_mutual_hill_separation must be >= 0")
        if self.perturbation_reference <= 0.0:
            raise ValueError("perturbation_reference must be > 0")

    def weights_for(self, zone: OrbitalZone) -> dict[str, float]:
        for z, weights in self.zone_class_weights:
            if z is zone:
                return dict(weights)
        raise ValueError(f"no class weights configured for zone {zone.value}")


@dataclass(frozen=True)
class PlanetRequest:
    """What the planet collaborator is asked to build for one slot."""
    body_id: str
    host_id: str
    slot_id: str
    zone: OrbitalZone
    orbit: Orbit
    class_weights: Mapping[str, float]
    host_mass_kg: float
    host_luminosity_lsun: float
    age_gyr: float = 4.6
    metallicity: float = 0.0
    system_seed: int = 0


@dataclass(frozen=True)
class PlanetPopulation:
    """Planets placed around one host, innermost first."""
    host_id: str
    planets: list[CelestialBody] = field(default_factory=list)
    rejected_slot_ids: list[str] = field(default_factory=list)


def zone_bias(
    zone: OrbitalZone,
    perturbation: float = 0.0,
    metallicity: float = 0.0,
    config: PlanetConfig | None = None,
) -> dict[str, float]:
    """
    Class weights for a slot.

    Giants are damped by companion perturbation and boosted by
    metallicity (giant occurrence ∝ 10^[Fe/H]).
    """
    config = config or PlanetConfig()
    weights = config.weights_for(zone)
    damping = max(0.1, 1.0 - perturbation / config.perturbation_reference)
    boost = 10.0 ** max(-1.0, min(1.0, metallicity))
    for name in GIANT_CLASSES:
        if name in weights:
            weights[name] *= damping * boost
    return weights


def host_perturbation(host: OrbitHost, axis_m: float) -> float:
    """Strongest companion perturbation at a given distance from the host."""
    return max(
        (perturbation_strength(axis_m, p.distance_m, p.mass_kg, host.mass_kg) for p in host.perturbers),
        default=0.0,
    )


def populate_planets(
    host: OrbitHost,
    slots: list[OrbitSlot],
    generator: "PlanetGenerator",
    stream: RandomStream,
    config: PlanetConfig | None = None,
    age_gyr: float = 4.6,
    metallicity: float = 0.0,
    system_seed: int = 0,
) -> PlanetPopulation:
    """
    Fill a host's slots with planets.

    Args:
        host: The orbit host owning ``slots``.
        slots: Slots from generate_orbit_slots; bound in place.
        generator: Planet body collaborator.
        stream: Stream dedicated to this host's planets.
        config: Placement tunables.
        age_gyr: System age forwarded to the collaborator.
        metallicity: [Fe/H] forwarded to the collaborator and used for bias.
        system_seed: Root seed recorded on each planet.

    Returns:
        PlanetPopulation with planets in increasing distance.
    """
    config = config or PlanetConfig()
    population = PlanetPopulation(host_id=host.id)
    previous: CelestialBody | None = None

    for slot in sorted(slots, key=lambda s: s.semi_major_axis_m):
        slot_stream = stream.fork()
        roll = slot_stream.uniform()
        if not slot.is_available or roll >= slot.fill_probability:
            continue

        orbit = _slot_orbit(slot, slot_stream, config)
        request = PlanetRequest(
            body_id=f"planet-{host.node_id}-{slot.index}",
            host_id=host.id,
            slot_id=slot.id,
            zone=slot.zone,
            orbit=orbit,
            class_weights=zone_bias(
                slot.zone, host_perturbation(host, slot.semi_major_axis_m), metallicity, config,
            ),
            host_mass_kg=host.mass_kg,
            host_luminosity_lsun=host.luminosity_lsun,
            age_gyr=age_gyr,
            metallicity=metallicity,
            system_seed=system_seed,
        )
        body = generator.generate(request, host, slot_stream)
        if body is None or body.kind is not BodyKind.PLANET or body.mass_kg <= 0.0:
            population.rejected_slot_ids.append(slot.id)
            continue

        planet = replace(
            body,
            id=request.body_id,
            parent_id=host.id,
            seed=system_seed,
            orbit=replace(orbit, period_s=orbital_period_s(
                orbit.semi_major_axis_m, host.mass_kg, body.mass_kg,
            )),
        )
        if previous is not None and _too_close(previous, planet, host.mass_kg, config):
            _log.debug("slot %s rejected: too close to %s", slot.id, previous.id)
            population.rejected_slot_ids.append(slot.id)
            continue

        slot.bind(planet.id)
        population.planets.append(planet)
        previous = planet

    _log.debug("host %s: %d planets", host.id, len(population.planets))
    return population


def _slot_orbit(slot: OrbitSlot, stream: RandomStream, config: PlanetConfig) -> Orbit:
    jitter = 1.0 + config.eccentricity_jitter * stream.uniform(-1.0, 1.0)
    eccentricity = min(config.max_eccentricity, max(0.0, slot.eccentricity * jitter))
    return Orbit(
        semi_major_axis_m=slot.semi_major_axis_m,
        eccentricity=eccentricity,
        inclination_deg=abs(stream.normal(0.0, config.inclination_sigma_deg)),
        ascending_node_deg=stream.uniform(0.0, 360.0),
        argument_periapsis_deg=stream.uniform(0.0, 360.0),
        mean_anomaly_deg=stream.uniform(0.0, 360.0),
    )


def _too_close(
    inner: CelestialBody,
    outer: CelestialBody,
    central_mass_kg: float,
    config: PlanetConfig,
) -> bool:
    a_in, a_out = inner.orbit, outer.orbit
    if orbits_overlap(a_in.semi_major_axis_m, a_in.eccentricity,
                      a_out.semi_major_axis_m, a_out.eccentricity):
        return True
    hill = mutual_hill_radius_m(
        a_in.semi_major_axis_m, a_out.semi_major_axis_m,
        inner.mass_kg, outer.mass_kg, central_mass_kg,
    )
    gap = a_out.semi_major_axis_m - a_in.semi_major_axis_m
    return gap < config.min_mutual_hill_separation * hill


# ── Post-processing ───────────────────────────────────────────────

def sort_by_distance(bodies: Iterable[CelestialBody]) -> list[CelestialBody]:
    return sorted(bodies, key=lambda b: (b.semi_major_axis_m, b.id))


def sort_by_mass(bodies: Iterable[CelestialBody], descending: bool = True) -> list[CelestialBody]:
    if descending:
        return sorted(bodies, key=lambda b: (-b.mass_kg, b.id))
    return sorted(bodies, key=lambda b: (b.mass_kg, b.id))


def filter_by_zone(
    planets: Iterable[CelestialBody],
    host: OrbitHost,
    zone: OrbitalZone,
) -> list[CelestialBody]:
    return [p for p in planets if p.orbit is not None and host.classify(p.semi_major_axis_m) is zone]


def filter_by_class(planets: Iterable[CelestialBody], body_class: str) -> list[CelestialBody]:
    return [p for p in planets if p.body_class == body_class]


def validate_planets_against_slots(
    planets: Iterable[CelestialBody],
    slots: Iterable[OrbitSlot],
) -> list[str]:
    """
    Consistency errors between planets and the slots that produced them.

    Every planet must be bound to exactly one stable slot of its host at
    the slot's distance, and every bound slot must point at a known planet.
    """
    errors: list[str] = []
    planets = list(planets)
    by_body: dict[str, list[OrbitSlot]] = {}
    for slot in slots:
        if slot.body_id is not None:
            by_body.setdefault(slot.body_id, []).append(slot)

    planet_ids = {p.id for p in planets}
    for planet in planets:
        bound = by_body.get(planet.id, [])
        if len(bound) != 1:
            errors.append(f"{planet.id}: bound to {len(bound)} slots")
            continue
        slot = bound[0]
        if not slot.stable:
            errors.append(f"{planet.id}: occupies unstable slot {slot.id}")
        if planet.parent_id != slot.host_id:
            errors.append(f"{planet.id}: parent {planet.parent_id} != slot host {slot.host_id}")
        if planet.orbit is None or planet.orbit.semi_major_axis_m != slot.semi_major_axis_m:
            errors.append(f"{planet.id}: orbit does not match slot {slot.id}")
    for body_id, bound in by_body.items():
        if body_id not in planet_ids and body_id.startswith("planet-"):
            errors.append(f"slot {bound[0].id}: bound to unknown planet {body_id}")
    return errors


def assign_planet_names(planets: Iterable[CelestialBody], host_name: str) -> list[CelestialBody]:
    """Letters b, c, d, ... in order of distance; numbered beyond z."""
    named: list[CelestialBody] = []
    for i, planet in enumerate(sort_by_distance(planets)):
        suffix = PLANET_LETTERS[i] if i < len(PLANET_LETTERS) else str(i + 1)
        named.append(replace(planet, name=f"{host_name} {suffix}"))
    return named
