# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Archetype body generators.

Reference implementations of the body-generation ports. Each body is
drawn from a small table of archetypes (spectral classes, planet
classes, moon and asteroid compositions) and its physical quantities
follow from simple scaling relations. Every draw comes from the stream
handed in by the occupancy generators.
"""
import math
from dataclasses import dataclass

from solargen.domain.asteroids import AsteroidRequest
from solargen.domain.bodies import BodyKind, CelestialBody
from solargen.domain.hierarchy import OrbitHost, StarRequest
from solargen.domain.moons import MoonRequest
from solargen.domain.orbital_mechanics import (
    AstroConstants,
    effective_temperature_k,
    luminosity_from_mass_lsun,
    radius_from_mass_m,
)
from solargen.domain.planets import PlanetRequest
from solargen.domain.random_stream import RandomStream
from solargen.domain.system_generator import BodyGenerators
from solargen.ports import (
    AsteroidGenerator,
    MoonGenerator,
    PlanetGenerator,
    StarGenerator,
)


def _radius_from_density_m(mass_kg: float, density_kg_m3: float) -> float:
    return (3.0 * mass_kg / (4.0 * math.pi * density_kg_m3)) ** (1.0 / 3.0)


# ── Stars ─────────────────────────────────────────────────────────

@dataclass(frozen=True)
class SpectralClass:
    """Main-sequence class with its occurrence weight and mass range (solar masses)."""
    letter: str
    weight: float
    mass_range_msun: tuple[float, float]


SPECTRAL_CLASSES: tuple[SpectralClass, ...] = (
    SpectralClass("M", 0.600, (0.08, 0.45)),
    SpectralClass("K", 0.150, (0.45, 0.80)),
    SpectralClass("G", 0.120, (0.80, 1.04)),
    SpectralClass("F", 0.080, (1.04, 1.40)),
    SpectralClass("A", 0.040, (1.40, 2.10)),
    SpectralClass("B", 0.009, (2.10, 16.0)),
    SpectralClass("O", 0.001, (16.0, 60.0)),
)


class ArchetypeStarGenerator(StarGenerator):
    """Main-sequence stars by spectral class; a request hint forces the class."""

    def __init__(self, classes: tuple[SpectralClass, ...] = SPECTRAL_CLASSES) -> None:
        self._classes = {c.letter: c for c in classes}

    def generate(
        self,
        request: StarRequest,
        parent: None,
        stream: RandomStream,
    ) -> CelestialBody | None:
        hint = (request.spectral_hint or "")[:1].upper()
        if hint in self._classes:
            spectral = self._classes[hint]
        else:
            spectral = self._classes[stream.weighted_choice(
                {letter: c.weight for letter, c in self._classes.items()}
            )]

        lo, hi = spectral.mass_range_msun
        mass_msun = stream.log_uniform(lo, hi)
        mass = mass_msun * AstroConstants.M_SUN
        luminosity = luminosity_from_mass_lsun(mass)
        radius = radius_from_mass_m(mass)
        # Subclass 0 at the hot end of the range, 9 at the cool end.
        fraction = math.log(mass_msun / lo) / math.log(hi / lo) if hi > lo else 0.0
        subclass = min(9, max(0, int(round(9.0 * (1.0 - fraction)))))

        return CelestialBody(
            id=request.body_id,
            name="",
            kind=BodyKind.STAR,
            mass_kg=mass,
            radius_m=radius,
            seed=request.system_seed,
            temperature_k=effective_temperature_k(luminosity, radius),
            luminosity_lsun=luminosity,
            body_class=spectral.letter,
            composition="hydrogen-helium",
            properties={
                "spectral_type": f"{spectral.letter}{subclass}V",
                "age_gyr": request.age_gyr,
                "metallicity": request.metallicity,
            },
        )


# ── Planets ───────────────────────────────────────────────────────

@dataclass(frozen=True)
class PlanetArchetype:
    """Mass range (Earth masses), bulk density range and Bond albedo of a planet class."""
    name: str
    mass_range_mearth: tuple[float, float]
    density_range_kg_m3: tuple[float, float]
    albedo: float
    compositions: tuple[tuple[str, float], ...]


PLANET_ARCHETYPES: tuple[PlanetArchetype, ...] = (
    PlanetArchetype("dwarf", (0.005, 0.1), (1800.0, 3500.0), 0.15,
                    (("silicate", 0.6), ("ice-rock", 0.4))),
    PlanetArchetype("rocky", (0.1, 2.0), (3900.0, 5800.0), 0.30,
                    (("silicate", 0.7), ("iron", 0.2), ("carbon", 0.1))),
    PlanetArchetype("super_earth", (2.0, 10.0), (4500.0, 7500.0), 0.30,
                    (("silicate", 0.6), ("iron", 0.2), ("water-world", 0.2))),
    PlanetArchetype("ice_giant", (10.0, 50.0), (1100.0, 1700.0), 0.30,
                    (("water-ammonia", 1.0),)),
    PlanetArchetype("gas_giant", (50.0, 4000.0), (600.0, 1600.0), 0.34,
                    (("hydrogen-helium", 1.0),)),
)

_ICY_PLANET_CLASSES = ("dwarf", "rocky")


def equilibrium_temperature_k(luminosity_lsun: float, distance_m: float, albedo: float) -> float:
    """Blackbody equilibrium temperature: 278.6 K · (1 − A)^¼ · L^¼ / √(a / AU)."""
    if luminosity_lsun <= 0.0 or distance_m <= 0.0:
        return 0.0
    a_au = distance_m / AstroConstants.AU
    return 278.6 * (1.0 - albedo) ** 0.25 * luminosity_lsun ** 0.25 / math.sqrt(a_au)


class ArchetypePlanetGenerator(PlanetGenerator):
    """Planets whose class is drawn from the request's zone-biased weights."""

    def __init__(self, archetypes: tuple[PlanetArchetype, ...] = PLANET_ARCHETYPES) -> None:
        self._archetypes = {a.name: a for a in archetypes}

    def generate(
        self,
        request: PlanetRequest,
        parent: OrbitHost | None,
        stream: RandomStream,
    ) -> CelestialBody | None:
        if parent is None:
            return None
        weights = {k: w for k, w in request.class_weights.items() if k in self._archetypes}
        if not weights or all(w <= 0.0 for w in weights.values()):
            return None
        archetype = self._archetypes[stream.weighted_choice(weights)]

        mass = stream.log_uniform(*archetype.mass_range_mearth) * AstroConstants.M_EARTH
        density = stream.uniform(*archetype.density_range_kg_m3)
        compositions = dict(archetype.compositions)
        beyond_frost = request.orbit.semi_major_axis_m > parent.frost_line_m
        if beyond_frost and archetype.name in _ICY_PLANET_CLASSES:
            compositions = {"ice-rock": 0.7, "silicate": 0.3}
        temperature = equilibrium_temperature_k(
            request.host_luminosity_lsun, request.orbit.semi_major_axis_m, archetype.albedo,
        )

        return CelestialBody(
            id=request.body_id,
            name="",
            kind=BodyKind.PLANET,
            mass_kg=mass,
            radius_m=_radius_from_density_m(mass, density),
            seed=request.system_seed,
            orbit=request.orbit,
            parent_id=request.host_id,
            temperature_k=temperature,
            body_class=archetype.name,
            composition=stream.weighted_choice(compositions),
            properties={
                "albedo": archetype.albedo,
                "zone": request.zone.value,
                "slot_id": request.slot_id,
            },
        )


# ── Moons ─────────────────────────────────────────────────────────

REGULAR_MOON_MASS_FRACTION: tuple[float, float] = (1.0e-6, 1.0e-4)
CAPTURED_MOON_MASS_FRACTION: tuple[float, float] = (1.0e-10, 1.0e-7)
_ICY_MOON_HOSTS = ("water-ammonia", "hydrogen-helium", "ice-rock")

MOON_DENSITIES_KG_M3: dict[str, float] = {
    "ice": 1500.0,
    "ice-rock": 2200.0,
    "silicate": 3200.0,
    "iron": 5000.0,
}


class ArchetypeMoonGenerator(MoonGenerator):
    """Moons as a small mass fraction of their planet, icy around cold hosts."""

    def generate(
        self,
        request: MoonRequest,
        parent: CelestialBody | None,
        stream: RandomStream,
    ) -> CelestialBody | None:
        if parent is None or parent.mass_kg <= 0.0:
            return None
        fraction_range = CAPTURED_MOON_MASS_FRACTION if request.captured else REGULAR_MOON_MASS_FRACTION
        mass = request.planet_mass_kg * stream.log_uniform(*fraction_range)
        if request.planet_composition in _ICY_MOON_HOSTS:
            composition = stream.weighted_choice({"ice": 0.6, "ice-rock": 0.3, "silicate": 0.1})
        else:
            composition = stream.weighted_choice({"silicate": 0.8, "iron": 0.1, "ice-rock": 0.1})
        density = MOON_DENSITIES_KG_M3[composition] * stream.uniform(0.9, 1.1)

        return CelestialBody(
            id=request.body_id,
            name="",
            kind=BodyKind.MOON,
            mass_kg=mass,
            radius_m=_radius_from_density_m(mass, density),
            seed=request.system_seed,
            orbit=request.orbit,
            parent_id=request.planet_id,
            temperature_k=parent.temperature_k,
            body_class="captured" if request.captured else "regular",
            composition=composition,
            properties={"captured": request.captured},
        )


# ── Asteroids ─────────────────────────────────────────────────────

ASTEROID_DENSITIES_KG_M3: dict[str, float] = {
    "icy": 1000.0,
    "carbonaceous": 1700.0,
    "rocky": 2700.0,
    "metallic": 5300.0,
}


class ArchetypeAsteroidGenerator(AsteroidGenerator):
    """Asteroids sized from the requested mass and a composition density."""

    def generate(
        self,
        request: AsteroidRequest,
        parent: OrbitHost | None,
        stream: RandomStream,
    ) -> CelestialBody | None:
        if parent is None or request.mass_kg <= 0.0:
            return None
        density = ASTEROID_DENSITIES_KG_M3.get(request.composition, 2000.0)
        density *= stream.uniform(0.8, 1.2)
        return CelestialBody(
            id=request.body_id,
            name="",
            kind=BodyKind.ASTEROID,
            mass_kg=request.mass_kg,
            radius_m=_radius_from_density_m(request.mass_kg, density),
            seed=request.system_seed,
            orbit=request.orbit,
            parent_id=request.host_id,
            temperature_k=equilibrium_temperature_k(
                parent.luminosity_lsun, request.orbit.semi_major_axis_m, 0.1,
            ),
            body_class="major" if request.major else "minor",
            composition=request.composition,
        )


def default_body_generators() -> BodyGenerators:
    """The archetype generators bundled for generate_system."""
    return BodyGenerators(
        star=ArchetypeStarGenerator(),
        planet=ArchetypePlanetGenerator(),
        moon=ArchetypeMoonGenerator(),
        asteroid=ArchetypeAsteroidGenerator(),
    )
