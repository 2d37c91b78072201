# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Moon occupancy inside a planet's Hill sphere.

The usable window runs from outside the Roche limit (and well clear of
the planet's surface) to a fraction of the Hill sphere. Regular moons
sit in the inner part on near-circular, near-equatorial orbits; beyond
that, only captured moons are placed, with high eccentricity and any
inclination, retrograde included.
"""
import logging
from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING

from solargen.domain.bodies import BodyKind, CelestialBody, Orbit
from solargen.domain.orbital_mechanics import (
    hill_sphere_radius_m,
    orbital_period_s,
    resonance_spacing,
    roche_limit_m,
)
from solargen.domain.planets import sort_by_distance
from solargen.domain.random_stream import RandomStream

if TYPE_CHECKING:
    from solargen.ports import MoonGenerator

_log = logging.getLogger(__name__)

_ROMAN = (
    (1000, "M"), (900, "CM"), (500, "D"), (400, "CD"), (100, "C"), (90, "XC"),
    (50, "L"), (40, "XL"), (10, "X"), (9, "IX"), (5, "V"), (4, "IV"), (1, "I"),
)


@dataclass(frozen=True)
class MoonConfig:
    """Tunables for moon placement."""
    regular_hill_fraction: float = 0.4
    captured_hill_fraction: float = 0.7
    roche_margin: float = 1.5
    surface_margin: float = 2.0
    assumed_moon_density_kg_m3: float = 2000.0
    max_moons_by_class: tuple[tuple[str, int], ...] = (
        ("gas_giant", 8),
        ("ice_giant", 6),
        ("super_earth", 3),
        ("rocky", 2),
        ("dwarf", 1),
    )
    default_max_moons: int = 1
    spacing_ratios: tuple[tuple[float, float], ...] = ((1.5, 0.3), (2.0, 0.4), (3.0, 0.3))
    spacing_variation: float = 0.1
    min_spacing_factor: float = 0.25
    fill_probability_base: float = 0.7
    fill_decay_exponent: float = 0.3
    regular_max_eccentricity: float = 0.02
    regular_inclination_sigma_deg: float = 1.0
    captured_eccentricity: tuple[float, float] = (0.1, 0.6)

    def __post_init__(self) -> None:
        if not 0.0 < self.regular_hill_fraction <= self.captured_hill_fraction < 1.0:
            raise ValueError("hill fractions must satisfy 0 < regular <= captured < 1")
        if self.roche_margin < 1.0:
            raise ValueError(f"roche_margin must be >= 1, got {self.roche_margin}")
        if self.surface_margin <= 1.0:
            raise ValueError(f"surface_margin must be > 1, got {self.surface_margin}")
        if self.assumed_moon_density_kg_m3 <= 0.0:
            raise ValueError("assumed_moon_density_kg_m3 must be > 0")
        if self.min_spacing_factor <= 0.0:
            raise ValueError("min_spacing_factor must be > 0")
        lo, hi = self.captured_eccentricity
        if not 0.0 <= lo <= hi < 1.0:
            raise ValueError(f"captured_eccentricity must satisfy 0 <= lo <= hi < 1, got {self.captured_eccentricity}")

    def max_moons(self, body_class: str) -> int:
        return dict(self.max_moons_by_class).get(body_class, self.default_max_moons)


@dataclass(frozen=True)
class MoonRequest:
    """What the moon collaborator is asked to build."""
    body_id: str
    planet_id: str
    orbit: Orbit
    captured: bool
    planet_mass_kg: float
    planet_radius_m: float
    planet_class: str
    planet_composition: str
    system_seed: int = 0


@dataclass(frozen=True)
class MoonSystem:
    """Moons of one planet; ``success`` is False when the planet context is missing."""
    planet_id: str | None
    success: bool
    moons: list[CelestialBody] = field(default_factory=list)
    inner_window_m: float = 0.0
    outer_window_m: float = 0.0


def moon_window_m(
    planet: CelestialBody,
    central_mass_kg: float,
    config: MoonConfig | None = None,
) -> tuple[float, float, float]:
    """
    (inner, regular_outer, captured_outer) distances around a planet.

    All three are 0.0 when the planet has no orbit or mass.
    """
    config = config or MoonConfig()
    if planet.orbit is None:
        return 0.0, 0.0, 0.0
    hill = hill_sphere_radius_m(
        planet.orbit.semi_major_axis_m, planet.orbit.eccentricity, planet.mass_kg, central_mass_kg,
    )
    if hill <= 0.0:
        return 0.0, 0.0, 0.0
    roche = roche_limit_m(planet.radius_m, planet.density_kg_m3, config.assumed_moon_density_kg_m3)
    inner = max(planet.radius_m * config.surface_margin, roche * config.roche_margin)
    return inner, hill * config.regular_hill_fraction, hill * config.captured_hill_fraction


def populate_moons(
    planet: CelestialBody | None,
    central_mass_kg: float,
    generator: "MoonGenerator",
    stream: RandomStream,
    config: MoonConfig | None = None,
    system_seed: int = 0,
) -> MoonSystem:
    """
    Generate the moons of one planet.

    Args:
        planet: Parent planet with an orbit; None yields a failed result.
        central_mass_kg: Mass of what the planet orbits (for the Hill sphere).
        generator: Moon body collaborator.
        stream: Stream dedicated to this planet's moons.
        config: Placement tunables.
        system_seed: Root seed recorded on each moon.

    Returns:
        MoonSystem with moons in increasing distance.
    """
    config = config or MoonConfig()
    if (planet is None or planet.kind is not BodyKind.PLANET or planet.orbit is None
            or central_mass_kg <= 0.0):
        return MoonSystem(planet_id=planet.id if planet else None, success=False)

    inner, regular_outer, captured_outer = moon_window_m(planet, central_mass_kg, config)
    result = MoonSystem(
        planet_id=planet.id, success=True,
        inner_window_m=inner, outer_window_m=captured_outer,
    )
    if inner <= 0.0 or inner >= regular_outer:
        return result

    cap = config.max_moons(planet.body_class)
    ratios = dict(config.spacing_ratios)
    axes: list[float] = []
    a = inner
    while a < captured_outer and len(axes) < cap:
        axes.append(a)
        candidate = resonance_spacing(a, stream.weighted_choice(ratios), config.spacing_variation, stream)
        a = max(candidate, a * (1.0 + config.min_spacing_factor))

    for index, axis in enumerate(axes):
        moon_stream = stream.fork()
        probability = config.fill_probability_base * (inner / axis) ** config.fill_decay_exponent
        if moon_stream.uniform() >= probability:
            continue

        captured = axis > regular_outer
        orbit = _moon_orbit(axis, captured, planet.radius_m * config.surface_margin, moon_stream, config)
        request = MoonRequest(
            body_id=f"{planet.id}-moon-{index}",
            planet_id=planet.id,
            orbit=orbit,
            captured=captured,
            planet_mass_kg=planet.mass_kg,
            planet_radius_m=planet.radius_m,
            planet_class=planet.body_class,
            planet_composition=planet.composition,
            system_seed=system_seed,
        )
        body = generator.generate(request, planet, moon_stream)
        if body is None or body.kind is not BodyKind.MOON or body.mass_kg <= 0.0:
            continue
        if axis <= roche_limit_m(planet.radius_m, planet.density_kg_m3, body.density_kg_m3):
            _log.debug("moon %s inside its Roche limit, discarded", request.body_id)
            continue
        result.moons.append(replace(
            body,
            id=request.body_id,
            parent_id=planet.id,
            seed=system_seed,
            orbit=replace(orbit, period_s=orbital_period_s(axis, planet.mass_kg, body.mass_kg)),
            properties={**body.properties, "captured": captured},
        ))

    _log.debug("planet %s: %d moons", planet.id, len(result.moons))
    return result


def _moon_orbit(
    axis_m: float,
    captured: bool,
    min_periapsis_m: float,
    stream: RandomStream,
    config: MoonConfig,
) -> Orbit:
    if captured:
        # Periapsis must stay clear of the planet.
        e_max = min(config.captured_eccentricity[1], 1.0 - min_periapsis_m / axis_m)
        e_min = min(config.captured_eccentricity[0], e_max)
        eccentricity = stream.uniform(e_min, e_max)
        inclination = stream.uniform(0.0, 180.0)
    else:
        eccentricity = stream.uniform(0.0, config.regular_max_eccentricity)
        inclination = abs(stream.normal(0.0, config.regular_inclination_sigma_deg))
    return Orbit(
        semi_major_axis_m=axis_m,
        eccentricity=eccentricity,
        inclination_deg=inclination,
        ascending_node_deg=stream.uniform(0.0, 360.0),
        argument_periapsis_deg=stream.uniform(0.0, 360.0),
        mean_anomaly_deg=stream.uniform(0.0, 360.0),
    )


# ── Post-processing ───────────────────────────────────────────────

def captured_moons(moons: Iterable[CelestialBody]) -> list[CelestialBody]:
    return [m for m in moons if m.properties.get("captured", False)]


def regular_moons(moons: Iterable[CelestialBody]) -> list[CelestialBody]:
    return [m for m in moons if not m.properties.get("captured", False)]


def validate_moons(
    planet: CelestialBody,
    moons: Iterable[CelestialBody],
    central_mass_kg: float,
) -> list[str]:
    """Containment errors: each moon between its planet's Roche limit and Hill sphere."""
    errors: list[str] = []
    if planet.orbit is None:
        return [f"{planet.id}: planet has no orbit"]
    hill = hill_sphere_radius_m(
        planet.orbit.semi_major_axis_m, planet.orbit.eccentricity, planet.mass_kg, central_mass_kg,
    )
    for moon in moons:
        if moon.parent_id != planet.id:
            errors.append(f"{moon.id}: parent {moon.parent_id} != {planet.id}")
        if moon.orbit is None:
            errors.append(f"{moon.id}: no orbit")
            continue
        a = moon.orbit.semi_major_axis_m
        if not planet.radius_m < a < hill:
            errors.append(f"{moon.id}: a={a:.3e} m outside ({planet.radius_m:.3e}, {hill:.3e})")
        roche = roche_limit_m(planet.radius_m, planet.density_kg_m3, moon.density_kg_m3)
        if a <= roche:
            errors.append(f"{moon.id}: a={a:.3e} m inside Roche limit {roche:.3e} m")
    return errors


def roman_numeral(value: int) -> str:
    if value <= 0:
        return str(value)
    parts: list[str] = []
    for amount, symbol in _ROMAN:
        while value >= amount:
            parts.append(symbol)
            value -= amount
    return "".join(parts)


def assign_moon_names(moons: Iterable[CelestialBody], planet_name: str) -> list[CelestialBody]:
    """Roman numerals I, II, III, ... in order of distance from the planet."""
    return [
        replace(moon, name=f"{planet_name} {roman_numeral(i + 1)}")
        for i, moon in enumerate(sort_by_distance(moons))
    ]
