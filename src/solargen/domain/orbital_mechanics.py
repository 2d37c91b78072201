# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Orbital mechanics and stellar-environment functions.

Pure, stateless formulas used by every generator. None of them raise:
degenerate inputs (non-positive mass or distance, eccentricity outside
[0, 1), period ratio <= 1) return a defined sentinel, usually 0.0, so
callers never branch on exceptions for physics.

All distances in metres, masses in kilograms, times in seconds,
luminosities in solar units.
"""
import math
from dataclasses import dataclass
from enum import Enum

from solargen.domain.random_stream import RandomStream


@dataclass(frozen=True)
class _AstroConstants:
    """Physical and astronomical constants (IAU 2015 / CODATA 2018)."""
    G: float = 6.67430e-11               # m³/(kg·s²)
    AU: float = 1.495978707e11           # m
    PARSEC: float = 3.0856775814913673e16  # m
    YEAR: float = 3.15576e7              # s, Julian year
    M_SUN: float = 1.98847e30            # kg
    R_SUN: float = 6.957e8               # m
    L_SUN: float = 3.828e26              # W
    T_SUN: float = 5772.0                # K
    M_EARTH: float = 5.9722e24           # kg
    R_EARTH: float = 6.371e6             # m
    M_JUPITER: float = 1.89813e27        # kg
    R_JUPITER: float = 6.9911e7          # m
    SIGMA_SB: float = 5.670374419e-8     # W/(m²·K⁴)


AstroConstants: _AstroConstants = _AstroConstants()

# Tunable stability margins. Fixtures depend on these exact values.
S_TYPE_SAFETY_FACTOR: float = 0.9
P_TYPE_SAFETY_FACTOR: float = 1.1

# Environment scalings, all at one solar mass / luminosity.
JACOBI_RADIUS_SOLAR_PC: float = 1.35
FORMATION_LIMIT_SOLAR_AU: float = 100.0
FORMATION_LIMIT_MASS_EXPONENT: float = 0.6
SUBLIMATION_RADIUS_SOLAR_AU: float = 0.05
HZ_INNER_SOLAR_AU: float = 0.95
HZ_OUTER_SOLAR_AU: float = 1.37
FROST_LINE_SOLAR_AU: float = 4.85

# Roche coefficients: fluid (deformable) and rigid satellite.
ROCHE_FLUID: float = 2.44
ROCHE_RIGID: float = 1.26


class OrbitalZone(Enum):
    HOT = "hot"
    TEMPERATE = "temperate"
    COLD = "cold"


# ── Keplerian two-body ─────────────────────────────────────────────

def orbital_period_s(
    semi_major_axis_m: float,
    central_mass_kg: float,
    body_mass_kg: float = 0.0,
) -> float:
    """
    Keplerian orbital period.

    T = 2π √(a³ / G(M + m))

    Returns:
        Period in seconds, or 0.0 for non-positive axis or total mass.
    """
    total = central_mass_kg + max(body_mass_kg, 0.0)
    if semi_major_axis_m <= 0.0 or central_mass_kg <= 0.0 or total <= 0.0:
        return 0.0
    return 2.0 * math.pi * math.sqrt(semi_major_axis_m**3 / (AstroConstants.G * total))


def orbital_velocity_ms(
    semi_major_axis_m: float,
    central_mass_kg: float,
    distance_m: float | None = None,
) -> float:
    """
    Orbital speed from the vis-viva equation.

    v = √(GM (2/r − 1/a)), with r defaulting to a (circular speed).
    """
    if semi_major_axis_m <= 0.0 or central_mass_kg <= 0.0:
        return 0.0
    r = semi_major_axis_m if distance_m is None else distance_m
    if r <= 0.0:
        return 0.0
    term = 2.0 / r - 1.0 / semi_major_axis_m
    if term <= 0.0:
        return 0.0
    return math.sqrt(AstroConstants.G * central_mass_kg * term)


def mean_motion_rad_s(semi_major_axis_m: float, central_mass_kg: float) -> float:
    """n = √(GM / a³) in rad/s."""
    if semi_major_axis_m <= 0.0 or central_mass_kg <= 0.0:
        return 0.0
    return math.sqrt(AstroConstants.G * central_mass_kg / semi_major_axis_m**3)


def periapsis_m(semi_major_axis_m: float, eccentricity: float) -> float:
    if semi_major_axis_m <= 0.0 or not 0.0 <= eccentricity < 1.0:
        return 0.0
    return semi_major_axis_m * (1.0 - eccentricity)


def apoapsis_m(semi_major_axis_m: float, eccentricity: float) -> float:
    if semi_major_axis_m <= 0.0 or not 0.0 <= eccentricity < 1.0:
        return 0.0
    return semi_major_axis_m * (1.0 + eccentricity)


# ── Gravitational domains ──────────────────────────────────────────

def hill_sphere_radius_m(
    semi_major_axis_m: float,
    eccentricity: float,
    body_mass_kg: float,
    central_mass_kg: float,
) -> float:
    """
    Hill sphere radius at periapsis.

    r_H = a (1 − e) ∛(m / 3M)
    """
    if (semi_major_axis_m <= 0.0 or body_mass_kg <= 0.0
            or central_mass_kg <= 0.0 or not 0.0 <= eccentricity < 1.0):
        return 0.0
    return (semi_major_axis_m * (1.0 - eccentricity)
            * (body_mass_kg / (3.0 * central_mass_kg)) ** (1.0 / 3.0))


def mutual_hill_radius_m(
    inner_axis_m: float,
    outer_axis_m: float,
    inner_mass_kg: float,
    outer_mass_kg: float,
    central_mass_kg: float,
) -> float:
    """R_H,mutual = ∛((m1 + m2) / 3M) · (a1 + a2) / 2."""
    total = inner_mass_kg + outer_mass_kg
    if inner_axis_m <= 0.0 or outer_axis_m <= 0.0 or total <= 0.0 or central_mass_kg <= 0.0:
        return 0.0
    return (total / (3.0 * central_mass_kg)) ** (1.0 / 3.0) * 0.5 * (inner_axis_m + outer_axis_m)


def density_kg_m3(mass_kg: float, radius_m: float) -> float:
    if mass_kg <= 0.0 or radius_m <= 0.0:
        return 0.0
    return mass_kg / (4.0 / 3.0 * math.pi * radius_m**3)


def roche_limit_m(
    primary_radius_m: float,
    primary_density_kg_m3: float,
    satellite_density_kg_m3: float,
    rigid: bool = False,
) -> float:
    """
    Roche limit for a satellite of the given density.

    d = k R (ρ_M / ρ_m)^(1/3), k = 2.44 for a fluid body, 1.26 for a rigid one.
    """
    if primary_radius_m <= 0.0 or primary_density_kg_m3 <= 0.0 or satellite_density_kg_m3 <= 0.0:
        return 0.0
    k = ROCHE_RIGID if rigid else ROCHE_FLUID
    return k * primary_radius_m * (primary_density_kg_m3 / satellite_density_kg_m3) ** (1.0 / 3.0)


def roche_limit_from_mass_m(
    primary_radius_m: float,
    primary_mass_kg: float,
    satellite_density_kg_m3: float,
    rigid: bool = False,
) -> float:
    """Roche limit with the primary's density derived from its mass and radius."""
    return roche_limit_m(
        primary_radius_m,
        density_kg_m3(primary_mass_kg, primary_radius_m),
        satellite_density_kg_m3,
        rigid=rigid,
    )


def sphere_of_influence_m(
    semi_major_axis_m: float,
    body_mass_kg: float,
    central_mass_kg: float,
) -> float:
    """Laplace sphere of influence: r_SOI = a (m / M)^(2/5)."""
    if semi_major_axis_m <= 0.0 or body_mass_kg <= 0.0 or central_mass_kg <= 0.0:
        return 0.0
    return semi_major_axis_m * (body_mass_kg / central_mass_kg) ** 0.4


def barycenter_offset_m(
    separation_m: float,
    primary_mass_kg: float,
    secondary_mass_kg: float,
) -> float:
    """Distance of the primary from the pair's barycenter."""
    total = primary_mass_kg + secondary_mass_kg
    if separation_m <= 0.0 or primary_mass_kg < 0.0 or secondary_mass_kg < 0.0 or total <= 0.0:
        return 0.0
    return separation_m * secondary_mass_kg / total


# ── Multi-star stability (Holman & Wiegert 1999) ──────────────────

def s_type_stability_limit_m(
    separation_m: float,
    eccentricity: float,
    host_mass_kg: float,
    companion_mass_kg: float,
    safety_factor: float = S_TYPE_SAFETY_FACTOR,
) -> float:
    """
    Outer stable orbit around one member of a binary.

    a_c / a_b = 0.464 − 0.380μ − 0.631e + 0.586μe + 0.150e² − 0.198μe²
    with μ = m_companion / (m_host + m_companion).

    Args:
        separation_m: Binary semi-major axis (m).
        eccentricity: Binary eccentricity [0, 1).
        host_mass_kg: Mass of the star being orbited.
        companion_mass_kg: Mass of the perturbing companion.
        safety_factor: Fraction of the empirical limit to keep.

    Returns:
        Critical semi-major axis (m), 0.0 when degenerate or non-positive.
    """
    if (separation_m <= 0.0 or host_mass_kg <= 0.0 or companion_mass_kg < 0.0
            or not 0.0 <= eccentricity < 1.0):
        return 0.0
    mu = companion_mass_kg / (host_mass_kg + companion_mass_kg)
    e = eccentricity
    ratio = (0.464 - 0.380 * mu - 0.631 * e + 0.586 * mu * e
             + 0.150 * e**2 - 0.198 * mu * e**2)
    return max(0.0, safety_factor * ratio * separation_m)


def p_type_stability_limit_m(
    separation_m: float,
    eccentricity: float,
    primary_mass_kg: float,
    secondary_mass_kg: float,
    safety_factor: float = P_TYPE_SAFETY_FACTOR,
) -> float:
    """
    Inner stable circumbinary orbit.

    a_c / a_b = 1.60 + 5.10e − 2.22e² + 4.12μ − 4.27eμ − 5.09μ² + 4.61e²μ²
    with μ the smaller mass fraction.

    Returns:
        Critical semi-major axis (m), 0.0 when degenerate.
    """
    total = primary_mass_kg + secondary_mass_kg
    if (separation_m <= 0.0 or primary_mass_kg <= 0.0 or secondary_mass_kg <= 0.0
            or not 0.0 <= eccentricity < 1.0):
        return 0.0
    mu = min(primary_mass_kg, secondary_mass_kg) / total
    e = eccentricity
    ratio = (1.60 + 5.10 * e - 2.22 * e**2 + 4.12 * mu - 4.27 * e * mu
             - 5.09 * mu**2 + 4.61 * e**2 * mu**2)
    return max(0.0, safety_factor * ratio * separation_m)


def jacobi_radius_m(mass_kg: float) -> float:
    """Galactic tidal truncation radius, ∝ M^(1/3)."""
    if mass_kg <= 0.0:
        return 0.0
    m = mass_kg / AstroConstants.M_SUN
    return JACOBI_RADIUS_SOLAR_PC * AstroConstants.PARSEC * m ** (1.0 / 3.0)


def formation_outer_limit_m(mass_kg: float) -> float:
    """Outer edge of the planet-forming disk, ∝ M^0.6."""
    if mass_kg <= 0.0:
        return 0.0
    m = mass_kg / AstroConstants.M_SUN
    return FORMATION_LIMIT_SOLAR_AU * AstroConstants.AU * m ** FORMATION_LIMIT_MASS_EXPONENT


def outer_stability_limit_m(mass_kg: float) -> float:
    return min(jacobi_radius_m(mass_kg), formation_outer_limit_m(mass_kg))


def inner_formation_limit_m(luminosity_lsun: float) -> float:
    """Dust sublimation radius, ∝ √L."""
    if luminosity_lsun <= 0.0:
        return 0.0
    return SUBLIMATION_RADIUS_SOLAR_AU * AstroConstants.AU * math.sqrt(luminosity_lsun)


# ── Stellar environment ───────────────────────────────────────────

def habitable_zone_m(luminosity_lsun: float) -> tuple[float, float]:
    """(inner, outer) habitable-zone edges, both ∝ √L."""
    if luminosity_lsun <= 0.0:
        return 0.0, 0.0
    root = math.sqrt(luminosity_lsun)
    au = AstroConstants.AU
    return HZ_INNER_SOLAR_AU * au * root, HZ_OUTER_SOLAR_AU * au * root


def frost_line_m(luminosity_lsun: float) -> float:
    if luminosity_lsun <= 0.0:
        return 0.0
    return FROST_LINE_SOLAR_AU * AstroConstants.AU * math.sqrt(luminosity_lsun)


def classify_zone(distance_m: float, hz_inner_m: float, frost_m: float) -> OrbitalZone:
    """Strict comparisons: below HZ inner is HOT, beyond frost line is COLD."""
    if distance_m < hz_inner_m:
        return OrbitalZone.HOT
    if distance_m > frost_m:
        return OrbitalZone.COLD
    return OrbitalZone.TEMPERATE


def luminosity_from_mass_lsun(mass_kg: float) -> float:
    """Piecewise main-sequence mass–luminosity relation."""
    if mass_kg <= 0.0:
        return 0.0
    m = mass_kg / AstroConstants.M_SUN
    if m < 0.43:
        return 0.23 * m**2.3
    if m < 2.0:
        return m**4.0
    if m < 55.0:
        return 1.4 * m**3.5
    return 32000.0 * m


def radius_from_mass_m(mass_kg: float) -> float:
    """Main-sequence mass–radius relation (R ∝ M^0.8 below 1 M☉, M^0.57 above)."""
    if mass_kg <= 0.0:
        return 0.0
    m = mass_kg / AstroConstants.M_SUN
    exponent = 0.8 if m < 1.0 else 0.57
    return AstroConstants.R_SUN * m**exponent


def effective_temperature_k(luminosity_lsun: float, radius_m: float) -> float:
    """Stefan–Boltzmann: T = (L / 4πR²σ)^(1/4)."""
    if luminosity_lsun <= 0.0 or radius_m <= 0.0:
        return 0.0
    c = AstroConstants
    return (luminosity_lsun * c.L_SUN / (4.0 * math.pi * radius_m**2 * c.SIGMA_SB)) ** 0.25


# ── Spacing and interaction ───────────────────────────────────────

def resonance_spacing(
    inner_orbit_m: float,
    period_ratio: float,
    variation: float = 0.0,
    stream: RandomStream | None = None,
) -> float:
    """
    Semi-major axis of the orbit in a given period ratio with an inner orbit.

    a_out = a_in · ratio^(2/3) · (1 + variation · u), u ∈ [−1, 1).

    The random factor is only drawn when both a stream and a positive
    variation are supplied.

    Returns:
        The outer axis; the inner axis unchanged for ratio <= 1; 0.0 when
        the inner axis is non-positive.
    """
    if inner_orbit_m <= 0.0:
        return 0.0
    if period_ratio <= 1.0:
        return inner_orbit_m
    outer = inner_orbit_m * period_ratio ** (2.0 / 3.0)
    if variation > 0.0 and stream is not None:
        outer *= 1.0 + variation * stream.uniform(-1.0, 1.0)
    return outer


def perturbation_strength(
    orbit_m: float,
    companion_distance_m: float,
    companion_mass_kg: float,
    central_mass_kg: float,
) -> float:
    """Tidal perturbation proxy: (a / d)³ · (m_companion / M_central)."""
    if (orbit_m <= 0.0 or companion_distance_m <= 0.0
            or companion_mass_kg <= 0.0 or central_mass_kg <= 0.0):
        return 0.0
    return (orbit_m / companion_distance_m) ** 3 * (companion_mass_kg / central_mass_kg)


def orbits_overlap(
    axis_a_m: float,
    ecc_a: float,
    axis_b_m: float,
    ecc_b: float,
) -> bool:
    """True if the periapsis–apoapsis ranges intersect (touching counts)."""
    lo = max(axis_a_m * (1.0 - ecc_a), axis_b_m * (1.0 - ecc_b))
    hi = min(axis_a_m * (1.0 + ecc_a), axis_b_m * (1.0 + ecc_b))
    return lo <= hi


def synodic_period_s(period_a_s: float, period_b_s: float) -> float:
    """1 / |1/T1 − 1/T2|; 0.0 for non-positive or equal periods."""
    if period_a_s <= 0.0 or period_b_s <= 0.0:
        return 0.0
    diff = abs(1.0 / period_a_s - 1.0 / period_b_s)
    if diff == 0.0:
        return 0.0
    return 1.0 / diff
