# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""Tests for the orbital-mechanics and stellar-environment formulas.

Covers Kepler periods, Hill and Roche limits, Holman–Wiegert stability
limits, zone boundaries, resonance spacing and degenerate inputs.
"""
import ast
import math

import pytest

from solargen.domain.orbital_mechanics import (
    AstroConstants,
    OrbitalZone,
    P_TYPE_SAFETY_FACTOR,
    S_TYPE_SAFETY_FACTOR,
    apoapsis_m,
    barycenter_offset_m,
    classify_zone,
    density_kg_m3,
    effective_temperature_k,
    formation_outer_limit_m,
    frost_line_m,
    habitable_zone_m,
    hill_sphere_radius_m,
    inner_formation_limit_m,
    jacobi_radius_m,
    luminosity_from_mass_lsun,
    mean_motion_rad_s,
    mutual_hill_radius_m,
    orbital_period_s,
    orbital_velocity_ms,
    orbits_overlap,
    outer_stability_limit_m,
    p_type_stability_limit_m,
    periapsis_m,
    perturbation_strength,
    resonance_spacing,
    roche_limit_from_mass_m,
    roche_limit_m,
    s_type_stability_limit_m,
    sphere_of_influence_m,
    synodic_period_s,
)
from solargen.domain.random_stream import RandomStream

AU = AstroConstants.AU
M_SUN = AstroConstants.M_SUN


# ── Keplerian two-body ───────────────────────────────────────────────

class TestKepler:

    def test_earth_period_is_one_year(self):
        period = orbital_period_s(AU, M_SUN)
        assert period == pytest.approx(AstroConstants.YEAR, rel=1e-3)

    def test_period_scales_with_axis_three_halves(self):
        ratio = orbital_period_s(4.0 * AU, M_SUN) / orbital_period_s(AU, M_SUN)
        assert ratio == pytest.approx(8.0)

    def test_period_degenerate_inputs(self):
        assert orbital_period_s(0.0, M_SUN) == 0.0
        assert orbital_period_s(AU, 0.0) == 0.0
        assert orbital_period_s(-AU, M_SUN) == 0.0

    def test_circular_velocity_earth(self):
        assert orbital_velocity_ms(AU, M_SUN) == pytest.approx(29_780.0, rel=1e-2)

    def test_vis_viva_faster_at_periapsis(self):
        v_peri = orbital_velocity_ms(AU, M_SUN, distance_m=0.5 * AU)
        v_apo = orbital_velocity_ms(AU, M_SUN, distance_m=1.5 * AU)
        assert v_peri > v_apo > 0.0

    def test_mean_motion_matches_period(self):
        n = mean_motion_rad_s(AU, M_SUN)
        assert 2.0 * math.pi / n == pytest.approx(orbital_period_s(AU, M_SUN))

    def test_periapsis_apoapsis(self):
        assert periapsis_m(10.0, 0.2) == pytest.approx(8.0)
        assert apoapsis_m(10.0, 0.2) == pytest.approx(12.0)

    def test_periapsis_invalid_eccentricity(self):
        assert periapsis_m(10.0, 1.0) == 0.0
        assert apoapsis_m(10.0, -0.1) == 0.0


# ── Gravitational domains ────────────────────────────────────────────

class TestHillAndRoche:

    def test_earth_hill_sphere(self):
        r = hill_sphere_radius_m(AU, 0.0, AstroConstants.M_EARTH, M_SUN)
        assert r == pytest.approx(1.5e9, rel=0.02)

    def test_hill_sphere_shrinks_with_eccentricity(self):
        circular = hill_sphere_radius_m(AU, 0.0, AstroConstants.M_EARTH, M_SUN)
        eccentric = hill_sphere_radius_m(AU, 0.5, AstroConstants.M_EARTH, M_SUN)
        assert eccentric == pytest.approx(0.5 * circular)

    def test_hill_sphere_degenerate(self):
        assert hill_sphere_radius_m(AU, 0.0, 0.0, M_SUN) == 0.0
        assert hill_sphere_radius_m(AU, 1.2, AstroConstants.M_EARTH, M_SUN) == 0.0

    def test_mutual_hill_radius(self):
        m = AstroConstants.M_EARTH
        r = mutual_hill_radius_m(AU, 2.0 * AU, m, m, M_SUN)
        expected = (2.0 * m / (3.0 * M_SUN)) ** (1.0 / 3.0) * 1.5 * AU
        assert r == pytest.approx(expected)

    def test_roche_fluid_equal_density(self):
        assert roche_limit_m(1000.0, 3000.0, 3000.0) == pytest.approx(2440.0)

    def test_roche_rigid_equal_density(self):
        assert roche_limit_m(1000.0, 3000.0, 3000.0, rigid=True) == pytest.approx(1260.0)

    def test_roche_denser_satellite_closer(self):
        loose = roche_limit_m(1000.0, 3000.0, 1000.0)
        dense = roche_limit_m(1000.0, 3000.0, 8000.0)
        assert dense < loose

    def test_roche_from_mass_matches_density_form(self):
        r = AstroConstants.R_JUPITER
        m = AstroConstants.M_JUPITER
        assert roche_limit_from_mass_m(r, m, 2000.0) == pytest.approx(
            roche_limit_m(r, density_kg_m3(m, r), 2000.0)
        )

    def test_roche_degenerate(self):
        assert roche_limit_m(0.0, 3000.0, 3000.0) == 0.0
        assert roche_limit_m(1000.0, 3000.0, 0.0) == 0.0

    def test_earth_density(self):
        rho = density_kg_m3(AstroConstants.M_EARTH, AstroConstants.R_EARTH)
        assert rho == pytest.approx(5514.0, rel=1e-2)

    def test_sphere_of_influence_earth(self):
        r = sphere_of_influence_m(AU, AstroConstants.M_EARTH, M_SUN)
        assert r == pytest.approx(9.25e8, rel=0.02)

    def test_barycenter_offset_equal_masses(self):
        assert barycenter_offset_m(10.0, 1.0, 1.0) == pytest.approx(5.0)


# ── Multi-star stability ─────────────────────────────────────────────

class TestStabilityLimits:

    def test_default_safety_factors(self):
        assert S_TYPE_SAFETY_FACTOR == 0.9
        assert P_TYPE_SAFETY_FACTOR == 1.1

    def test_s_type_equal_mass_circular(self):
        limit = s_type_stability_limit_m(10.0 * AU, 0.0, M_SUN, M_SUN)
        assert limit == pytest.approx(0.9 * (0.464 - 0.380 * 0.5) * 10.0 * AU)

    def test_s_type_without_margin(self):
        limit = s_type_stability_limit_m(10.0 * AU, 0.0, M_SUN, M_SUN, safety_factor=1.0)
        assert limit == pytest.approx(0.274 * 10.0 * AU)

    def test_s_type_shrinks_with_eccentricity(self):
        circular = s_type_stability_limit_m(10.0 * AU, 0.0, M_SUN, M_SUN)
        eccentric = s_type_stability_limit_m(10.0 * AU, 0.5, M_SUN, M_SUN)
        assert eccentric < circular

    def test_s_type_smaller_companion_allows_wider_zone(self):
        light = s_type_stability_limit_m(10.0 * AU, 0.2, M_SUN, 0.1 * M_SUN)
        heavy = s_type_stability_limit_m(10.0 * AU, 0.2, M_SUN, 2.0 * M_SUN)
        assert light > heavy

    def test_p_type_equal_mass_circular(self):
        limit = p_type_stability_limit_m(AU, 0.0, M_SUN, M_SUN)
        expected = 1.1 * (1.60 + 4.12 * 0.5 - 5.09 * 0.25) * AU
        assert limit == pytest.approx(expected)

    def test_p_type_grows_with_eccentricity(self):
        circular = p_type_stability_limit_m(AU, 0.0, M_SUN, M_SUN)
        eccentric = p_type_stability_limit_m(AU, 0.4, M_SUN, M_SUN)
        assert eccentric > circular

    def test_p_type_lies_outside_binary(self):
        assert p_type_stability_limit_m(AU, 0.3, M_SUN, 0.4 * M_SUN) > AU

    def test_stability_degenerate_inputs(self):
        assert s_type_stability_limit_m(0.0, 0.0, M_SUN, M_SUN) == 0.0
        assert s_type_stability_limit_m(AU, 1.0, M_SUN, M_SUN) == 0.0
        assert p_type_stability_limit_m(AU, 0.0, M_SUN, 0.0) == 0.0

    def test_jacobi_radius_cube_root_scaling(self):
        assert jacobi_radius_m(8.0 * M_SUN) / jacobi_radius_m(M_SUN) == pytest.approx(2.0)

    def test_formation_limit_scaling(self):
        ratio = formation_outer_limit_m(2.0 * M_SUN) / formation_outer_limit_m(M_SUN)
        assert ratio == pytest.approx(2.0 ** 0.6)

    def test_outer_limit_is_tighter_of_two(self):
        assert outer_stability_limit_m(M_SUN) == pytest.approx(100.0 * AU)

    def test_inner_formation_limit(self):
        assert inner_formation_limit_m(1.0) == pytest.approx(0.05 * AU)
        assert inner_formation_limit_m(4.0) == pytest.approx(0.10 * AU)
        assert inner_formation_limit_m(0.0) == 0.0


# ── Stellar environment ──────────────────────────────────────────────

class TestStellarEnvironment:

    def test_solar_habitable_zone(self):
        inner, outer = habitable_zone_m(1.0)
        assert inner == pytest.approx(0.95 * AU)
        assert outer == pytest.approx(1.37 * AU)

    def test_habitable_zone_scales_with_sqrt_luminosity(self):
        inner, outer = habitable_zone_m(4.0)
        assert inner == pytest.approx(1.90 * AU)
        assert outer == pytest.approx(2.74 * AU)

    def test_frost_line(self):
        assert frost_line_m(1.0) == pytest.approx(4.85 * AU)
        assert frost_line_m(0.25) == pytest.approx(2.425 * AU)

    def test_dark_star_has_no_zones(self):
        assert habitable_zone_m(0.0) == (0.0, 0.0)
        assert frost_line_m(-1.0) == 0.0

    def test_classify_zone(self):
        hz_inner, frost = 0.95 * AU, 4.85 * AU
        assert classify_zone(0.5 * AU, hz_inner, frost) is OrbitalZone.HOT
        assert classify_zone(1.0 * AU, hz_inner, frost) is OrbitalZone.TEMPERATE
        assert classify_zone(10.0 * AU, hz_inner, frost) is OrbitalZone.COLD

    def test_classify_zone_boundaries_are_temperate(self):
        hz_inner, frost = 0.95 * AU, 4.85 * AU
        assert classify_zone(hz_inner, hz_inner, frost) is OrbitalZone.TEMPERATE
        assert classify_zone(frost, hz_inner, frost) is OrbitalZone.TEMPERATE

    def test_solar_luminosity(self):
        assert luminosity_from_mass_lsun(M_SUN) == pytest.approx(1.0)

    def test_luminosity_monotonic_in_mass(self):
        masses = [0.1, 0.3, 0.8, 1.5, 3.0, 10.0, 60.0]
        lums = [luminosity_from_mass_lsun(m * M_SUN) for m in masses]
        assert lums == sorted(lums)

    def test_solar_effective_temperature(self):
        t = effective_temperature_k(1.0, AstroConstants.R_SUN)
        assert t == pytest.approx(AstroConstants.T_SUN, rel=1e-2)


# ── Spacing and interaction ──────────────────────────────────────────

class TestResonanceSpacing:

    def test_two_to_one_from_one_au(self):
        assert resonance_spacing(AU, 2.0) / AU == pytest.approx(1.587, abs=1e-3)

    def test_three_to_two_from_one_au(self):
        assert resonance_spacing(AU, 1.5) / AU == pytest.approx(1.310, abs=1e-3)

    def test_ratio_at_most_one_returns_inner(self):
        assert resonance_spacing(AU, 1.0) == AU
        assert resonance_spacing(AU, 0.5) == AU

    def test_non_positive_inner_returns_zero(self):
        assert resonance_spacing(0.0, 2.0) == 0.0
        assert resonance_spacing(-AU, 2.0) == 0.0

    def test_variation_stays_in_band(self):
        stream = RandomStream(12)
        nominal = resonance_spacing(AU, 2.0)
        for _ in range(100):
            a = resonance_spacing(AU, 2.0, variation=0.1, stream=stream)
            assert 0.9 * nominal <= a <= 1.1 * nominal

    def test_variation_without_stream_is_nominal(self):
        assert resonance_spacing(AU, 2.0, variation=0.1) == resonance_spacing(AU, 2.0)


class TestInteraction:

    def test_perturbation_strength(self):
        p = perturbation_strength(1.0 * AU, 10.0 * AU, M_SUN, M_SUN)
        assert p == pytest.approx(1e-3)

    def test_perturbation_degenerate(self):
        assert perturbation_strength(AU, 0.0, M_SUN, M_SUN) == 0.0

    def test_orbits_overlap(self):
        assert orbits_overlap(1.0, 0.2, 1.3, 0.1)
        assert not orbits_overlap(1.0, 0.0, 2.0, 0.1)

    def test_touching_orbits_overlap(self):
        assert orbits_overlap(1.0, 0.5, 3.0, 0.5)

    def test_synodic_period_earth_mars(self):
        assert synodic_period_s(365.25, 686.98) == pytest.approx(779.9, rel=1e-3)

    def test_synodic_degenerate(self):
        assert synodic_period_s(10.0, 10.0) == 0.0
        assert synodic_period_s(0.0, 10.0) == 0.0


# ── Domain purity ────────────────────────────────────────────────────

class TestOrbitalMechanicsPurity:

    def test_imports_only_stdlib_and_package(self):
        import solargen.domain.orbital_mechanics as mod

        allowed = {'math', 'dataclasses', 'enum', 'typing'}
        with open(mod.__file__) as f:
            tree = ast.parse(f.read())

        for node in ast.walk(tree):
            if isinstance(node, ast.Import):
                for alias in node.names:
                    root = alias.name.split('.')[0]
                    assert root in allowed or root == 'solargen', f"Disallowed import '{alias.name}'"
            if isinstance(node, ast.ImportFrom) and node.module and node.level == 0:
                root = node.module.split('.')[0]
                assert root in allowed or root == 'solargen', f"Disallowed import from '{node.module}'"
