# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""Tests for planet occupancy of orbit slots."""
import ast
from dataclasses import replace

import pytest

from solargen.domain.bodies import BodyKind, CelestialBody, Orbit
from solargen.domain.hierarchy import HostKind, OrbitHost, Perturber
from solargen.domain.orbit_slots import OrbitSlot, generate_orbit_slots
from solargen.domain.orbital_mechanics import AstroConstants, OrbitalZone
from solargen.domain.planets import (
    GIANT_CLASSES,
    PlanetConfig,
    assign_planet_names,
    filter_by_class,
    filter_by_zone,
    host_perturbation,
    populate_planets,
    sort_by_distance,
    sort_by_mass,
    validate_planets_against_slots,
    zone_bias,
)
from solargen.domain.random_stream import RandomStream

AU = AstroConstants.AU
M_SUN = AstroConstants.M_SUN
M_EARTH = AstroConstants.M_EARTH


# ── Helpers ──────────────────────────────────────────────────────────

class FixedPlanetGenerator:
    """Builds planets of one mass and class; records every request."""

    def __init__(self, mass_kg=M_EARTH, body_class="rocky", kind=BodyKind.PLANET):
        self.mass_kg = mass_kg
        self.body_class = body_class
        self.kind = kind
        self.requests = []

    def generate(self, request, parent, stream):
        self.requests.append(request)
        if parent is None:
            return None
        stream.uniform()
        return CelestialBody(
            id="ignored",
            name="",
            kind=self.kind,
            mass_kg=self.mass_kg,
            radius_m=AstroConstants.R_EARTH,
            seed=-1,
            orbit=request.orbit,
            body_class=self.body_class,
        )


class NullPlanetGenerator:
    def generate(self, request, parent, stream):
        return None


def _host(perturbers=()):
    return OrbitHost(
        id="host-star-0",
        kind=HostKind.SINGLE,
        node_id="star-0",
        mass_kg=M_SUN,
        luminosity_lsun=1.0,
        temperature_k=5772.0,
        radius_m=AstroConstants.R_SUN,
        inner_stability_m=0.05 * AU,
        outer_stability_m=50.0 * AU,
        perturbers=tuple(perturbers),
    )


def _slots(*axes_au, fill=1.0):
    host = _host()
    return [
        OrbitSlot(
            id=f"host-star-0-slot-{i}",
            host_id="host-star-0",
            index=i,
            semi_major_axis_m=a * AU,
            eccentricity=0.01,
            zone=host.classify(a * AU),
            fill_probability=fill,
        )
        for i, a in enumerate(axes_au)
    ]


def _planet(body_id, axis_au, mass_kg=M_EARTH, body_class="rocky"):
    return CelestialBody(
        id=body_id,
        name="",
        kind=BodyKind.PLANET,
        mass_kg=mass_kg,
        radius_m=AstroConstants.R_EARTH,
        seed=0,
        orbit=Orbit(semi_major_axis_m=axis_au * AU, eccentricity=0.0),
        parent_id="host-star-0",
        body_class=body_class,
    )


# ── Slot binding ─────────────────────────────────────────────────────

class TestPopulatePlanets:

    def test_certain_slots_all_filled(self):
        slots = _slots(0.1, 0.2, 0.4, 0.8, 1.6)
        result = populate_planets(_host(), slots, FixedPlanetGenerator(), RandomStream(1))
        assert len(result.planets) == 5
        assert all(s.is_filled for s in slots)
        assert validate_planets_against_slots(result.planets, slots) == []

    def test_empty_slots_never_filled(self):
        slots = _slots(0.1, 0.2, 0.4, fill=0.0)
        result = populate_planets(_host(), slots, FixedPlanetGenerator(), RandomStream(1))
        assert result.planets == []
        assert not any(s.is_filled for s in slots)

    def test_planet_fields(self):
        slots = _slots(1.0)
        result = populate_planets(
            _host(), slots, FixedPlanetGenerator(), RandomStream(1), system_seed=42,
        )
        planet = result.planets[0]
        assert planet.id == "planet-star-0-0"
        assert planet.parent_id == "host-star-0"
        assert planet.seed == 42
        assert planet.kind is BodyKind.PLANET
        assert planet.semi_major_axis_m == slots[0].semi_major_axis_m
        assert planet.orbit.period_s == pytest.approx(AstroConstants.YEAR, rel=0.01)
        assert slots[0].body_id == planet.id

    def test_request_carries_slot_context(self):
        generator = FixedPlanetGenerator()
        slots = _slots(10.0)
        populate_planets(_host(), slots, generator, RandomStream(1), age_gyr=2.0, metallicity=0.1)
        request = generator.requests[0]
        assert request.slot_id == slots[0].id
        assert request.zone is OrbitalZone.COLD
        assert request.host_mass_kg == M_SUN
        assert request.age_gyr == 2.0
        assert request.metallicity == 0.1
        assert dict(request.class_weights) == zone_bias(OrbitalZone.COLD, 0.0, 0.1)

    def test_unstable_slot_skipped(self):
        slots = _slots(0.1, 0.2)
        slots[0].stable = False
        result = populate_planets(_host(), slots, FixedPlanetGenerator(), RandomStream(1))
        assert [p.id for p in result.planets] == ["planet-star-0-1"]
        assert not slots[0].is_filled

    def test_already_filled_slot_skipped(self):
        slots = _slots(0.1, 0.2)
        slots[0].bind("asteroid-x")
        result = populate_planets(_host(), slots, FixedPlanetGenerator(), RandomStream(1))
        assert len(result.planets) == 1
        assert slots[0].body_id == "asteroid-x"

    def test_generator_failure_rejects_slot(self):
        slots = _slots(0.1, 0.2)
        result = populate_planets(_host(), slots, NullPlanetGenerator(), RandomStream(1))
        assert result.planets == []
        assert result.rejected_slot_ids == [s.id for s in slots]
        assert not any(s.is_filled for s in slots)

    def test_wrong_kind_rejected(self):
        slots = _slots(0.1)
        generator = FixedPlanetGenerator(kind=BodyKind.MOON)
        result = populate_planets(_host(), slots, generator, RandomStream(1))
        assert result.planets == []

    def test_too_close_neighbour_rejected(self):
        slots = _slots(1.0, 1.05)
        generator = FixedPlanetGenerator(mass_kg=AstroConstants.M_JUPITER, body_class="gas_giant")
        result = populate_planets(_host(), slots, generator, RandomStream(1))
        assert len(result.planets) == 1
        assert result.rejected_slot_ids == [slots[1].id]
        assert not slots[1].is_filled

    @pytest.mark.parametrize("seed", range(8))
    def test_generated_layout_consistent(self, seed):
        host = _host()
        layout = generate_orbit_slots(host, RandomStream(seed))
        result = populate_planets(host, layout.slots, FixedPlanetGenerator(), RandomStream(seed + 100))
        assert validate_planets_against_slots(result.planets, layout.slots) == []
        ordered = sort_by_distance(result.planets)
        assert ordered == result.planets
        for inner, outer in zip(ordered, ordered[1:]):
            assert inner.orbit.apoapsis_m < outer.orbit.periapsis_m

    def test_deterministic(self):
        def run():
            host = _host()
            layout = generate_orbit_slots(host, RandomStream(3))
            return populate_planets(host, layout.slots, FixedPlanetGenerator(), RandomStream(4)).planets
        assert run() == run()


# ── Zone bias ────────────────────────────────────────────────────────

class TestZoneBias:

    def test_unperturbed_matches_config(self):
        assert zone_bias(OrbitalZone.HOT) == PlanetConfig().weights_for(OrbitalZone.HOT)

    def test_perturbation_damps_giants(self):
        calm = zone_bias(OrbitalZone.COLD)
        stirred = zone_bias(OrbitalZone.COLD, perturbation=0.005)
        for name in GIANT_CLASSES:
            assert stirred[name] == pytest.approx(0.5 * calm[name])
        assert stirred["rocky"] == calm["rocky"]

    def test_damping_floor(self):
        calm = zone_bias(OrbitalZone.COLD)
        stirred = zone_bias(OrbitalZone.COLD, perturbation=1.0)
        assert stirred["gas_giant"] == pytest.approx(0.1 * calm["gas_giant"])

    def test_metallicity_boosts_giants(self):
        solar = zone_bias(OrbitalZone.COLD)
        rich = zone_bias(OrbitalZone.COLD, metallicity=0.3)
        assert rich["gas_giant"] == pytest.approx(solar["gas_giant"] * 10 ** 0.3)
        assert rich["dwarf"] == solar["dwarf"]

    def test_host_perturbation(self):
        assert host_perturbation(_host(), AU) == 0.0
        host = _host([Perturber("star-1", M_SUN, 10.0 * AU)])
        assert host_perturbation(host, AU) == pytest.approx(1e-3)

    def test_missing_zone_weights_raise(self):
        config = PlanetConfig(zone_class_weights=((OrbitalZone.HOT, (("rocky", 1.0),)),))
        with pytest.raises(ValueError):
            config.weights_for(OrbitalZone.COLD)

    def test_invalid_eccentricity_cap(self):
        with pytest.raises(ValueError):
            PlanetConfig(max_eccentricity=1.0)


# ── Post-processing ──────────────────────────────────────────────────

class TestPostProcessing:

    def test_names_by_distance(self):
        planets = [_planet("p2", 2.0), _planet("p1", 0.5), _planet("p3", 9.0)]
        named = assign_planet_names(planets, "Kelvar A")
        assert [(p.id, p.name) for p in named] == [
            ("p1", "Kelvar A b"), ("p2", "Kelvar A c"), ("p3", "Kelvar A d"),
        ]

    def test_sort_by_mass(self):
        planets = [_planet("small", 1.0, M_EARTH), _planet("big", 2.0, 300 * M_EARTH)]
        assert [p.id for p in sort_by_mass(planets)] == ["big", "small"]
        assert [p.id for p in sort_by_mass(planets, descending=False)] == ["small", "big"]

    def test_filters(self):
        planets = [_planet("hot", 0.1), _planet("cold", 10.0, body_class="gas_giant")]
        assert [p.id for p in filter_by_zone(planets, _host(), OrbitalZone.HOT)] == ["hot"]
        assert [p.id for p in filter_by_class(planets, "gas_giant")] == ["cold"]

    def test_unbound_planet_reported(self):
        errors = validate_planets_against_slots([_planet("p1", 1.0)], _slots(1.0))
        assert errors == ["p1: bound to 0 slots"]

    def test_orbit_mismatch_reported(self):
        slots = _slots(1.0)
        slots[0].bind("p1")
        errors = validate_planets_against_slots([_planet("p1", 1.5)], slots)
        assert errors == [f"p1: orbit does not match slot {slots[0].id}"]

    def test_unknown_planet_in_slot_reported(self):
        slots = _slots(1.0)
        slots[0].bind("planet-ghost")
        errors = validate_planets_against_slots([], slots)
        assert len(errors) == 1
        assert "planet-ghost" in errors[0]

    def test_replace_keeps_name_assignment_pure(self):
        planet = _planet("p1", 1.0)
        named = assign_planet_names([planet], "Sol")
        assert planet.name == ""
        assert named[0] == replace(planet, name="Sol b")


# ── Domain purity ────────────────────────────────────────────────────

class TestPlanetsPurity:

    def test_imports_only_stdlib_and_package(self):
        import solargen.domain.planets as mod

        allowed = {'logging', 'math', 'collections', 'dataclasses', 'typing'}
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
