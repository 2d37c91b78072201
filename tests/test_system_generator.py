# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Tests for end-to-end system generation.

Covers determinism, rejected inputs, pre-built stars, stream isolation
between stages, naming and structural validity of whole systems.
"""
import ast

import pytest

from solargen.adapters.archetype_bodies import default_body_generators
from solargen.adapters.json_io import JsonSystemSerializer
from solargen.adapters.structural_validator import StructuralValidator
from solargen.domain.bodies import BodyKind, CelestialBody
from solargen.domain.hierarchy import MultiplicitySpec, assemble_hierarchy, assign_star_names
from solargen.domain.orbital_mechanics import AstroConstants
from solargen.domain.overrides import BodyOverride
from solargen.domain.random_stream import RandomStream
from solargen.domain.system_generator import (
    BodyGenerators,
    SystemSpec,
    generate_system,
    host_names,
    system_name,
)

M_SUN = AstroConstants.M_SUN


# ── Helpers ──────────────────────────────────────────────────────────

class NullStarGenerator:
    def generate(self, request, parent, stream):
        return None


def _generate(primary, **kwargs):
    return generate_system(primary, default_body_generators(), **kwargs)


def _snapshot(system):
    return JsonSystemSerializer().to_representation(system)


def _sun(seed=7, name="Sol", body_id="sun", kind=BodyKind.STAR, mass_kg=M_SUN):
    return CelestialBody(
        id=body_id,
        name=name,
        kind=kind,
        mass_kg=mass_kg,
        radius_m=AstroConstants.R_SUN,
        seed=seed,
        temperature_k=5772.0,
        luminosity_lsun=1.0,
        body_class="G",
    )


# ── Determinism ──────────────────────────────────────────────────────

class TestDeterminism:

    @pytest.mark.parametrize("seed", [0, 1, 42, 2**31])
    def test_same_seed_same_system(self, seed):
        assert _snapshot(_generate(seed)) == _snapshot(_generate(seed))

    def test_multi_star_deterministic(self):
        spec = SystemSpec(seed=99, multiplicity=MultiplicitySpec(min_stars=2, max_stars=4))
        assert _snapshot(_generate(spec)) == _snapshot(_generate(spec))

    def test_int_equals_default_spec(self):
        assert _snapshot(_generate(12)) == _snapshot(_generate(SystemSpec(seed=12)))

    def test_different_seeds_differ(self):
        assert _snapshot(_generate(1)) != _snapshot(_generate(2))


# ── Rejected inputs ──────────────────────────────────────────────────

class TestRejectedInputs:

    def test_none(self):
        assert _generate(None) is None

    def test_negative_seed(self):
        assert _generate(-1) is None

    def test_bool_is_not_a_seed(self):
        assert _generate(True) is None

    def test_negative_spec_seed_raises(self):
        with pytest.raises(ValueError):
            SystemSpec(seed=-5)

    def test_non_star_body(self):
        assert _generate(_sun(kind=BodyKind.PLANET)) is None

    def test_massless_star(self):
        assert _generate(_sun(mass_kg=0.0)) is None

    def test_star_with_negative_seed(self):
        assert _generate(_sun(seed=-3)) is None

    def test_no_star_generated(self):
        generators = default_body_generators()
        generators = BodyGenerators(
            star=NullStarGenerator(), planet=generators.planet,
            moon=generators.moon, asteroid=generators.asteroid,
        )
        assert generate_system(5, generators) is None


# ── Pre-built primary ────────────────────────────────────────────────

class TestPrebuiltStar:

    def test_system_around_given_star(self):
        system = _generate(_sun())
        assert system.seed == 7
        assert system.name == "Sol"
        assert [s.id for s in system.stars] == ["sun"]
        assert list(system.hosts) == ["host-sun"]
        assert system.stars[0].mass_kg == M_SUN

    def test_planets_orbit_given_star(self):
        system = _generate(_sun())
        for planet in system.planets:
            assert planet.parent_id == "host-sun"
            assert planet.name.startswith("Sol ")

    def test_given_star_validates(self):
        assert StructuralValidator().validate(_generate(_sun())).errors == ()


# ── Structure ────────────────────────────────────────────────────────

class TestSystemStructure:

    @pytest.mark.parametrize("seed", range(10))
    def test_valid_multi_star_systems(self, seed):
        spec = SystemSpec(seed=seed, multiplicity=MultiplicitySpec(min_stars=1, max_stars=3))
        system = _generate(spec)
        result = StructuralValidator().validate(system)
        assert result.errors == ()

    @pytest.mark.parametrize("seed", range(5))
    def test_body_seeds_are_root_seed(self, seed):
        system = _generate(seed)
        assert all(b.seed == seed for b in system.bodies.values())

    def test_counts_consistent(self):
        system = _generate(3)
        counts = system.counts()
        assert counts["star"] + counts["planet"] + counts["moon"] + counts["asteroid"] == len(system)
        assert counts["host"] == len(system.hosts)

    def test_moons_belong_to_planets(self):
        for seed in range(5):
            system = _generate(seed)
            for moon in system.moons:
                assert system.body(moon.parent_id).kind is BodyKind.PLANET

    def test_asteroids_belong_to_belts(self):
        for seed in range(10):
            system = _generate(seed)
            for asteroid in system.asteroids:
                assert asteroid.parent_id in system.hosts
                assert asteroid.id in system.belts[asteroid.properties["belt_id"]].asteroid_ids

    def test_corpus_produces_every_kind(self):
        totals = {"planet": 0, "moon": 0, "belt": 0}
        for seed in range(20):
            counts = _generate(seed).counts()
            for key in totals:
                totals[key] += counts[key]
        assert all(v > 0 for v in totals.values()), totals


# ── Stage isolation ──────────────────────────────────────────────────

class TestStageIsolation:

    @pytest.mark.parametrize("seed", range(5))
    def test_moons_off_keeps_planets(self, seed):
        full = _generate(seed)
        bare = _generate(seed, include_moons=False)
        assert bare.moons == []
        assert bare.planets == full.planets
        assert bare.belts == full.belts

    @pytest.mark.parametrize("seed", range(5))
    def test_belts_off_keeps_planets_and_moons(self, seed):
        full = _generate(seed)
        bare = _generate(seed, include_belts=False)
        assert bare.belts == {}
        assert bare.asteroids == []
        assert bare.planets == full.planets
        assert bare.moons == full.moons

    def test_explicit_name_keeps_bodies(self):
        a = _generate(SystemSpec(seed=4))
        b = _generate(SystemSpec(seed=4, name="Kelvar"))
        assert b.name == "Kelvar"
        assert [p.semi_major_axis_m for p in a.planets] == [p.semi_major_axis_m for p in b.planets]


# ── Overrides ────────────────────────────────────────────────────────

class TestGenerationOverrides:

    def test_override_applied(self):
        override = BodyOverride(seed=5, body_id="star-0", changes={"name": "Solace"})
        system = _generate(5, overrides=[override])
        assert system.body("star-0").name == "Solace"

    def test_override_for_other_seed_ignored(self):
        override = BodyOverride(seed=6, body_id="star-0", changes={"name": "Solace"})
        assert _snapshot(_generate(5, overrides=[override])) == _snapshot(_generate(5))

    def test_override_leaves_other_bodies(self):
        override = BodyOverride(seed=5, body_id="star-0", changes={"temperature_k": 4000.0})
        base = _generate(5)
        edited = _generate(5, overrides=[override])
        for body_id, body in base.bodies.items():
            if body_id != "star-0":
                assert edited.bodies[body_id] == body


# ── Naming ───────────────────────────────────────────────────────────

class TestNaming:

    def test_single_star_takes_system_name(self):
        system = _generate(SystemSpec(seed=8, name="Kelvar"))
        assert system.stars[0].name == "Kelvar"
        letters = [p.name.rsplit(" ", 1)[-1] for p in sorted(system.planets, key=lambda p: p.semi_major_axis_m)]
        assert letters == list("bcdefghijklmnopqrstuvwxyz"[:len(letters)])

    def test_multiple_stars_lettered(self):
        spec = SystemSpec(seed=8, name="Kelvar", multiplicity=MultiplicitySpec(min_stars=3, max_stars=3))
        system = _generate(spec)
        assert [s.name for s in system.stars] == ["Kelvar A", "Kelvar B", "Kelvar C"]

    def test_generated_name_deterministic(self):
        assert system_name(RandomStream(3)) == system_name(RandomStream(3))
        assert system_name(RandomStream(3))[0].isupper()

    def test_circumbinary_host_name(self):
        stars = [
            _sun(body_id="star-0", name=""),
            _sun(body_id="star-1", name="", mass_kg=0.8 * M_SUN),
        ]
        spec = MultiplicitySpec(min_stars=2, max_stars=2, first_separation_au=(0.1, 0.1))
        hierarchy = assemble_hierarchy(stars, spec, RandomStream(1))
        named = assign_star_names(list(hierarchy.stars), "Kelvar")
        names = host_names(hierarchy, named)
        assert names["host-bary-0"] == "Kelvar AB"


# ── Domain purity ────────────────────────────────────────────────────

class TestSystemGeneratorPurity:

    def test_no_adapter_imports(self):
        import solargen.domain.system_generator as mod

        with open(mod.__file__) as f:
            tree = ast.parse(f.read())

        for node in ast.walk(tree):
            if isinstance(node, ast.ImportFrom) and node.module:
                assert not node.module.startswith("solargen.adapters"), node.module
