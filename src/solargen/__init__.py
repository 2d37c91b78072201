# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
solargen

Deterministic procedural generation of planetary systems: a stellar
binary hierarchy with S-type and P-type stability zones, resonantly
spaced orbit slots, and the planets, moons and asteroid belts occupying
them. Every system is reproducible bit for bit from its seed.
"""

from solargen.domain.random_stream import RandomStream, StreamState
from solargen.domain.orbital_mechanics import (
    AstroConstants,
    OrbitalZone,
    P_TYPE_SAFETY_FACTOR,
    S_TYPE_SAFETY_FACTOR,
    frost_line_m,
    habitable_zone_m,
    hill_sphere_radius_m,
    orbital_period_s,
    p_type_stability_limit_m,
    resonance_spacing,
    roche_limit_m,
    s_type_stability_limit_m,
)
from solargen.domain.bodies import AsteroidBelt, BodyKind, CelestialBody, Orbit
from solargen.domain.hierarchy import (
    BarycenterNode,
    HostKind,
    MultiplicitySpec,
    OrbitHost,
    StarNode,
    build_hierarchy,
)
from solargen.domain.orbit_slots import (
    MIN_SPACING_FACTOR,
    OrbitSlot,
    SlotLayoutConfig,
    check_stability,
    generate_orbit_slots,
)
from solargen.domain.planets import PlanetConfig, populate_planets
from solargen.domain.moons import MoonConfig, populate_moons
from solargen.domain.asteroids import BeltConfig, populate_belts
from solargen.domain.system import SolarSystem, ValidationResult
from solargen.domain.overrides import BodyOverride, BodyOverrides
from solargen.domain.system_generator import (
    BodyGenerators,
    GenerationConfig,
    SystemSpec,
    generate_system,
)
from solargen.domain.system_cache import SystemCache

__version__ = "0.3.0"
