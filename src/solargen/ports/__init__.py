# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Port interfaces consumed by the generators.

Adapters implement these to supply body physics, validation and
serialization.
"""
from solargen.ports.body_generation import (
    AsteroidGenerator,
    MoonGenerator,
    PlanetGenerator,
    StarGenerator,
)
from solargen.ports.system_io import SystemSerializer, SystemValidator

__all__ = [
    "AsteroidGenerator",
    "MoonGenerator",
    "PlanetGenerator",
    "StarGenerator",
    "SystemSerializer",
    "SystemValidator",
]
