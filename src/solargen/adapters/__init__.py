# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Adapters for body generation, validation and system I/O.

File I/O and concrete body physics are confined to this layer.
"""
from solargen.adapters.archetype_bodies import (
    ArchetypeAsteroidGenerator,
    ArchetypeMoonGenerator,
    ArchetypePlanetGenerator,
    ArchetypeStarGenerator,
    default_body_generators,
)
from solargen.adapters.json_io import (
    JsonSystemReader,
    JsonSystemSerializer,
    JsonSystemWriter,
    read_body_overrides,
    read_system_spec,
)
from solargen.adapters.structural_validator import StructuralValidator

__all__ = [
    "ArchetypeAsteroidGenerator",
    "ArchetypeMoonGenerator",
    "ArchetypePlanetGenerator",
    "ArchetypeStarGenerator",
    "JsonSystemReader",
    "JsonSystemSerializer",
    "JsonSystemWriter",
    "StructuralValidator",
    "default_body_generators",
    "read_body_overrides",
    "read_system_spec",
]
