# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Port interfaces for checking and serializing generated systems.
"""
from typing import Any, Protocol, runtime_checkable

from solargen.domain.system import SolarSystem, ValidationResult


@runtime_checkable
class SystemValidator(Protocol):
    """Port for structural checks on a generated system."""

    def validate(self, system: SolarSystem) -> ValidationResult:
        """Check a system without modifying it."""
        ...


@runtime_checkable
class SystemSerializer(Protocol):
    """Port for lossless conversion to and from a plain representation."""

    def to_representation(self, system: SolarSystem) -> dict[str, Any]:
        """Convert a system to JSON-compatible data."""
        ...

    def from_representation(self, data: dict[str, Any]) -> SolarSystem:
        """Rebuild a system; raises ValueError on malformed data."""
        ...
