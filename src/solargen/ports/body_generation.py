# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Port interfaces for body generation.

The occupancy generators decide where a body goes; adapters implementing
these decide what it is (mass, radius, class, composition). Every draw
an adapter makes must come from the stream it is handed.
"""
from typing import Protocol, runtime_checkable

from solargen.domain.asteroids import AsteroidRequest
from solargen.domain.bodies import CelestialBody
from solargen.domain.hierarchy import OrbitHost, StarRequest
from solargen.domain.moons import MoonRequest
from solargen.domain.planets import PlanetRequest
from solargen.domain.random_stream import RandomStream


@runtime_checkable
class StarGenerator(Protocol):
    """Port for building one star of a system."""

    def generate(
        self,
        request: StarRequest,
        parent: None,
        stream: RandomStream,
    ) -> CelestialBody | None:
        """Build a STAR body, or None if the request cannot be honoured."""
        ...


@runtime_checkable
class PlanetGenerator(Protocol):
    """Port for building the planet occupying one orbit slot."""

    def generate(
        self,
        request: PlanetRequest,
        parent: OrbitHost | None,
        stream: RandomStream,
    ) -> CelestialBody | None:
        """
        Build a PLANET body for the requested slot.

        Args:
            request: Slot context, orbit and zone-biased class weights.
            parent: Host the slot belongs to; None yields None.
            stream: Stream dedicated to this slot.

        Returns:
            The planet, or None when the host context is missing.
        """
        ...


@runtime_checkable
class MoonGenerator(Protocol):
    """Port for building one moon of a planet."""

    def generate(
        self,
        request: MoonRequest,
        parent: CelestialBody | None,
        stream: RandomStream,
    ) -> CelestialBody | None:
        """Build a MOON body, or None when the planet context is missing."""
        ...


@runtime_checkable
class AsteroidGenerator(Protocol):
    """Port for building one asteroid of a belt."""

    def generate(
        self,
        request: AsteroidRequest,
        parent: OrbitHost | None,
        stream: RandomStream,
    ) -> CelestialBody | None:
        """Build an ASTEROID body, or None when the host context is missing."""
        ...
