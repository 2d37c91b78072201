# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Structural validator for generated systems.

Checks the guarantees generation is supposed to uphold: a well-formed
stellar hierarchy, planets inside their host's stable zone, moons
between Roche limit and Hill sphere, ordered slots and belts clear of
planetary orbits. The system is only read, never modified.
"""
import logging

from solargen.domain.asteroids import validate_belts
from solargen.domain.bodies import BodyKind
from solargen.domain.hierarchy import hierarchy_leaves
from solargen.domain.moons import validate_moons
from solargen.domain.orbit_slots import spacing_violations
from solargen.domain.planets import validate_planets_against_slots
from solargen.domain.system import SolarSystem, ValidationResult
from solargen.ports import SystemValidator

_log = logging.getLogger(__name__)


class StructuralValidator(SystemValidator):
    """Collects every structural error and warning in one pass."""

    def validate(self, system: SolarSystem) -> ValidationResult:
        errors: list[str] = []
        warnings: list[str] = []
        self._check_hierarchy(system, errors)
        self._check_hosts(system, errors)
        self._check_parents(system, errors, warnings)
        self._check_moons(system, errors)
        self._check_belts(system, errors)
        _log.debug(
            "validated %s: %d errors, %d warnings", system.name, len(errors), len(warnings),
        )
        return ValidationResult(errors=tuple(errors), warnings=tuple(warnings))

    def _check_hierarchy(self, system: SolarSystem, errors: list[str]) -> None:
        stars = system.stars
        if not stars:
            errors.append("system has no stars")
            return
        if len(system.barycenters) != len(stars) - 1:
            errors.append(
                f"{len(stars)} stars need {len(stars) - 1} barycenters, "
                f"found {len(system.barycenters)}"
            )
        leaves = hierarchy_leaves(system.root)
        if sorted(leaves) != sorted(s.id for s in stars):
            errors.append(f"hierarchy leaves {leaves} do not match stars")
        for leaf in leaves:
            body = system.body(leaf)
            if body is None or body.kind is not BodyKind.STAR:
                errors.append(f"hierarchy leaf {leaf} is not a star")
        previous = 0.0
        for node in system.barycenters:
            if not 0.0 <= node.eccentricity < 1.0:
                errors.append(f"{node.id}: eccentricity {node.eccentricity} outside [0, 1)")
            if node.separation_m <= previous:
                errors.append(f"{node.id}: separation not wider than inner pair")
            previous = node.separation_m

    def _check_hosts(self, system: SolarSystem, errors: list[str]) -> None:
        for host_id, host in system.hosts.items():
            if not host.is_usable:
                errors.append(f"{host_id}: empty stable zone")
            slots = system.slots.get(host_id, [])
            for inner, outer in spacing_violations(slots):
                errors.append(f"{host_id}: slots {inner} and {outer} too close")
            planets = [p for p in system.planets if p.parent_id == host_id]
            errors.extend(validate_planets_against_slots(planets, slots))
            for planet in planets:
                a = planet.semi_major_axis_m
                if not host.inner_stability_m < a < host.outer_stability_m:
                    errors.append(
                        f"{planet.id}: a={a:.3e} m outside stable zone of {host_id} "
                        f"({host.inner_stability_m:.3e}, {host.outer_stability_m:.3e})"
                    )

    def _check_parents(self, system: SolarSystem, errors: list[str], warnings: list[str]) -> None:
        for body in system.bodies.values():
            if body.kind is BodyKind.STAR:
                continue
            if body.kind is BodyKind.MOON:
                parent = system.body(body.parent_id) if body.parent_id else None
                if parent is None or parent.kind is not BodyKind.PLANET:
                    warnings.append(f"{body.id}: moon without a parent planet")
                continue
            if body.parent_id not in system.hosts:
                errors.append(f"{body.id}: parent {body.parent_id} is not an orbit host")

    def _check_moons(self, system: SolarSystem, errors: list[str]) -> None:
        for planet in system.planets:
            host = system.host(planet.parent_id or "")
            if host is None:
                continue
            moons = [m for m in system.moons if m.parent_id == planet.id]
            if moons:
                errors.extend(validate_moons(planet, moons, host.mass_kg))

    def _check_belts(self, system: SolarSystem, errors: list[str]) -> None:
        errors.extend(validate_belts(system.belts.values(), system.planets, system.asteroids))
        for belt in system.belts.values():
            if belt.host_id not in system.hosts:
                errors.append(f"{belt.id}: unknown host {belt.host_id}")
