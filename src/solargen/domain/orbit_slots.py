# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Orbit slot layout for one orbit host.

Candidate orbits are laid out from the inner edge of the host's stable
zone outward in resonant steps, each at least MIN_SPACING_FACTOR beyond
the previous one, until the outer stability limit or MAX_SLOTS is hit.
A separate stability pass flags slots that companions perturb too much.
"""
import logging
import math
from collections.abc import Iterable
from dataclasses import dataclass, field

from solargen.domain.hierarchy import OrbitHost, Perturber
from solargen.domain.orbital_mechanics import (
    OrbitalZone,
    perturbation_strength,
    resonance_spacing,
)
from solargen.domain.random_stream import RandomStream

_log = logging.getLogger(__name__)

MIN_SPACING_FACTOR: float = 0.15
MAX_SLOTS: int = 20
INNER_EDGE_MARGIN: float = 0.05
STABILITY_THRESHOLD: float = 0.01


@dataclass
class OrbitSlot:
    """
    A candidate orbit around one host.

    Everything but occupancy and the stability flag is fixed at layout
    time. A slot is available iff it is stable and unfilled.
    """
    id: str
    host_id: str
    index: int
    semi_major_axis_m: float
    eccentricity: float
    zone: OrbitalZone
    fill_probability: float
    stable: bool = True
    body_id: str | None = None

    @property
    def is_filled(self) -> bool:
        return self.body_id is not None

    @property
    def is_available(self) -> bool:
        return self.stable and self.body_id is None

    def bind(self, body_id: str) -> None:
        if self.body_id is not None:
            raise ValueError(f"slot {self.id} already holds {self.body_id}")
        self.body_id = body_id


@dataclass(frozen=True)
class SlotLayoutConfig:
    """Tunables for slot placement, fill probability and eccentricity."""
    radius_safety_factor: float = 3.0
    min_spacing_factor: float = MIN_SPACING_FACTOR
    max_slots: int = MAX_SLOTS
    resonance_ratios: tuple[tuple[float, float], ...] = (
        (1.5, 0.20),
        (2.0, 0.35),
        (2.5, 0.25),
        (3.0, 0.20),
    )
    spacing_variation: float = 0.1
    fill_probability_base: float = 0.85
    fill_probability_floor: float = 0.15
    fill_decay_exponent: float = 0.35
    eccentricity_base: float = 0.01
    eccentricity_growth: float = 0.015
    eccentricity_cap: float = 0.25
    stability_threshold: float = STABILITY_THRESHOLD

    def __post_init__(self) -> None:
        if self.min_spacing_factor <= 0.0:
            raise ValueError(f"min_spacing_factor must be > 0, got {self.min_spacing_factor}")
        if self.max_slots < 1:
            raise ValueError(f"max_slots must be >= 1, got {self.max_slots}")
        if not self.resonance_ratios or any(r <= 1.0 or w < 0.0 for r, w in self.resonance_ratios):
            raise ValueError("resonance_ratios must be non-empty (ratio > 1, weight >= 0) pairs")
        if not 0.0 <= self.spacing_variation < 1.0:
            raise ValueError(f"spacing_variation must be in [0, 1), got {self.spacing_variation}")
        if not 0.0 <= self.fill_probability_floor <= self.fill_probability_base <= 1.0:
            raise ValueError("fill probabilities must satisfy 0 <= floor <= base <= 1")
        if not 0.0 <= self.eccentricity_base <= self.eccentricity_cap < 1.0:
            raise ValueError("eccentricities must satisfy 0 <= base <= cap < 1")
        if self.stability_threshold <= 0.0:
            raise ValueError(f"stability_threshold must be > 0, got {self.stability_threshold}")


@dataclass(frozen=True)
class SlotLayout:
    """Slots for one host; ``success`` is False only for an unusable zone."""
    host_id: str
    success: bool
    slots: list[OrbitSlot] = field(default_factory=list)
    start_m: float = 0.0


def generate_orbit_slots(
    host: OrbitHost,
    stream: RandomStream,
    config: SlotLayoutConfig | None = None,
    radius_m: float | None = None,
    perturbers: Iterable[Perturber] | None = None,
) -> SlotLayout:
    """
    Lay out candidate orbits around a host and run the stability pass.

    Args:
        host: Orbit host with a stable zone.
        stream: Stream dedicated to this host's layout.
        config: Layout tunables (defaults to SlotLayoutConfig()).
        radius_m: Physical radius for the near-surface margin
            (defaults to the host radius).
        perturbers: Companion masses/distances (defaults to the host's).

    Returns:
        SlotLayout with slots in strictly increasing distance.
    """
    config = config or SlotLayoutConfig()
    if not host.is_usable:
        return SlotLayout(host_id=host.id, success=False)

    radius = host.radius_m if radius_m is None else radius_m
    start = max(host.inner_stability_m * (1.0 + INNER_EDGE_MARGIN),
                radius * config.radius_safety_factor)
    ratios = dict(config.resonance_ratios)

    axes: list[float] = []
    a = start
    while a < host.outer_stability_m and len(axes) < config.max_slots:
        axes.append(a)
        ratio = stream.weighted_choice(ratios)
        candidate = resonance_spacing(a, ratio, config.spacing_variation, stream)
        a = max(candidate, a * (1.0 + config.min_spacing_factor))

    slots = [
        OrbitSlot(
            id=f"{host.id}-slot-{index}",
            host_id=host.id,
            index=index,
            semi_major_axis_m=axis,
            eccentricity=suggested_eccentricity(axis, start, config),
            zone=host.classify(axis),
            fill_probability=fill_probability(axis, start, config),
        )
        for index, axis in enumerate(axes)
    ]
    unstable = check_stability(
        slots,
        host.mass_kg,
        host.perturbers if perturbers is None else perturbers,
        config.stability_threshold,
    )
    _log.debug(
        "host %s: %d slots from %.3e m, %d unstable",
        host.id, len(slots), start, len(unstable),
    )
    return SlotLayout(host_id=host.id, success=True, slots=slots, start_m=start)


def fill_probability(axis_m: float, start_m: float, config: SlotLayoutConfig) -> float:
    """Non-increasing in distance: base · (start / a)^k, floored."""
    if axis_m <= 0.0 or start_m <= 0.0:
        return config.fill_probability_floor
    decayed = config.fill_probability_base * (start_m / axis_m) ** config.fill_decay_exponent
    return max(config.fill_probability_floor, min(config.fill_probability_base, decayed))


def suggested_eccentricity(axis_m: float, start_m: float, config: SlotLayoutConfig) -> float:
    """Non-decreasing in distance: base + growth · ln(a / start), capped."""
    if axis_m <= start_m or start_m <= 0.0:
        return config.eccentricity_base
    grown = config.eccentricity_base + config.eccentricity_growth * math.log(axis_m / start_m)
    return min(config.eccentricity_cap, grown)


def check_stability(
    slots: list[OrbitSlot],
    central_mass_kg: float,
    perturbers: Iterable[Perturber],
    threshold: float = STABILITY_THRESHOLD,
) -> list[OrbitSlot]:
    """
    Flag slots perturbed beyond ``threshold`` by any companion.

    Slots already flagged stay unstable.

    Returns:
        The slots that are unstable after the pass.
    """
    perturbers = list(perturbers)
    for slot in slots:
        for p in perturbers:
            strength = perturbation_strength(
                slot.semi_major_axis_m, p.distance_m, p.mass_kg, central_mass_kg,
            )
            if strength > threshold:
                slot.stable = False
                break
    return [s for s in slots if not s.stable]


def available_slots(slots: Iterable[OrbitSlot]) -> list[OrbitSlot]:
    return sorted((s for s in slots if s.is_available), key=lambda s: s.semi_major_axis_m)


def slots_in_zone(slots: Iterable[OrbitSlot], zone: OrbitalZone) -> list[OrbitSlot]:
    return [s for s in slots if s.zone is zone]


def spacing_violations(
    slots: list[OrbitSlot],
    min_spacing_factor: float = MIN_SPACING_FACTOR,
) -> list[tuple[str, str]]:
    """Adjacent slot pairs closer than the minimum spacing factor."""
    ordered = sorted(slots, key=lambda s: s.semi_major_axis_m)
    return [
        (inner.id, outer.id)
        for inner, outer in zip(ordered, ordered[1:])
        if outer.semi_major_axis_m < inner.semi_major_axis_m * (1.0 + min_spacing_factor) * (1.0 - 1e-12)
    ]
