# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Stellar multiplicity: star generation, binary hierarchy and orbit hosts.

Stars are paired innermost-first into a chain of barycenters, each wider
than the last. Every star becomes an S-type host bounded by its nearest
companion; every barycenter becomes a P-type (circumbinary) host bounded
inside by the binary and outside by the next companion. Hosts whose
stable zone has no width are dropped.
"""
import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import TYPE_CHECKING

from solargen.domain.bodies import BodyKind, CelestialBody
from solargen.domain.orbital_mechanics import (
    AstroConstants,
    OrbitalZone,
    classify_zone,
    frost_line_m,
    habitable_zone_m,
    inner_formation_limit_m,
    outer_stability_limit_m,
    p_type_stability_limit_m,
    s_type_stability_limit_m,
)
from solargen.domain.random_stream import RandomStream

if TYPE_CHECKING:
    from solargen.ports import StarGenerator

_log = logging.getLogger(__name__)

MAX_STARS: int = 8
_STAR_LETTERS = "ABCDEFGH"


class HostKind(Enum):
    SINGLE = "single"
    CIRCUMBINARY = "circumbinary"


@dataclass(frozen=True)
class Perturber:
    """A companion mass at a given distance from an orbit host."""
    source_id: str
    mass_kg: float
    distance_m: float


@dataclass(frozen=True)
class OrbitHost:
    """
    A gravitational center that planets can orbit.

    Zone boundaries (habitable zone, frost line) are derived from
    ``luminosity_lsun`` on access and never stored.
    """
    id: str
    kind: HostKind
    node_id: str
    mass_kg: float
    luminosity_lsun: float
    temperature_k: float
    radius_m: float
    inner_stability_m: float
    outer_stability_m: float
    star_ids: tuple[str, ...] = ()
    perturbers: tuple[Perturber, ...] = ()

    @property
    def zone_width_m(self) -> float:
        return self.outer_stability_m - self.inner_stability_m

    @property
    def is_usable(self) -> bool:
        return self.inner_stability_m > 0.0 and self.zone_width_m > 0.0

    @property
    def habitable_zone_inner_m(self) -> float:
        return habitable_zone_m(self.luminosity_lsun)[0]

    @property
    def habitable_zone_outer_m(self) -> float:
        return habitable_zone_m(self.luminosity_lsun)[1]

    @property
    def frost_line_m(self) -> float:
        return frost_line_m(self.luminosity_lsun)

    def classify(self, distance_m: float) -> OrbitalZone:
        return classify_zone(distance_m, self.habitable_zone_inner_m, self.frost_line_m)


@dataclass(frozen=True)
class StarNode:
    body_id: str


@dataclass(frozen=True)
class BarycenterNode:
    id: str
    left: "HierarchyNode"
    right: "HierarchyNode"
    separation_m: float
    eccentricity: float


HierarchyNode = StarNode | BarycenterNode


@dataclass(frozen=True)
class MultiplicitySpec:
    """How many stars to generate and how to arrange them."""
    min_stars: int = 1
    max_stars: int = 1
    spectral_hints: tuple[str, ...] = ()
    age_gyr: float = 4.6
    metallicity: float = 0.0
    first_separation_au: tuple[float, float] = (0.05, 300.0)
    separation_growth: tuple[float, float] = (4.0, 25.0)
    max_eccentricity: float = 0.7

    def __post_init__(self) -> None:
        # Sequences are stored as tuples so specs stay hashable.
        for name in ("spectral_hints", "first_separation_au", "separation_growth"):
            object.__setattr__(self, name, tuple(getattr(self, name)))
        if self.min_stars < 1:
            raise ValueError(f"min_stars must be >= 1, got {self.min_stars}")
        if self.max_stars < self.min_stars:
            raise ValueError(
                f"max_stars ({self.max_stars}) must be >= min_stars ({self.min_stars})"
            )
        if self.max_stars > MAX_STARS:
            raise ValueError(f"max_stars must be <= {MAX_STARS}, got {self.max_stars}")
        lo, hi = self.first_separation_au
        if lo <= 0.0 or hi < lo:
            raise ValueError(f"first_separation_au must satisfy 0 < lo <= hi, got {self.first_separation_au}")
        g_lo, g_hi = self.separation_growth
        if g_lo <= 1.0 or g_hi < g_lo:
            raise ValueError(f"separation_growth must satisfy 1 < lo <= hi, got {self.separation_growth}")
        if not 0.0 <= self.max_eccentricity < 1.0:
            raise ValueError(f"max_eccentricity must be in [0, 1), got {self.max_eccentricity}")
        if self.age_gyr <= 0.0:
            raise ValueError(f"age_gyr must be > 0, got {self.age_gyr}")


@dataclass(frozen=True)
class StarRequest:
    """What the star collaborator is asked to build."""
    index: int
    body_id: str
    spectral_hint: str | None
    age_gyr: float
    metallicity: float
    system_seed: int = 0


@dataclass(frozen=True)
class StellarHierarchy:
    """Result of building the stellar hierarchy."""
    success: bool
    stars: tuple[CelestialBody, ...] = ()
    root: HierarchyNode | None = None
    barycenters: tuple[BarycenterNode, ...] = ()
    hosts: tuple[OrbitHost, ...] = ()
    dropped_host_ids: tuple[str, ...] = ()


def hierarchy_leaves(node: HierarchyNode | None) -> list[str]:
    """Star body ids in left-to-right order."""
    if node is None:
        return []
    if isinstance(node, StarNode):
        return [node.body_id]
    return hierarchy_leaves(node.left) + hierarchy_leaves(node.right)


def iter_barycenters(node: HierarchyNode | None) -> list[BarycenterNode]:
    """Barycenters innermost-first (post-order)."""
    if node is None or isinstance(node, StarNode):
        return []
    return iter_barycenters(node.left) + iter_barycenters(node.right) + [node]


def build_hierarchy(
    spec: MultiplicitySpec,
    star_generator: "StarGenerator",
    stream: RandomStream,
    system_seed: int = 0,
) -> StellarHierarchy:
    """
    Generate the stars of a system and arrange them into orbit hosts.

    Args:
        spec: Multiplicity request.
        star_generator: Collaborator producing one star per request.
        stream: Stream dedicated to the hierarchy; each star gets a fork.
        system_seed: Root seed recorded on every generated star.

    Returns:
        StellarHierarchy; ``success`` is False when no star could be built.
    """
    count = stream.integers(spec.min_stars, spec.max_stars + 1)
    stars: list[CelestialBody] = []
    for index in range(count):
        star_stream = stream.fork()
        hint = spec.spectral_hints[index] if index < len(spec.spectral_hints) else None
        request = StarRequest(
            index=index,
            body_id=f"star-{index}",
            spectral_hint=hint,
            age_gyr=spec.age_gyr,
            metallicity=spec.metallicity,
            system_seed=system_seed,
        )
        star = star_generator.generate(request, None, star_stream)
        if star is None or star.kind is not BodyKind.STAR or star.mass_kg <= 0.0:
            _log.debug("star collaborator returned no usable star for index %d", index)
            continue
        stars.append(star)

    if not stars:
        return StellarHierarchy(success=False)
    return assemble_hierarchy(stars, spec, stream)


def assemble_hierarchy(
    stars: list[CelestialBody],
    spec: MultiplicitySpec,
    stream: RandomStream,
) -> StellarHierarchy:
    """Pair already generated stars into barycenters and derive their hosts."""
    if not stars:
        return StellarHierarchy(success=False)

    ordered = sorted(stars, key=lambda s: -s.mass_kg)
    au = AstroConstants.AU

    root: HierarchyNode = StarNode(ordered[0].id)
    barycenters: list[BarycenterNode] = []
    separation = 0.0
    eccentricity = 0.0
    for k, star in enumerate(ordered[1:], start=1):
        if k == 1:
            separation = stream.log_uniform(*spec.first_separation_au) * au
        else:
            separation *= stream.uniform(*spec.separation_growth)
        eccentricity += stream.uniform(0.0, 1.0) * (spec.max_eccentricity - eccentricity) * 0.5
        node = BarycenterNode(
            id=f"bary-{k - 1}",
            left=root,
            right=StarNode(star.id),
            separation_m=separation,
            eccentricity=eccentricity,
        )
        barycenters.append(node)
        root = node

    hosts: list[OrbitHost] = []
    dropped: list[str] = []
    candidates = [_star_host(i, ordered, barycenters) for i in range(len(ordered))]
    candidates += [_barycenter_host(j, ordered, barycenters) for j in range(len(barycenters))]
    for host in candidates:
        if host.is_usable:
            hosts.append(host)
        else:
            _log.debug(
                "dropping host %s: zone %.3e..%.3e m has no width",
                host.id, host.inner_stability_m, host.outer_stability_m,
            )
            dropped.append(host.id)

    return StellarHierarchy(
        success=True,
        stars=tuple(ordered),
        root=root,
        barycenters=tuple(barycenters),
        hosts=tuple(hosts),
        dropped_host_ids=tuple(dropped),
    )


def _subtree_mass(ordered: list[CelestialBody], count: int) -> float:
    return sum(s.mass_kg for s in ordered[:count])


def _star_host(
    index: int,
    ordered: list[CelestialBody],
    barycenters: list[BarycenterNode],
) -> OrbitHost:
    """S-type host around ordered[index]."""
    star = ordered[index]
    # Innermost pairing containing this star: bary-0 for the first two
    # stars, bary-(index-1) for every later one.
    innermost = max(index - 1, 0)
    perturbers: list[Perturber] = []
    for level in range(innermost, len(barycenters)):
        node = barycenters[level]
        if level == index - 1:
            source = node.left
            mass = _subtree_mass(ordered, index)
        else:
            source = node.right
            mass = ordered[level + 1].mass_kg
        source_id = source.body_id if isinstance(source, StarNode) else source.id
        perturbers.append(Perturber(source_id=source_id, mass_kg=mass, distance_m=node.separation_m))

    outer = outer_stability_limit_m(star.mass_kg)
    if perturbers:
        nearest = barycenters[innermost]
        outer = min(outer, s_type_stability_limit_m(
            nearest.separation_m, nearest.eccentricity, star.mass_kg, perturbers[0].mass_kg,
        ))

    return OrbitHost(
        id=f"host-{star.id}",
        kind=HostKind.SINGLE,
        node_id=star.id,
        mass_kg=star.mass_kg,
        luminosity_lsun=star.luminosity_lsun,
        temperature_k=star.temperature_k,
        radius_m=star.radius_m,
        inner_stability_m=inner_formation_limit_m(star.luminosity_lsun),
        outer_stability_m=outer,
        star_ids=(star.id,),
        perturbers=tuple(perturbers),
    )


def _barycenter_host(
    level: int,
    ordered: list[CelestialBody],
    barycenters: list[BarycenterNode],
) -> OrbitHost:
    """P-type host around barycenters[level], which encloses ordered[:level + 2]."""
    node = barycenters[level]
    members = ordered[:level + 2]
    inner_mass = _subtree_mass(ordered, level + 1)
    outer_star = ordered[level + 1]
    mass = inner_mass + outer_star.mass_kg
    luminosity = sum(s.luminosity_lsun for s in members)
    if luminosity > 0.0:
        temperature = sum(s.temperature_k * s.luminosity_lsun for s in members) / luminosity
    else:
        temperature = max(s.temperature_k for s in members)

    inner = max(
        p_type_stability_limit_m(node.separation_m, node.eccentricity, inner_mass, outer_star.mass_kg),
        inner_formation_limit_m(luminosity),
    )
    outer = outer_stability_limit_m(mass)
    perturbers: list[Perturber] = []
    for outer_level in range(level + 1, len(barycenters)):
        enclosing = barycenters[outer_level]
        companion = ordered[outer_level + 1]
        perturbers.append(Perturber(
            source_id=companion.id,
            mass_kg=companion.mass_kg,
            distance_m=enclosing.separation_m,
        ))
    if perturbers:
        enclosing = barycenters[level + 1]
        outer = min(outer, s_type_stability_limit_m(
            enclosing.separation_m, enclosing.eccentricity, mass, perturbers[0].mass_kg,
        ))

    return OrbitHost(
        id=f"host-{node.id}",
        kind=HostKind.CIRCUMBINARY,
        node_id=node.id,
        mass_kg=mass,
        luminosity_lsun=luminosity,
        temperature_k=temperature,
        radius_m=max(s.radius_m for s in members),
        inner_stability_m=inner,
        outer_stability_m=outer,
        star_ids=tuple(s.id for s in members),
        perturbers=tuple(perturbers),
    )


def assign_star_names(stars: list[CelestialBody], system_name: str) -> list[CelestialBody]:
    """
    Name stars by their order in ``stars`` (descending mass from the builder).

    A lone star takes the system name; multiples get A, B, C suffixes.
    """
    if len(stars) == 1:
        return [replace(stars[0], name=system_name)]
    return [
        replace(star, name=f"{system_name} {_STAR_LETTERS[i]}")
        for i, star in enumerate(stars)
    ]
