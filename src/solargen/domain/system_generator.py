# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
System entry point: seed in, populated SolarSystem out.

Stream discipline is fixed so that output depends on the seed alone.
The root stream hands out, in order, one fork for the hierarchy, one for
naming, and then four per orbit host (slots, planets, moons, belts).
All four host forks are taken even when moons or belts are switched
off, so toggling either never shifts the draws of anything else.

Hosts are visited in hierarchy order: star hosts by descending stellar
mass, then circumbinary hosts innermost-first. Names are assigned after
all occupancy is done; overrides are applied last.
"""
import logging
from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING

from solargen.domain.asteroids import (
    BeltConfig,
    assign_asteroid_names,
    assign_belt_names,
    populate_belts,
)
from solargen.domain.bodies import AsteroidBelt, BodyKind, CelestialBody
from solargen.domain.hierarchy import (
    HostKind,
    MultiplicitySpec,
    OrbitHost,
    StellarHierarchy,
    assemble_hierarchy,
    assign_star_names,
    build_hierarchy,
)
from solargen.domain.moons import MoonConfig, assign_moon_names, populate_moons
from solargen.domain.orbit_slots import OrbitSlot, SlotLayoutConfig, generate_orbit_slots
from solargen.domain.overrides import BodyOverride, BodyOverrides
from solargen.domain.planets import PlanetConfig, assign_planet_names, populate_planets
from solargen.domain.random_stream import RandomStream
from solargen.domain.system import SolarSystem

if TYPE_CHECKING:
    from solargen.ports import (
        AsteroidGenerator,
        MoonGenerator,
        PlanetGenerator,
        StarGenerator,
    )

_log = logging.getLogger(__name__)

_NAME_PREFIXES: tuple[str, ...] = (
    "Ach", "Bren", "Cal", "Dor", "Ess", "Fen", "Gor", "Hal", "Ilm", "Kor",
    "Lun", "Mor", "Nar", "Oph", "Pel", "Sar", "Tir", "Vas", "Wyr", "Zel",
)
_NAME_SUFFIXES: tuple[str, ...] = (
    "ada", "en", "ith", "on", "ara", "ius", "ex", "ol", "ane", "yr", "ea", "is",
)


@dataclass(frozen=True)
class SystemSpec:
    """What to generate: root seed, stellar multiplicity and an optional name."""
    seed: int
    multiplicity: MultiplicitySpec = field(default_factory=MultiplicitySpec)
    name: str = ""

    def __post_init__(self) -> None:
        if self.seed < 0:
            raise ValueError(f"seed must be non-negative, got {self.seed}")


@dataclass(frozen=True)
class GenerationConfig:
    """Tunables for every generation stage."""
    slots: SlotLayoutConfig = field(default_factory=SlotLayoutConfig)
    planets: PlanetConfig = field(default_factory=PlanetConfig)
    moons: MoonConfig = field(default_factory=MoonConfig)
    belts: BeltConfig = field(default_factory=BeltConfig)


@dataclass(frozen=True)
class BodyGenerators:
    """The four body collaborators a system needs."""
    star: "StarGenerator"
    planet: "PlanetGenerator"
    moon: "MoonGenerator"
    asteroid: "AsteroidGenerator"


@dataclass
class _HostContents:
    host: OrbitHost
    slots: list[OrbitSlot]
    planets: list[CelestialBody]
    moons: dict[str, list[CelestialBody]]
    belts: list[AsteroidBelt]
    asteroids: list[CelestialBody]


def generate_system(
    primary: "SystemSpec | int | CelestialBody | None",
    generators: BodyGenerators,
    include_belts: bool = True,
    include_moons: bool = True,
    overrides: "BodyOverrides | Iterable[BodyOverride] | None" = None,
    config: GenerationConfig | None = None,
) -> SolarSystem | None:
    """
    Generate a complete planetary system.

    Args:
        primary: A SystemSpec, a bare seed, or a pre-built star to build a
            single-star system around (its ``seed`` becomes the root seed).
        generators: Body collaborators.
        include_belts: Place asteroid belts in the gaps between planets.
        include_moons: Populate planets' Hill spheres with moons.
        overrides: Per-body edits applied after naming.
        config: Stage tunables (defaults to GenerationConfig()).

    Returns:
        The assembled SolarSystem, or None when ``primary`` is None, a
        negative seed, a non-star body, a star without positive mass, or
        when no star could be generated.
    """
    config = config or GenerationConfig()
    spec, star = _resolve_primary(primary)
    if spec is None:
        return None

    root = RandomStream(spec.seed)
    hierarchy_stream = root.fork()
    naming_stream = root.fork()

    if star is not None:
        hierarchy = assemble_hierarchy([star], spec.multiplicity, hierarchy_stream)
    else:
        hierarchy = build_hierarchy(spec.multiplicity, generators.star, hierarchy_stream, spec.seed)
    if not hierarchy.success:
        _log.debug("seed %d: no usable star, nothing generated", spec.seed)
        return None

    contents = [
        _populate_host(host, spec, generators, root, include_moons, include_belts, config)
        for host in hierarchy.hosts
    ]

    system = SolarSystem(
        seed=spec.seed,
        name=spec.name or system_name(naming_stream),
        root=hierarchy.root,
        barycenters=hierarchy.barycenters,
    )
    _assemble_named(system, hierarchy, contents)

    if overrides is not None:
        if not isinstance(overrides, BodyOverrides):
            overrides = BodyOverrides(overrides)
        system = overrides.apply(system)

    counts = system.counts()
    _log.info(
        "system %s (seed %d): %d stars, %d hosts, %d planets, %d moons, %d belts, %d asteroids",
        system.name, system.seed, counts["star"], counts["host"], counts["planet"],
        counts["moon"], counts["belt"], counts["asteroid"],
    )
    return system


def _resolve_primary(
    primary: "SystemSpec | int | CelestialBody | None",
) -> tuple[SystemSpec | None, CelestialBody | None]:
    if primary is None or isinstance(primary, bool):
        return None, None
    if isinstance(primary, SystemSpec):
        return primary, None
    if isinstance(primary, int):
        if primary < 0:
            return None, None
        return SystemSpec(seed=primary), None
    if isinstance(primary, CelestialBody):
        if primary.kind is not BodyKind.STAR or primary.mass_kg <= 0.0 or primary.seed < 0:
            return None, None
        star = replace(primary, id=primary.id or "star-0", parent_id=None, orbit=None)
        return SystemSpec(seed=primary.seed, name=primary.name), star
    return None, None


def _populate_host(
    host: OrbitHost,
    spec: SystemSpec,
    generators: BodyGenerators,
    root: RandomStream,
    include_moons: bool,
    include_belts: bool,
    config: GenerationConfig,
) -> _HostContents:
    slot_stream = root.fork()
    planet_stream = root.fork()
    moon_stream = root.fork()
    belt_stream = root.fork()
    multiplicity = spec.multiplicity

    layout = generate_orbit_slots(host, slot_stream, config.slots)
    population = populate_planets(
        host, layout.slots, generators.planet, planet_stream, config.planets,
        age_gyr=multiplicity.age_gyr, metallicity=multiplicity.metallicity, system_seed=spec.seed,
    )
    contents = _HostContents(
        host=host, slots=layout.slots, planets=population.planets,
        moons={}, belts=[], asteroids=[],
    )

    if include_moons:
        for planet in population.planets:
            moons = populate_moons(
                planet, host.mass_kg, generators.moon, moon_stream.fork(), config.moons, spec.seed,
            )
            contents.moons[planet.id] = moons.moons

    if include_belts:
        belts = populate_belts(
            host, layout.slots, population.planets, generators.asteroid, belt_stream,
            config.belts, spec.seed,
        )
        contents.belts = belts.belts
        contents.asteroids = belts.asteroids
    return contents


# ── Naming ────────────────────────────────────────────────────────

def system_name(stream: RandomStream) -> str:
    """Prefix plus suffix, with a catalogue number on one system in four."""
    name = stream.choice(_NAME_PREFIXES) + stream.choice(_NAME_SUFFIXES)
    if stream.chance(0.25):
        name = f"{name}-{stream.integers(10, 1000)}"
    return name


def host_names(hierarchy: StellarHierarchy, stars: list[CelestialBody]) -> dict[str, str]:
    """
    Display name per host id.

    An S-type host takes its star's name; a circumbinary host takes the
    system name followed by its stars' letters ("Kelvar AB").
    """
    by_id = {s.id: s for s in stars}
    names: dict[str, str] = {}
    for host in hierarchy.hosts:
        if host.kind is HostKind.SINGLE:
            names[host.id] = by_id[host.node_id].name
            continue
        members = [by_id[i].name for i in host.star_ids]
        prefix = members[0].rsplit(" ", 1)[0]
        names[host.id] = f"{prefix} " + "".join(m.rsplit(" ", 1)[-1] for m in members)
    return names


def _assemble_named(
    system: SolarSystem,
    hierarchy: StellarHierarchy,
    contents: list[_HostContents],
) -> None:
    stars = assign_star_names(list(hierarchy.stars), system.name)
    system.add_bodies(stars)
    names = host_names(hierarchy, stars)

    for part in contents:
        host_name = names[part.host.id]
        system.add_host(part.host, part.slots)

        planets = assign_planet_names(part.planets, host_name)
        system.add_bodies(planets)
        for planet in planets:
            system.add_bodies(assign_moon_names(part.moons.get(planet.id, []), planet.name))

        members = {a.id: a for a in part.asteroids}
        for belt in assign_belt_names(part.belts, host_name):
            system.add_belt(belt)
            system.add_bodies(assign_asteroid_names(
                [members[i] for i in belt.asteroid_ids], belt.name,
            ))
