# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
JSON system file I/O adapter.

Serializes generated systems losslessly to plain dicts and JSON files,
and reads system specs (seed, multiplicity, per-body overrides) from JSON.
"""
import json
from typing import Any

from solargen.domain.bodies import AsteroidBelt, BodyKind, CelestialBody, Orbit
from solargen.domain.hierarchy import (
    BarycenterNode,
    HierarchyNode,
    HostKind,
    MultiplicitySpec,
    OrbitHost,
    Perturber,
    StarNode,
    iter_barycenters,
)
from solargen.domain.orbit_slots import OrbitSlot
from solargen.domain.orbital_mechanics import OrbitalZone
from solargen.domain.overrides import BodyOverride, BodyOverrides
from solargen.domain.system import SolarSystem
from solargen.domain.system_generator import SystemSpec
from solargen.ports import SystemSerializer

FORMAT_NAME = "solargen-system"
FORMAT_VERSION = 1

_ORBIT_FIELDS = (
    "semi_major_axis_m", "eccentricity", "inclination_deg", "ascending_node_deg",
    "argument_periapsis_deg", "mean_anomaly_deg", "period_s",
)


def _orbit_to_dict(orbit: Orbit | None) -> dict[str, float] | None:
    if orbit is None:
        return None
    return {name: getattr(orbit, name) for name in _ORBIT_FIELDS}


def _body_to_dict(body: CelestialBody) -> dict[str, Any]:
    return {
        'id': body.id,
        'name': body.name,
        'kind': body.kind.value,
        'mass_kg': body.mass_kg,
        'radius_m': body.radius_m,
        'seed': body.seed,
        'orbit': _orbit_to_dict(body.orbit),
        'parent_id': body.parent_id,
        'temperature_k': body.temperature_k,
        'luminosity_lsun': body.luminosity_lsun,
        'body_class': body.body_class,
        'composition': body.composition,
        'properties': dict(body.properties),
    }


def _body_from_dict(data: dict[str, Any]) -> CelestialBody:
    orbit = data.get('orbit')
    return CelestialBody(
        id=data['id'],
        name=data['name'],
        kind=BodyKind(data['kind']),
        mass_kg=float(data['mass_kg']),
        radius_m=float(data['radius_m']),
        seed=int(data['seed']),
        orbit=Orbit(**orbit) if orbit is not None else None,
        parent_id=data.get('parent_id'),
        temperature_k=float(data.get('temperature_k', 0.0)),
        luminosity_lsun=float(data.get('luminosity_lsun', 0.0)),
        body_class=data.get('body_class', ''),
        composition=data.get('composition', ''),
        properties=dict(data.get('properties', {})),
    )


def _node_to_dict(node: HierarchyNode | None) -> dict[str, Any] | None:
    if node is None:
        return None
    if isinstance(node, StarNode):
        return {'star': node.body_id}
    return {
        'id': node.id,
        'left': _node_to_dict(node.left),
        'right': _node_to_dict(node.right),
        'separation_m': node.separation_m,
        'eccentricity': node.eccentricity,
    }


def _node_from_dict(data: dict[str, Any] | None) -> HierarchyNode | None:
    if data is None:
        return None
    if 'star' in data:
        return StarNode(data['star'])
    return BarycenterNode(
        id=data['id'],
        left=_node_from_dict(data['left']),
        right=_node_from_dict(data['right']),
        separation_m=float(data['separation_m']),
        eccentricity=float(data['eccentricity']),
    )


def _host_to_dict(host: OrbitHost) -> dict[str, Any]:
    return {
        'id': host.id,
        'kind': host.kind.value,
        'node_id': host.node_id,
        'mass_kg': host.mass_kg,
        'luminosity_lsun': host.luminosity_lsun,
        'temperature_k': host.temperature_k,
        'radius_m': host.radius_m,
        'inner_stability_m': host.inner_stability_m,
        'outer_stability_m': host.outer_stability_m,
        'star_ids': list(host.star_ids),
        'perturbers': [
            {'source_id': p.source_id, 'mass_kg': p.mass_kg, 'distance_m': p.distance_m}
            for p in host.perturbers
        ],
    }


def _host_from_dict(data: dict[str, Any]) -> OrbitHost:
    return OrbitHost(
        id=data['id'],
        kind=HostKind(data['kind']),
        node_id=data['node_id'],
        mass_kg=float(data['mass_kg']),
        luminosity_lsun=float(data['luminosity_lsun']),
        temperature_k=float(data['temperature_k']),
        radius_m=float(data['radius_m']),
        inner_stability_m=float(data['inner_stability_m']),
        outer_stability_m=float(data['outer_stability_m']),
        star_ids=tuple(data.get('star_ids', ())),
        perturbers=tuple(Perturber(**p) for p in data.get('perturbers', ())),
    )


def _slot_to_dict(slot: OrbitSlot) -> dict[str, Any]:
    return {
        'id': slot.id,
        'host_id': slot.host_id,
        'index': slot.index,
        'semi_major_axis_m': slot.semi_major_axis_m,
        'eccentricity': slot.eccentricity,
        'zone': slot.zone.value,
        'fill_probability': slot.fill_probability,
        'stable': slot.stable,
        'body_id': slot.body_id,
    }


def _slot_from_dict(data: dict[str, Any]) -> OrbitSlot:
    return OrbitSlot(**{**data, 'zone': OrbitalZone(data['zone'])})


def _belt_to_dict(belt: AsteroidBelt) -> dict[str, Any]:
    return {
        'id': belt.id,
        'host_id': belt.host_id,
        'name': belt.name,
        'inner_edge_m': belt.inner_edge_m,
        'outer_edge_m': belt.outer_edge_m,
        'total_mass_kg': belt.total_mass_kg,
        'composition': belt.composition,
        'slot_ids': list(belt.slot_ids),
        'asteroid_ids': list(belt.asteroid_ids),
        'major_asteroid_ids': list(belt.major_asteroid_ids),
    }


def _belt_from_dict(data: dict[str, Any]) -> AsteroidBelt:
    return AsteroidBelt(**{
        **data,
        'slot_ids': tuple(data.get('slot_ids', ())),
        'asteroid_ids': tuple(data.get('asteroid_ids', ())),
        'major_asteroid_ids': tuple(data.get('major_asteroid_ids', ())),
    })


class JsonSystemSerializer(SystemSerializer):
    """Lossless SolarSystem ⇄ JSON-compatible dict conversion."""

    def to_representation(self, system: SolarSystem) -> dict[str, Any]:
        return {
            'format': FORMAT_NAME,
            'version': FORMAT_VERSION,
            'seed': system.seed,
            'name': system.name,
            'hierarchy': _node_to_dict(system.root),
            'bodies': [_body_to_dict(b) for b in system.bodies.values()],
            'hosts': [_host_to_dict(h) for h in system.hosts.values()],
            'slots': {
                host_id: [_slot_to_dict(s) for s in slots]
                for host_id, slots in system.slots.items()
            },
            'belts': [_belt_to_dict(b) for b in system.belts.values()],
        }

    def from_representation(self, data: dict[str, Any]) -> SolarSystem:
        if not isinstance(data, dict) or data.get('format') != FORMAT_NAME:
            raise ValueError(f"Not a {FORMAT_NAME} document")
        if data.get('version') != FORMAT_VERSION:
            raise ValueError(f"Unsupported {FORMAT_NAME} version: {data.get('version')}")
        try:
            root = _node_from_dict(data.get('hierarchy'))
            system = SolarSystem(
                seed=int(data['seed']),
                name=data.get('name', ''),
                root=root,
                barycenters=tuple(iter_barycenters(root)),
            )
            for body in data.get('bodies', []):
                system.add_body(_body_from_dict(body))
            slots = data.get('slots', {})
            for host in data.get('hosts', []):
                host_obj = _host_from_dict(host)
                system.add_host(host_obj, [_slot_from_dict(s) for s in slots.get(host_obj.id, [])])
            for belt in data.get('belts', []):
                system.add_belt(_belt_from_dict(belt))
        except (KeyError, TypeError) as e:
            raise ValueError(f"Malformed {FORMAT_NAME} document: {e!r}") from e
        return system


class JsonSystemWriter:
    """Writes generated systems to JSON files."""

    def __init__(self, serializer: SystemSerializer | None = None) -> None:
        self._serializer = serializer or JsonSystemSerializer()

    def write_system(self, system: SolarSystem, path: str) -> None:
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(self._serializer.to_representation(system), f, indent=2, ensure_ascii=False)


class JsonSystemReader:
    """Reads systems written by JsonSystemWriter."""

    def __init__(self, serializer: SystemSerializer | None = None) -> None:
        self._serializer = serializer or JsonSystemSerializer()

    def read_system(self, path: str) -> SolarSystem:
        with open(path, encoding='utf-8') as f:
            return self._serializer.from_representation(json.load(f))


# ── System spec files ─────────────────────────────────────────────

def _require_seed(data: Any) -> None:
    if not isinstance(data, dict):
        raise ValueError("System spec must be a JSON object")
    if 'seed' not in data:
        raise ValueError("System spec requires a 'seed'")


def spec_from_dict(data: dict[str, Any]) -> SystemSpec:
    """
    Build a SystemSpec from parsed JSON.

    Expected shape::

        {"seed": 42, "name": "Kelvar",
         "multiplicity": {"min_stars": 1, "max_stars": 3, "spectral_hints": ["G"]}}
    """
    _require_seed(data)
    try:
        return SystemSpec(
            seed=int(data['seed']),
            multiplicity=MultiplicitySpec(**dict(data.get('multiplicity', {}))),
            name=data.get('name', ''),
        )
    except TypeError as e:
        raise ValueError(f"Invalid multiplicity: {e}") from e


def overrides_from_dict(data: dict[str, Any]) -> BodyOverrides:
    """Overrides listed under ``"overrides"``, all bound to the spec's seed."""
    _require_seed(data)
    seed = int(data['seed'])
    entries = data.get('overrides', [])
    if not isinstance(entries, list):
        raise ValueError("'overrides' must be a list")
    overrides = BodyOverrides()
    for i, entry in enumerate(entries):
        if not isinstance(entry, dict) or 'body_id' not in entry:
            raise ValueError(f"Override {i} requires a 'body_id'")
        try:
            changes = dict(entry.get('changes', {}))
        except (TypeError, ValueError) as e:
            raise ValueError(f"Override {i} has malformed 'changes': {e}") from e
        overrides.add(BodyOverride(seed=seed, body_id=str(entry['body_id']), changes=changes))
    return overrides


def read_system_spec(path: str) -> SystemSpec:
    with open(path, encoding='utf-8') as f:
        return spec_from_dict(json.load(f))


def read_body_overrides(path: str) -> BodyOverrides:
    with open(path, encoding='utf-8') as f:
        return overrides_from_dict(json.load(f))
