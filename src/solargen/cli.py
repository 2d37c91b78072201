# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Command-line interface for planetary-system generation.

Usage:
    # Single system from a seed
    solargen --seed 42

    # Up to three stars, written to JSON and validated
    solargen --seed 42 --max-stars 3 -o system.json --validate

    # Seed, multiplicity and per-body overrides from a spec file
    solargen --spec kelvar.json -o kelvar-system.json

    # Planets only
    solargen --seed 7 --no-moons --no-belts
"""
import argparse
import logging
import sys

from solargen.adapters.archetype_bodies import default_body_generators
from solargen.adapters.json_io import JsonSystemWriter, read_body_overrides, read_system_spec
from solargen.adapters.structural_validator import StructuralValidator
from solargen.domain.bodies import BodyKind
from solargen.domain.hierarchy import MultiplicitySpec
from solargen.domain.orbital_mechanics import AstroConstants
from solargen.domain.overrides import BodyOverrides
from solargen.domain.system import SolarSystem, ValidationResult
from solargen.domain.system_generator import SystemSpec, generate_system


def run(
    spec: SystemSpec,
    output_path: str | None = None,
    include_belts: bool = True,
    include_moons: bool = True,
    overrides: BodyOverrides | None = None,
) -> SolarSystem | None:
    """
    Generate a system and optionally write it to JSON.

    Returns:
        The generated system, or None when no star could be generated.
    """
    system = generate_system(
        spec,
        default_body_generators(),
        include_belts=include_belts,
        include_moons=include_moons,
        overrides=overrides,
    )
    if system is not None and output_path:
        JsonSystemWriter().write_system(system, output_path)
    return system


def format_summary(system: SolarSystem) -> str:
    """Human-readable table of stars, planets, belts and moon counts."""
    au = AstroConstants.AU
    lines = [f"System {system.name} (seed {system.seed})"]
    for star in system.stars:
        spectral = star.properties.get("spectral_type", star.body_class)
        lines.append(
            f"  * {star.name:<22} {spectral:<6} "
            f"{star.mass_kg / AstroConstants.M_SUN:7.3f} Msun  {star.luminosity_lsun:9.4f} Lsun"
        )
    for host_id, host in system.hosts.items():
        lines.append(
            f"  host {host_id} ({host.kind.value}): stable "
            f"{host.inner_stability_m / au:.3f}-{host.outer_stability_m / au:.1f} AU"
        )
        for body in system.children_of(host_id):
            if body.kind is not BodyKind.PLANET:
                continue
            moons = len(system.children_of(body.id))
            lines.append(
                f"    {body.name:<24} {body.body_class:<12} "
                f"{body.semi_major_axis_m / au:8.3f} AU  "
                f"{body.mass_kg / AstroConstants.M_EARTH:10.3f} Mearth  {moons} moons"
            )
        for belt in system.belts.values():
            if belt.host_id == host_id:
                lines.append(
                    f"    {belt.name:<24} {belt.composition:<12} "
                    f"{belt.inner_edge_m / au:.3f}-{belt.outer_edge_m / au:.3f} AU  "
                    f"{len(belt.asteroid_ids)} asteroids"
                )
    return "\n".join(lines)


def format_validation(result: ValidationResult) -> str:
    lines = [f"Validation: {len(result.errors)} errors, {len(result.warnings)} warnings"]
    lines += [f"  error: {e}" for e in result.errors]
    lines += [f"  warning: {w}" for w in result.warnings]
    return "\n".join(lines)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        description="Generate a deterministic planetary system from a seed"
    )
    parser.add_argument(
        '--seed', '-s', type=int,
        help="Root seed (non-negative integer)"
    )
    parser.add_argument(
        '--spec',
        help="Path to a system spec JSON (seed, multiplicity, overrides)"
    )
    parser.add_argument(
        '--min-stars', type=int, default=1,
        help="Minimum number of stars (default: 1)"
    )
    parser.add_argument(
        '--max-stars', type=int, default=1,
        help="Maximum number of stars (default: 1)"
    )
    parser.add_argument(
        '--name',
        help="System name (default: the spec file's name, or generated from the seed)"
    )
    parser.add_argument(
        '--no-belts', action='store_true', default=False,
        help="Skip asteroid belts"
    )
    parser.add_argument(
        '--no-moons', action='store_true', default=False,
        help="Skip moons"
    )
    parser.add_argument(
        '--output', '-o',
        help="Path to write the generated system as JSON"
    )
    parser.add_argument(
        '--validate', action='store_true', default=False,
        help="Run the structural validator; exit 1 on errors"
    )
    parser.add_argument(
        '--verbose', '-v', action='store_true', default=False,
        help="Log generation details"
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.seed is None and not args.spec:
        parser.error("one of --seed or --spec is required")

    try:
        overrides = None
        if args.spec:
            spec = read_system_spec(args.spec)
            overrides = read_body_overrides(args.spec)
            if args.seed is not None or args.name:
                spec = SystemSpec(
                    seed=spec.seed if args.seed is None else args.seed,
                    multiplicity=spec.multiplicity,
                    name=args.name or spec.name,
                )
        else:
            spec = SystemSpec(
                seed=args.seed,
                multiplicity=MultiplicitySpec(min_stars=args.min_stars, max_stars=args.max_stars),
                name=args.name or "",
            )

        system = run(
            spec,
            output_path=args.output,
            include_belts=not args.no_belts,
            include_moons=not args.no_moons,
            overrides=overrides,
        )
        if system is None:
            print(f"Error: no system could be generated for seed {spec.seed}", file=sys.stderr)
            sys.exit(1)

        print(format_summary(system))
        if args.output:
            print(f"Wrote {args.output} with {len(system)} bodies.")

        if args.validate:
            result = StructuralValidator().validate(system)
            print(format_validation(result))
            if not result.is_valid:
                sys.exit(1)

    except FileNotFoundError as e:
        print(f"Error: File not found: {e.filename}", file=sys.stderr)
        sys.exit(1)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == '__main__':
    main()
