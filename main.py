#!/usr/bin/env python3
"""
cornertile - command line entry point

    python main.py generate [--profile NAME] [--output DIR] [--name NAME] [--obj] [--no-gltf] [--tileset]
    python main.py match TILESET OCCUPANCY [--seed N] [--cell X Y Z]
    python main.py profiles
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from cornertile.generators.corners import label_from_letter
from cornertile.generators.matcher import build_visual_tiles
from cornertile.generators.sampler import OccupancyGrid
from cornertile.generators.profiles import (
    SETTINGS_CATALOG,
    is_builtin_profile,
    reload_custom_profiles,
)
from cornertile.conversion.tileset_io import TileSet, TileSetFormatError
from cornertile.pipeline import PipelineError, PipelineSettings, TileSetPipeline
from cornertile.validation import ValidationResult, ValidationStage

logger = logging.getLogger("cornertile")


def load_occupancy(path: Path) -> OccupancyGrid:
    """Read ``{"cells": [{"cell": [x, y, z], "label": "A"|"B"}, ...]}``."""
    with open(path, 'r', encoding='utf-8') as f:
        data = json.load(f)
    grid = OccupancyGrid()
    for entry in data.get("cells", []):
        grid.set(tuple(entry["cell"]), label_from_letter(entry.get("label", "A")))
    return grid


def cmd_generate(args) -> int:
    reload_custom_profiles()
    settings = PipelineSettings(
        profile_name=args.profile,
        output_dir=args.output,
        set_name=args.name,
        export_gltf=not args.no_gltf,
        scene_format=args.format,
        export_obj=args.obj,
        write_tileset=args.tileset,
        verbose=args.verbose,
    )
    try:
        pipeline = TileSetPipeline(settings)
    except PipelineError as e:
        logger.error("%s", e)
        return 2

    result = pipeline.generate()
    for warning in result.warnings:
        logger.warning("%s", warning)
    if not result.success:
        for error in result.errors:
            logger.error("%s", error)
        return 1

    print(f"{result.metrics['class_count']} classes "
          f"({result.metrics['duplicate_count']} duplicates of {result.metrics['partition_count']} partitions)")
    for path in result.output_files:
        print(f"  {path}")
    return 0


def cmd_match(args) -> int:
    report = ValidationResult(stage=ValidationStage.MATCH)
    try:
        tile_set = TileSet.load(Path(args.tileset), report=report)
        grid = load_occupancy(Path(args.occupancy))
    except (TileSetFormatError, OSError, ValueError, KeyError) as e:
        logger.error("%s", e)
        return 2

    pool = tile_set.to_entry_pool()
    cell = tuple(args.cell) if args.cell else None
    tiles = build_visual_tiles(grid, pool, single_cell=cell, seed=args.seed, report=report)

    for position in sorted(tiles):
        entry = tiles[position]
        t = entry.transform
        print(f"{position} -> {entry.model_reference} "
              f"(yaw={t.yaw}, flip_x={int(t.flip_x)}, flip_z={int(t.flip_z)})")

    if report.issues:
        print(report.report(), file=sys.stderr)
    return 0 if report.passed else 1


def cmd_profiles(args) -> int:
    reload_custom_profiles()
    for name in SETTINGS_CATALOG.list_profiles():
        tag = "builtin" if is_builtin_profile(name) else "saved"
        print(f"{name} [{tag}]")
    return 0


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="cornertile", description="Corner-configuration autotiling")
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = ap.add_subparsers(dest="command", required=True)

    gen = sub.add_parser("generate", help="Enumerate corner classes and export their meshes")
    gen.add_argument("--profile", default="Example Bevel", help="Generator settings name")
    gen.add_argument("--output", default=None, help="Output directory (default output/tilesets)")
    gen.add_argument("--name", default="tile_set", help="Base name of the output files")
    gen.add_argument("--format", default="gltf", choices=["gltf", "glb"], help="Scene file format")
    gen.add_argument("--obj", action="store_true", help="Also write an OBJ + MTL")
    gen.add_argument("--no-gltf", action="store_true", help="Skip the scene file")
    gen.add_argument("--tileset", action="store_true", help="Write a tile-set manifest for the classes")
    gen.set_defaults(func=cmd_generate)

    match = sub.add_parser("match", help="Resolve tiles for an occupancy file")
    match.add_argument("tileset", help="Tile-set JSON file")
    match.add_argument("occupancy", help="Occupancy JSON file")
    match.add_argument("--seed", type=int, default=0, help="Base seed")
    match.add_argument("--cell", type=int, nargs=3, metavar=("X", "Y", "Z"),
                       help="Only the positions around one edited cell")
    match.set_defaults(func=cmd_match)

    prof = sub.add_parser("profiles", help="List generator settings")
    prof.set_defaults(func=cmd_profiles)
    return ap


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
