"""
Command line entry point for ldtk_loader.
Usage: python -m ldtk_loader PROJECT [--no-resolve] [--level UID] [--json]
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from . import __version__
from .errors import LdtkError
from .loader import load_full_project, load_project
from .schema import Level, Project
from .settings import LoaderSettings
from .utils.logging_config import setup_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ldtk_loader",
        description="Load an LDtk project and print a summary of its levels",
    )
    parser.add_argument("project", type=Path, help="Path to the .ldtk project file")
    parser.add_argument(
        "--no-resolve",
        action="store_true",
        help="Load only the project file, leaving external level stubs unresolved",
    )
    parser.add_argument(
        "--level",
        type=int,
        default=None,
        metavar="UID",
        help="Show the level with this uid",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="With --level, print only the level, as JSON",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def print_summary(project: Project) -> None:
    print(f"JSON version:   {project.json_version}")
    print(f"External files: {'yes' if project.external_levels else 'no'}")
    print(f"Level state:    {project.level_state.value}")
    print(f"Levels:         {len(project.levels)}")
    for level in project.levels:
        layers = "stub" if level.layer_instances is None else f"{len(level.layer_instances)} layer(s)"
        print(f"  [{level.uid}] {level.identifier} ({level.px_wid}x{level.px_hei}, {layers})")


def print_level(level: Level) -> None:
    print(f"Level {level.identifier} (uid {level.uid}, iid {level.iid})")
    print(f"  position: {level.world_x}, {level.world_y} depth {level.world_depth}")
    for field_instance in level.field_instances:
        print(f"  field {field_instance.identifier}: {field_instance.value.to_json()!r}")
    for layer in level.layer_instances or []:
        print(
            f"  layer {layer.identifier} [{layer.layer_type.value}] "
            f"{layer.c_wid}x{layer.c_hei} @ {layer.grid_size}px"
        )


def main(argv: Optional[list[str]] = None, settings: Optional[LoaderSettings] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    if settings is None:
        settings = LoaderSettings()
    setup_logging(settings)
    logger = logging.getLogger(f"{__name__}.main")

    validation = settings.validate()
    for warning in validation.warnings:
        logger.warning(f"  {warning}")

    try:
        if args.no_resolve:
            project = load_project(args.project)
        else:
            project = load_full_project(args.project)
    except LdtkError as e:
        logger.error(f"Could not load {args.project}: {e}")
        return 1

    settings.add_recent_project(args.project.resolve())

    if args.level is None:
        print_summary(project)
    else:
        level = project.get_level(args.level)
        if level is None:
            logger.error(f"No level with uid {args.level} in {args.project}")
            return 1
        if args.json:
            sys.stdout.write(level.to_json(indent=True).decode("utf-8") + "\n")
        else:
            print_level(level)

    return 0


if __name__ == "__main__":
    sys.exit(main())
