"""Command-line front end that prints Porytiles commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Optional, Sequence

from porytools.context import ASSIGN_ALGORITHMS, BASE_GAMES, PALETTE_MODES
from porytools.json_output import ArchiveError
from porytools.settings import UNSUPPORTED_WARNING, Command, PorytilesSettings

__all__ = ["main"]

_COMMAND_PATHS = {
    Command.COMPILE_PRIMARY: {
        "output": "primary_compile_output_path",
        "source": "source_primary_path",
    },
    Command.COMPILE_SECONDARY: {
        "output": "secondary_compile_output_path",
        "source": "source_secondary_path",
        "partner_primary": "source_partner_primary_path",
    },
    Command.DECOMPILE_PRIMARY: {
        "output": "primary_decompile_output_path",
        "compiled": "compiled_primary_path",
    },
    Command.DECOMPILE_SECONDARY: {
        "output": "secondary_decompile_output_path",
        "compiled": "compiled_secondary_path",
        "partner_primary": "compiled_partner_primary_path",
    },
}

_CONTEXT_OPTIONS = (
    "porytiles_executable_file",
    "behaviors_header_path",
    "palette_mode",
    "base_game",
    "use_dual_layer",
    "transparency",
    "default_behavior",
    "assign_explore_cutoff",
    "assign_algorithm",
    "best_branches",
    "primary_assign_explore_cutoff",
    "primary_assign_algorithm",
    "primary_best_branches",
)


def _colour(text: str) -> tuple[float, float, float]:
    parts = text.split(",")
    if len(parts) != 3:
        raise argparse.ArgumentTypeError("expected three values: R,G,B")
    try:
        red, green, blue = (float(part) for part in parts)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid colour: {text}") from None
    return red, green, blue


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="porytools", description="Print a Porytiles command line."
    )
    parser.add_argument("kind", choices=[kind.value for kind in Command])
    parser.add_argument("--settings", type=Path, help="JSON settings file to read")
    parser.add_argument("--save", action="store_true", help="write the settings back")

    paths = parser.add_argument_group("paths")
    paths.add_argument("--porytiles", dest="porytiles_executable_file")
    paths.add_argument("--behaviors-header", dest="behaviors_header_path")
    paths.add_argument("--output")
    paths.add_argument("--source")
    paths.add_argument("--compiled")
    paths.add_argument("--partner-primary", dest="partner_primary")

    tiles = parser.add_argument_group("tileset options")
    tiles.add_argument("--palette-mode", choices=PALETTE_MODES)
    tiles.add_argument("--base-game", choices=BASE_GAMES)
    layers = tiles.add_mutually_exclusive_group()
    layers.add_argument("--dual-layer", dest="use_dual_layer", action="store_const", const=True)
    layers.add_argument("--triple-layer", dest="use_dual_layer", action="store_const", const=False)
    tiles.add_argument("--transparency", type=_colour, metavar="R,G,B")
    tiles.add_argument("--default-behavior")

    assign = parser.add_argument_group("colour assignment")
    assign.add_argument("--assign-explore-cutoff", type=int)
    assign.add_argument("--assign-algorithm", choices=ASSIGN_ALGORITHMS)
    assign.add_argument("--best-branches")
    assign.add_argument("--primary-assign-explore-cutoff", type=int)
    assign.add_argument("--primary-assign-algorithm", choices=ASSIGN_ALGORITHMS)
    assign.add_argument("--primary-best-branches")

    generator = parser.add_argument_group("command generator")
    relative = generator.add_mutually_exclusive_group()
    relative.add_argument("--relative-to", metavar="BASE")
    relative.add_argument("--absolute", action="store_true")
    wsl = generator.add_mutually_exclusive_group()
    wsl.add_argument("--wsl-absolute", dest="wsl_absolute", action="store_const", const=True)
    wsl.add_argument("--no-wsl-absolute", dest="wsl_absolute", action="store_const", const=False)
    return parser


def _read_settings(path: Optional[Path], create: bool) -> PorytilesSettings:
    if path is None:
        return PorytilesSettings()
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        if create:
            return PorytilesSettings()
        raise
    return PorytilesSettings.loads(text)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Print the requested Porytiles command; return the exit status."""
    parser = _parser()
    args = parser.parse_args(argv)
    if args.save and args.settings is None:
        parser.error("--save needs --settings")

    kind = Command(args.kind)
    targets = _COMMAND_PATHS[kind]
    for option in ("output", "source", "compiled", "partner_primary"):
        if getattr(args, option) is not None and option not in targets:
            flag = "--" + option.replace("_", "-")
            parser.error(f"{flag} does not apply to {kind.value}")

    try:
        settings = _read_settings(args.settings, create=args.save)
    except (OSError, ArchiveError) as error:
        print(f"porytools: {error}", file=sys.stderr)
        return 1

    context = settings.context
    for attr in _CONTEXT_OPTIONS:
        value = getattr(args, attr)
        if value is not None:
            setattr(context, attr, value)
    for option, attr in targets.items():
        value = getattr(args, option)
        if value is not None:
            setattr(context, attr, value)

    generator = settings.command_generator
    if args.relative_to is not None:
        generator.should_use_relative_paths = True
        generator.relative_base_path = args.relative_to
    elif args.absolute:
        generator.should_use_relative_paths = False
    if args.wsl_absolute is not None:
        generator.should_wsl_fake_absolute = args.wsl_absolute

    if args.save:
        try:
            args.settings.write_text(settings.dumps(), encoding="utf-8")
        except OSError as error:
            print(f"porytools: {error}", file=sys.stderr)
            return 1

    if not kind.supported:
        print(f"porytools: {UNSUPPORTED_WARNING}", file=sys.stderr)
    print(settings.command(kind))
    return 0


if __name__ == "__main__":
    sys.exit(main())