"""The working state needed to build Porytiles commands.

Every field except the file paths has a default that follows the Porytiles
help text.  Paths are kept as given (strings or path-like objects) and are
stored as strings in archives.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Callable, Union

from porytools import serialize as archive_io
from porytools.json_input import JSONInputArchive
from porytools.json_output import ArchiveError, JSONOutputArchive

__all__ = [
    "PathValue",
    "PALETTE_MODES",
    "BASE_GAMES",
    "ASSIGN_ALGORITHMS",
    "PorytilesContext",
]

PathValue = Union[str, "os.PathLike[str]"]

PALETTE_MODES = ("true-color", "greyscale")
BASE_GAMES = ("pokeemerald", "pokefirered", "pokeruby")
ASSIGN_ALGORITHMS = ("dfs", "bfs")


def _text(value: Any, key: str) -> str:
    if not isinstance(value, str):
        raise ArchiveError(f"{key} must be a string")
    return value


def _flag(value: Any, key: str) -> bool:
    if not isinstance(value, bool):
        raise ArchiveError(f"{key} must be a boolean")
    return value


def _integer(value: Any, key: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ArchiveError(f"{key} must be an integer")
    return value


def _number(value: Any, key: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ArchiveError(f"{key} must be a number")
    return float(value)


_Member = tuple[str, str, Callable[[Any, str], Any]]

_HEAD: tuple[_Member, ...] = (
    ("porytilesExecutableFile", "porytiles_executable_file", _text),
    ("behaviorsHeaderPath", "behaviors_header_path", _text),
    ("paletteMode", "palette_mode", _text),
    ("baseGame", "base_game", _text),
    ("useDualLayer", "use_dual_layer", _flag),
)

_TRANSPARENCY_KEYS = ("transparency_R", "transparency_G", "transparency_B")

_TAIL: tuple[_Member, ...] = (
    ("defaultBehavior", "default_behavior", _text),
    ("assignExploreCutoff", "assign_explore_cutoff", _integer),
    ("assignAlgorithm", "assign_algorithm", _text),
    ("bestBranches", "best_branches", _text),
    ("primaryCompileOutputPath", "primary_compile_output_path", _text),
    ("sourcePrimaryPath", "source_primary_path", _text),
    ("secondaryCompileOutputPath", "secondary_compile_output_path", _text),
    ("sourceSecondaryPath", "source_secondary_path", _text),
    ("sourcePartnerPrimaryPath", "source_partner_primary_path", _text),
    ("primaryAssignExploreCutoff", "primary_assign_explore_cutoff", _integer),
    ("primaryAssignAlgorithm", "primary_assign_algorithm", _text),
    ("primaryBestBranches", "primary_best_branches", _text),
    ("primaryDecompileOutputPath", "primary_decompile_output_path", _text),
    ("compiledPrimaryPath", "compiled_primary_path", _text),
    ("secondaryDecompileOutputPath", "secondary_decompile_output_path", _text),
    ("compiledSecondaryPath", "compiled_secondary_path", _text),
    ("compiledPartnerPrimaryPath", "compiled_partner_primary_path", _text),
)


def _storable(value: Any) -> Any:
    return os.fspath(value) if isinstance(value, os.PathLike) else value


@dataclass
class PorytilesContext:
    """Options and paths for the four Porytiles commands."""

    # General options
    porytiles_executable_file: PathValue = ""
    behaviors_header_path: PathValue = ""
    palette_mode: str = "greyscale"
    base_game: str = "pokeemerald"
    use_dual_layer: bool = False
    transparency: tuple[float, float, float] = (1.0, 0.0, 1.0)
    default_behavior: str = "MB_NORMAL"
    assign_explore_cutoff: int = 2
    assign_algorithm: str = "dfs"
    best_branches: str = "4"

    # Compile primary
    primary_compile_output_path: PathValue = ""
    source_primary_path: PathValue = ""

    # Compile secondary
    secondary_compile_output_path: PathValue = ""
    source_secondary_path: PathValue = ""
    source_partner_primary_path: PathValue = ""
    primary_assign_explore_cutoff: int = 2
    primary_assign_algorithm: str = "dfs"
    primary_best_branches: str = "4"

    # Decompile primary
    primary_decompile_output_path: PathValue = ""
    compiled_primary_path: PathValue = ""

    # Decompile secondary
    secondary_decompile_output_path: PathValue = ""
    compiled_secondary_path: PathValue = ""
    compiled_partner_primary_path: PathValue = ""

    def __post_init__(self) -> None:
        colour = tuple(float(component) for component in self.transparency)
        if len(colour) != 3:
            raise ValueError("transparency needs exactly three components")
        self.transparency = colour  # type: ignore[assignment]

    def save(self, archive: JSONOutputArchive) -> None:
        """Write every field as a member of the current node."""
        for key, attr, _ in _HEAD:
            archive_io.save(archive, _storable(getattr(self, attr)), key)
        for key, component in zip(_TRANSPARENCY_KEYS, self.transparency):
            archive_io.save(archive, float(component), key)
        for key, attr, _ in _TAIL:
            archive_io.save(archive, _storable(getattr(self, attr)), key)

    def load(self, archive: JSONInputArchive) -> None:
        """Read every field from the current node; nothing changes on error."""
        values: dict[str, Any] = {}
        for key, attr, convert in _HEAD:
            values[attr] = convert(archive_io.load(archive, key), key)
        values["transparency"] = tuple(
            _number(archive_io.load(archive, key), key) for key in _TRANSPARENCY_KEYS
        )
        for key, attr, convert in _TAIL:
            values[attr] = convert(archive_io.load(archive, key), key)
        for attr, value in values.items():
            setattr(self, attr, value)