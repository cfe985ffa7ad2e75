"""Build Porytiles command lines from a :class:`PorytilesContext`."""

from __future__ import annotations

import math
import os
import struct
from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from porytools import serialize as archive_io
from porytools.context import PathValue, PorytilesContext
from porytools.json_input import JSONInputArchive
from porytools.json_output import ArchiveError, JSONOutputArchive

__all__ = ["PorytilesCommandGenerator"]


def _to_float32(value: float) -> float:
    return struct.unpack("<f", struct.pack("<f", value))[0]


def _format_float32(value: float) -> str:
    """Shortest text that reads back as the same single-precision value."""
    if math.isnan(value):
        return "nan"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    if value == 0:
        return "-0" if math.copysign(1.0, value) < 0 else "0"

    text = repr(value)
    for precision in range(1, 10):
        candidate = f"{value:.{precision}g}"
        if _to_float32(float(candidate)) == value:
            text = candidate
            break

    number = Decimal(text)
    exponent = number.adjusted()
    if -4 <= exponent < 16:
        return format(number, "f")
    sign, digits, _ = number.normalize().as_tuple()
    mantissa = str(digits[0])
    if len(digits) > 1:
        mantissa += "." + "".join(str(d) for d in digits[1:])
    exp_sign = "+" if exponent >= 0 else "-"
    return f"{'-' if sign else ''}{mantissa}e{exp_sign}{abs(exponent):02d}"


def _colour_component(component: float) -> str:
    return _format_float32(_to_float32(_to_float32(component) * 255))


def _relative(path: str, base: str) -> str:
    if not path:
        return ""
    try:
        return os.path.relpath(path, base or os.curdir)
    except ValueError:
        return ""


def _text(value: Any, key: str) -> str:
    if not isinstance(value, str):
        raise ArchiveError(f"{key} must be a string")
    return value


def _flag(value: Any, key: str) -> bool:
    if not isinstance(value, bool):
        raise ArchiveError(f"{key} must be a boolean")
    return value


@dataclass
class PorytilesCommandGenerator:
    """Turns a context into the text of a Porytiles command.

    With ``should_use_relative_paths`` every path is written relative to
    ``relative_base_path``; ``should_wsl_fake_absolute`` then puts a ``/`` in
    front of it.
    """

    should_use_relative_paths: bool = False
    should_wsl_fake_absolute: bool = False
    relative_base_path: PathValue = ""

    def path_string(self, path: PathValue) -> str:
        """The path as it appears on the command line."""
        text = os.fspath(path)
        if not self.should_use_relative_paths:
            return text
        relative = _relative(text, os.fspath(self.relative_base_path))
        if self.should_wsl_fake_absolute:
            relative = "/" + relative
        return relative.replace("\\", "/")

    def options(self, context: PorytilesContext, output_path: PathValue) -> str:
        """The option flags shared by all commands."""
        red, green, blue = (_colour_component(c) for c in context.transparency)
        parts = [
            f" -output={self.path_string(output_path)} ",
            f" -tiles-output-pal={context.palette_mode} ",
            f" -target-base-game={context.base_game} ",
        ]
        if context.use_dual_layer:
            parts.append(" -dual-layer ")
        parts += [
            f" -transparency-color={red},{green},{blue} ",
            f" -default-behavior={context.default_behavior} ",
            f" -assign-explore-cutoff={context.assign_explore_cutoff} ",
            f" -assign-algorithm={context.assign_algorithm} ",
            f" -best-branches={context.best_branches} ",
        ]
        return "".join(parts)

    def generate_compile_primary_command(self, context: PorytilesContext) -> str:
        options = self.options(context, context.primary_compile_output_path)
        porytiles = self.path_string(context.porytiles_executable_file)
        header = self.path_string(context.behaviors_header_path)
        source = self.path_string(context.source_primary_path)
        return f"{porytiles} compile-primary {options} {source} {header}"

    def generate_compile_secondary_command(self, context: PorytilesContext) -> str:
        options = self.options(context, context.secondary_compile_output_path)
        porytiles = self.path_string(context.porytiles_executable_file)
        header = self.path_string(context.behaviors_header_path)
        options += (
            f" -primary-assign-explore-cutoff={context.primary_assign_explore_cutoff} "
            f" -primary-assign-algorithm={context.primary_assign_algorithm} "
            f" -primary-best-branches={context.primary_best_branches} "
        )
        source = self.path_string(context.source_secondary_path)
        partner = self.path_string(context.source_partner_primary_path)
        return f"{porytiles} compile-secondary {options} {source} {partner} {header}"

    def generate_decompile_primary_command(self, context: PorytilesContext) -> str:
        options = self.options(context, context.primary_decompile_output_path)
        porytiles = self.path_string(context.porytiles_executable_file)
        header = self.path_string(context.behaviors_header_path)
        compiled = self.path_string(context.compiled_primary_path)
        return f"{porytiles} decompile-primary {options} {compiled} {header}"

    def generate_decompile_secondary_command(self, context: PorytilesContext) -> str:
        options = self.options(context, context.secondary_decompile_output_path)
        porytiles = self.path_string(context.porytiles_executable_file)
        header = self.path_string(context.behaviors_header_path)
        compiled = self.path_string(context.compiled_secondary_path)
        partner = self.path_string(context.compiled_partner_primary_path)
        return f"{porytiles} decompile-secondary {options} {compiled} {partner} {header}"

    def save(self, archive: JSONOutputArchive) -> None:
        """Write the generator settings as members of the current node."""
        archive_io.save(archive, self.should_use_relative_paths, "shouldUseRelativePaths")
        archive_io.save(archive, self.should_wsl_fake_absolute, "shouldWslFakeAbsolute")
        archive_io.save(archive, os.fspath(self.relative_base_path), "relativeBasePath")

    def load(self, archive: JSONInputArchive) -> None:
        """Read the generator settings from the current node."""
        relative = _flag(archive_io.load(archive, "shouldUseRelativePaths"), "shouldUseRelativePaths")
        wsl = _flag(archive_io.load(archive, "shouldWslFakeAbsolute"), "shouldWslFakeAbsolute")
        base = _text(archive_io.load(archive, "relativeBasePath"), "relativeBasePath")
        self.should_use_relative_paths = relative
        self.should_wsl_fake_absolute = wsl
        self.relative_base_path = base