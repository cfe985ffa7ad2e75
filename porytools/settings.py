"""Saved Porytiles settings and the commands they produce."""

from __future__ import annotations

import io
import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union

from porytools import serialize as archive_io
from porytools.command_generator import PorytilesCommandGenerator
from porytools.context import PathValue, PorytilesContext
from porytools.json_input import JSONInputArchive
from porytools.json_output import ArchiveError, JSONOutputArchive

__all__ = ["Command", "PorytilesSettings", "UNSUPPORTED_WARNING"]

UNSUPPORTED_WARNING = (
    "This feature is not yet supported by Porytiles! "
    "Running this command will currently do nothing."
)


class Command(str, Enum):
    """The Porytiles commands that can be generated."""

    COMPILE_PRIMARY = "compile-primary"
    COMPILE_SECONDARY = "compile-secondary"
    DECOMPILE_PRIMARY = "decompile-primary"
    DECOMPILE_SECONDARY = "decompile-secondary"

    @property
    def supported(self) -> bool:
        """Whether Porytiles currently does anything with this command."""
        return self is not Command.DECOMPILE_SECONDARY


def _text(value: Any, key: str) -> str:
    if not isinstance(value, str):
        raise ArchiveError(f"{key} must be a string")
    return value


@dataclass
class PorytilesSettings:
    """Everything the Porytiles front end keeps between sessions."""

    context: PorytilesContext = field(default_factory=PorytilesContext)
    command_generator: PorytilesCommandGenerator = field(
        default_factory=PorytilesCommandGenerator
    )
    default_source_path: PathValue = ""
    default_output_path: PathValue = ""

    def save(self, archive: JSONOutputArchive) -> None:
        """Write the settings as members of the current node."""
        archive_io.save_node(archive, "porytilesContext", self.context.save)
        archive_io.save_node(archive, "commandGenerator", self.command_generator.save)
        archive_io.save(archive, os.fspath(self.default_source_path), "defaultSourcePath")
        archive_io.save(archive, os.fspath(self.default_output_path), "defaultOutputPath")

    def load(self, archive: JSONInputArchive) -> None:
        """Read the settings from the current node; nothing changes on error."""
        context = PorytilesContext()
        archive_io.load_node(archive, "porytilesContext", context.load)
        generator = PorytilesCommandGenerator()
        archive_io.load_node(archive, "commandGenerator", generator.load)
        source = _text(archive_io.load(archive, "defaultSourcePath"), "defaultSourcePath")
        output = _text(archive_io.load(archive, "defaultOutputPath"), "defaultOutputPath")
        self.context = context
        self.command_generator = generator
        self.default_source_path = source
        self.default_output_path = output

    def dumps(self) -> str:
        """The settings as a JSON document."""
        buffer = io.StringIO()
        with JSONOutputArchive(buffer) as archive:
            self.save(archive)
        return buffer.getvalue()

    @classmethod
    def loads(cls, text: str) -> "PorytilesSettings":
        """Settings read from a JSON document written by :meth:`dumps`."""
        settings = cls()
        with JSONInputArchive(io.StringIO(text)) as archive:
            settings.load(archive)
        return settings

    def command(self, kind: Union[Command, str]) -> str:
        """The command line for ``kind`` with the current settings."""
        kind = Command(kind)
        generator = self.command_generator
        build = {
            Command.COMPILE_PRIMARY: generator.generate_compile_primary_command,
            Command.COMPILE_SECONDARY: generator.generate_compile_secondary_command,
            Command.DECOMPILE_PRIMARY: generator.generate_decompile_primary_command,
            Command.DECOMPILE_SECONDARY: generator.generate_decompile_secondary_command,
        }[kind]
        return build(self.context)