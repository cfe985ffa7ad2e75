"""Read values back from a JSON document through a node-based input archive.

The archive walks the document in order, one value at a time.  Before a
value or a node is read, a name may be set; if the name does not match the
member that would be read next, the member with that name is looked up at
the current level and reading carries on from there.
"""

from __future__ import annotations

import base64
import binascii
import json
from dataclasses import dataclass
from typing import Any, Optional, TextIO

from porytools.json_output import ArchiveError

__all__ = ["JSONInputArchive"]


class _Object(tuple):
    """The members of a JSON object as ``(name, value)`` pairs, in order."""


def _parse(text: str) -> Any:
    try:
        return json.loads(text, object_pairs_hook=_Object)
    except json.JSONDecodeError as error:
        raise ArchiveError(f"JSON parsing failed: {error}") from error


@dataclass
class _Cursor:
    """Position within the members of an object or the items of an array."""

    items: list
    is_object: bool
    index: int = 0

    @classmethod
    def over(cls, node: Any) -> "_Cursor":
        if isinstance(node, _Object):
            return cls(items=list(node), is_object=True)
        if isinstance(node, list):
            return cls(items=[(None, item) for item in node], is_object=False)
        raise ArchiveError("expected a JSON object or array")

    def advance(self) -> None:
        self.index += 1

    def value(self) -> Any:
        if self.index >= len(self.items):
            raise ArchiveError("No more objects in input")
        return self.items[self.index][1]

    def name(self) -> Optional[str]:
        if self.is_object and self.index < len(self.items):
            return self.items[self.index][0]
        return None

    def search(self, wanted: str) -> None:
        if self.is_object:
            for position, (member, _) in enumerate(self.items):
                if member == wanted:
                    self.index = position
                    return
        raise ArchiveError(f"JSON Parsing failed - provided name ({wanted}) not found")


class JSONInputArchive:
    """An archive that reads values from a JSON document in a text stream."""

    def __init__(self, stream: TextIO) -> None:
        self._document = _parse(stream.read())
        self._next_name: Optional[str] = None
        self._cursors: list[_Cursor] = [_Cursor.over(self._document)]

    def __enter__(self) -> "JSONInputArchive":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        return None

    def load_binary_value(self, size: int, name: Optional[str] = None) -> bytes:
        """Read a base64 string and return its bytes, which must be ``size`` long."""
        self._next_name = name
        encoded = self.load_value()
        if not isinstance(encoded, str):
            raise ArchiveError("binary data must be stored as a base64 string")
        try:
            decoded = base64.b64decode(encoded, validate=True)
        except (binascii.Error, ValueError) as error:
            raise ArchiveError(f"invalid base64 data: {error}") from error
        if len(decoded) != size:
            raise ArchiveError("Decoded binary data size does not match specified size")
        self._next_name = None
        return decoded

    def _search(self) -> None:
        wanted = self._next_name
        self._next_name = None
        if wanted is None:
            return
        cursor = self._cursors[-1]
        if cursor.name() != wanted:
            cursor.search(wanted)

    def start_node(self) -> None:
        """Enter the next object or array, or the one named by :meth:`set_next_name`."""
        self._search()
        self._cursors.append(_Cursor.over(self._cursors[-1].value()))

    def finish_node(self) -> None:
        """Leave the current node and move past it."""
        if len(self._cursors) <= 1:
            raise ArchiveError("no node is open")
        self._cursors.pop()
        self._cursors[-1].advance()

    def get_node_name(self) -> Optional[str]:
        """Name of the member that would be read next, or None."""
        return self._cursors[-1].name()

    def set_next_name(self, name: Optional[str]) -> None:
        """Set the name to look for on the next read or node start."""
        self._next_name = name

    def load_value(self) -> Any:
        """Read the next scalar: bool, int, float, str or None."""
        self._search()
        cursor = self._cursors[-1]
        value = cursor.value()
        if isinstance(value, (_Object, list)):
            raise ArchiveError("expected a scalar value, found an object or array")
        cursor.advance()
        return value

    def load_size(self) -> int:
        """Number of items in the array currently being read."""
        if len(self._cursors) == 1:
            node = self._document
        else:
            node = self._cursors[-2].value()
        if not isinstance(node, list):
            raise ArchiveError("size is only defined for arrays")
        return len(node)