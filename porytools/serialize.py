"""Save and load values through JSON archives.

These helpers carry the naming and nesting rules for JSON archives:

* A scalar (bool, int, float, str or None) is written as a single member.
  It is named by ``name``, or called ``value<N>`` when no name is given.
  It opens no node of its own.
* A composite value opens a node, which is written as an object.
* A sequence opens a node that is turned into an array. Its items carry
  no names.

Loading follows the same rules. When a name is given, the member with
that name is looked up at the current level. Reading then goes on from
there, even if that member is not the next one in order.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any, Callable, Optional, TypeVar

from porytools.json_input import JSONInputArchive
from porytools.json_output import JSONOutputArchive

__all__ = [
    "save",
    "load",
    "save_node",
    "load_node",
    "save_sequence",
    "load_sequence",
]

T = TypeVar("T")

_SCALARS = (bool, int, float, str)


def save(archive: JSONOutputArchive, value: Any, name: Optional[str] = None) -> None:
    """Save ``value`` under ``name`` at the current level.

    Scalars and None are written directly. ``bytes`` are written as base64.
    Mappings with string keys become objects. Lists and tuples become arrays.
    """
    if value is None or isinstance(value, _SCALARS):
        archive.set_next_name(name)
        archive.write_name()
        archive.save_value(value)
    elif isinstance(value, (bytes, bytearray, memoryview)):
        archive.save_binary_value(bytes(value), name)
    elif isinstance(value, Mapping):
        if not all(isinstance(key, str) for key in value):
            raise TypeError("mapping keys must be strings to be saved as an object")

        def write_members(ar: JSONOutputArchive) -> None:
            for key, item in value.items():
                save(ar, item, key)

        save_node(archive, name, write_members)
    elif isinstance(value, (list, tuple)):
        save_sequence(archive, name, value)
    else:
        raise TypeError(f"cannot save a value of type {type(value).__name__}")


def load(archive: JSONInputArchive, name: Optional[str] = None) -> Any:
    """Load the next scalar, or the scalar member called ``name``."""
    archive.set_next_name(name)
    return archive.load_value()


def save_node(
    archive: JSONOutputArchive,
    name: Optional[str],
    writer: Callable[[JSONOutputArchive], None],
) -> None:
    """Open a node called ``name``, let ``writer`` fill it, then close it."""
    archive.set_next_name(name)
    archive.start_node()
    writer(archive)
    archive.finish_node()


def load_node(
    archive: JSONInputArchive,
    name: Optional[str],
    reader: Callable[[JSONInputArchive], T],
) -> T:
    """Enter the node called ``name`` and return what ``reader`` reads from it."""
    archive.set_next_name(name)
    archive.start_node()
    result = reader(archive)
    archive.finish_node()
    return result


def save_sequence(
    archive: JSONOutputArchive, name: Optional[str], values: Iterable[Any]
) -> None:
    """Save ``values`` as a JSON array called ``name``."""
    archive.set_next_name(name)
    archive.start_node()
    archive.make_array()
    for value in values:
        save(archive, value)
    archive.finish_node()


def load_sequence(archive: JSONInputArchive, name: Optional[str] = None) -> list:
    """Load the scalar items of the array called ``name``, or of the next array."""
    archive.set_next_name(name)
    archive.start_node()
    size = archive.load_size()
    values = [archive.load_value() for _ in range(size)]
    archive.finish_node()
    return values