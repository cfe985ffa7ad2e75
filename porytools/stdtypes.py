"""Save and load common composite values through JSON archives.

Each function writes or reads the members of the node that is currently
open, so it is usually wrapped in :func:`porytools.serialize.save_node` or
:func:`porytools.serialize.load_node`.  The layouts are these:

* bitset: ``type`` (a :class:`BitsetEncoding` value) and ``data``;
* pair: ``first`` and ``second``;
* tuple: ``tuple_element0``, ``tuple_element1``, ...;
* variant: ``index`` and ``data``;
* map: the node becomes an array of ``{"key": ..., "value": ...}`` objects.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping, Sequence
from enum import IntEnum
from typing import Any

from porytools.json_input import JSONInputArchive
from porytools.json_output import ArchiveError, JSONOutputArchive
from porytools.serialize import load, load_node, save, save_node

__all__ = [
    "BitsetEncoding",
    "save_bitset",
    "load_bitset",
    "save_pair",
    "load_pair",
    "save_tuple",
    "load_tuple",
    "save_variant",
    "load_variant",
    "save_map",
    "load_map",
]

_ULONG_LIMIT = 2**32
_ULLONG_LIMIT = 2**64


class BitsetEncoding(IntEnum):
    """How the bits of a bitset are stored."""

    ULONG = 0
    ULLONG = 1
    STRING = 2
    BITS = 3


def _bits_to_int(bits: Sequence[bool]) -> int:
    return sum(1 << position for position, bit in enumerate(bits) if bit)


def save_bitset(archive: JSONOutputArchive, bits: Sequence[bool]) -> None:
    """Save ``bits`` (bit 0 first) as the smallest integer that holds it, or a string.

    Values that fit in 32 bits use :attr:`BitsetEncoding.ULONG`, values that
    fit in 64 bits use :attr:`BitsetEncoding.ULLONG`; anything larger is
    written as a string of ``0`` and ``1`` with the highest bit first.
    """
    bits = [bool(bit) for bit in bits]
    number = _bits_to_int(bits)
    if number < _ULONG_LIMIT:
        save(archive, int(BitsetEncoding.ULONG), "type")
        save(archive, number, "data")
    elif number < _ULLONG_LIMIT:
        save(archive, int(BitsetEncoding.ULLONG), "type")
        save(archive, number, "data")
    else:
        save(archive, int(BitsetEncoding.STRING), "type")
        save(archive, "".join("1" if bit else "0" for bit in reversed(bits)), "data")


def _bits_from_int(number: Any, size: int) -> list[bool]:
    if isinstance(number, bool) or not isinstance(number, int) or number < 0:
        raise ArchiveError("bitset data must be a non-negative integer")
    return [bool((number >> position) & 1) for position in range(size)]


def _bits_from_string(text: Any, size: int) -> list[bool]:
    if not isinstance(text, str) or any(ch not in "01" for ch in text):
        raise ArchiveError("bitset string may only hold the characters 0 and 1")
    used = text[:size]
    bits = [ch == "1" for ch in reversed(used)]
    return bits + [False] * (size - len(bits))


def _bits_from_chunks(archive: JSONInputArchive, size: int) -> list[bool]:
    bits: list[bool] = []
    chunk = 0
    mask = 0
    for _ in range(size):
        if mask == 0:
            chunk = archive.load_value()
            if isinstance(chunk, bool) or not isinstance(chunk, int) or not 0 <= chunk <= 0xFF:
                raise ArchiveError("bitset chunk must be an integer from 0 to 255")
            mask = 0x80
        bits.append(bool(chunk & mask))
        mask >>= 1
    return bits


def load_bitset(archive: JSONInputArchive, size: int) -> list[bool]:
    """Load a bitset of ``size`` bits, bit 0 first."""
    if size < 0:
        raise ValueError("size must not be negative")
    raw = load(archive, "type")
    try:
        encoding = BitsetEncoding(raw)
    except ValueError:
        raise ArchiveError("Invalid bitset data representation") from None
    if isinstance(raw, bool):
        raise ArchiveError("Invalid bitset data representation")

    if encoding in (BitsetEncoding.ULONG, BitsetEncoding.ULLONG):
        return _bits_from_int(load(archive, "data"), size)
    if encoding is BitsetEncoding.STRING:
        return _bits_from_string(load(archive, "data"), size)
    return _bits_from_chunks(archive, size)


def save_pair(archive: JSONOutputArchive, pair: Sequence[Any]) -> None:
    """Save a two-item sequence as ``first`` and ``second``."""
    first, second = pair
    save(archive, first, "first")
    save(archive, second, "second")


def load_pair(archive: JSONInputArchive) -> tuple[Any, Any]:
    """Load ``first`` and ``second`` as a tuple."""
    first = load(archive, "first")
    second = load(archive, "second")
    return first, second


def save_tuple(archive: JSONOutputArchive, values: Iterable[Any]) -> None:
    """Save each value as ``tuple_element<N>``."""
    for position, value in enumerate(values):
        save(archive, value, f"tuple_element{position}")


def load_tuple(archive: JSONInputArchive, count: int) -> tuple:
    """Load ``count`` values saved by :func:`save_tuple`."""
    if count < 0:
        raise ValueError("count must not be negative")
    return tuple(load(archive, f"tuple_element{position}") for position in range(count))


def save_variant(archive: JSONOutputArchive, index: int, value: Any) -> None:
    """Save the active alternative ``index`` and its ``value``."""
    if isinstance(index, bool) or not isinstance(index, int) or index < 0:
        raise ValueError("variant index must be a non-negative integer")
    save(archive, index, "index")
    save(archive, value, "data")


def load_variant(
    archive: JSONInputArchive,
    alternatives: Sequence[Callable[[JSONInputArchive, str], Any]],
) -> tuple[int, Any]:
    """Load a variant and return ``(index, value)``.

    ``alternatives`` holds one reader per alternative; each is called with the
    archive and the member name ``"data"``, as :func:`porytools.serialize.load` is.
    """
    index = load(archive, "index")
    if isinstance(index, bool) or not isinstance(index, int):
        raise ArchiveError("variant index must be an integer")
    if index >= len(alternatives):
        raise ArchiveError("Invalid 'index' selector when deserializing std::variant")
    if index < 0:
        raise ArchiveError("Error traversing variant during load")
    return index, alternatives[index](archive, "data")


def save_map(archive: JSONOutputArchive, mapping: Mapping[Any, Any]) -> None:
    """Turn the current node into an array of key/value objects."""
    archive.make_array()
    for key, value in mapping.items():

        def write_item(ar: JSONOutputArchive, key: Any = key, value: Any = value) -> None:
            save(ar, key, "key")
            save(ar, value, "value")

        save_node(archive, None, write_item)


def load_map(archive: JSONInputArchive) -> dict:
    """Load key/value objects from the current array; the first of equal keys wins."""
    result: dict = {}
    for _ in range(archive.load_size()):
        key, value = load_node(archive, None, lambda ar: (load(ar, "key"), load(ar, "value")))
        result.setdefault(key, value)
    return result