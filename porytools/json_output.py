"""Write values to a JSON document through a node-based output archive.

Named values become members of JSON objects; unnamed values receive
generated names of the form ``value<N>``.  Nodes may be turned into arrays,
whose children carry no names at all.  The document is laid out the way a
pretty-printing JSON writer lays it out: one member per line, with
configurable indentation.
"""

from __future__ import annotations

import base64
import math
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Optional, TextIO

__all__ = ["ArchiveError", "IndentChar", "OutputOptions", "JSONOutputArchive"]

DEFAULT_MAX_DECIMAL_PLACES = 324

_INT_MIN = -(2**63)
_UINT_MAX = 2**64 - 1

_SHORT_ESCAPES = {
    '"': '\\"',
    "\\": "\\\\",
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}


class ArchiveError(Exception):
    """Raised when an archive is used in a way that cannot produce valid data."""


class IndentChar(str, Enum):
    """The character repeated to indent nested levels."""

    SPACE = " "
    TAB = "\t"
    NEWLINE = "\n"
    CARRIAGE_RETURN = "\r"


@dataclass(frozen=True)
class OutputOptions:
    """Layout options for a :class:`JSONOutputArchive`."""

    precision: int = DEFAULT_MAX_DECIMAL_PLACES
    indent_char: IndentChar = IndentChar.SPACE
    indent_length: int = 4

    def __post_init__(self) -> None:
        if self.precision < 1:
            raise ValueError("precision must be at least 1")
        if self.indent_length < 0:
            raise ValueError("indent_length must not be negative")
        object.__setattr__(self, "indent_char", IndentChar(self.indent_char))

    @classmethod
    def default(cls) -> "OutputOptions":
        """Options with four spaces of indentation and full precision."""
        return cls()

    @classmethod
    def no_indent(cls) -> "OutputOptions":
        """Options that keep line breaks but add no indentation."""
        return cls(indent_length=0)


class _Node(Enum):
    START_OBJECT = "start_object"
    IN_OBJECT = "in_object"
    START_ARRAY = "start_array"
    IN_ARRAY = "in_array"


@dataclass
class _Level:
    in_array: bool
    count: int = field(default=0)


def _escape_string(text: str) -> str:
    parts = []
    for ch in text:
        escaped = _SHORT_ESCAPES.get(ch)
        if escaped is not None:
            parts.append(escaped)
        elif ord(ch) < 0x20:
            parts.append(f"\\u{ord(ch):04X}")
        else:
            parts.append(ch)
    return '"' + "".join(parts) + '"'


def _format_double(value: float, max_decimals: int) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    sign = "-" if math.copysign(1.0, value) < 0 else ""
    if value == 0:
        return sign + "0.0"

    decimal = Decimal(repr(abs(value))).as_tuple()
    raw = "".join(str(d) for d in decimal.digits)
    digits = raw.rstrip("0")
    k = int(decimal.exponent) + (len(raw) - len(digits))
    length = len(digits)
    kk = length + k

    if k >= 0 and kk <= 21:
        body = digits + "0" * k + ".0"
    elif 0 < kk <= 21:
        fraction = digits[kk:]
        if len(fraction) > max_decimals:
            fraction = fraction[:max_decimals].rstrip("0") or fraction[0]
        body = digits[:kk] + "." + fraction
    elif -6 < kk <= 0:
        fraction = "0" * (-kk) + digits
        if len(fraction) > max_decimals:
            fraction = fraction[:max_decimals].rstrip("0") or "0"
        body = "0." + fraction
    elif kk < -max_decimals:
        body = "0.0"
    elif length == 1:
        body = f"{digits}e{kk - 1}"
    else:
        body = f"{digits[0]}.{digits[1:]}e{kk - 1}"
    return sign + body


class JSONOutputArchive:
    """An archive that writes a JSON document to a text stream.

    The document is completed when the archive is closed, either explicitly
    with :meth:`close` or by leaving a ``with`` block.
    """

    def __init__(self, stream: TextIO, options: Optional[OutputOptions] = None) -> None:
        self._stream = stream
        self._options = options if options is not None else OutputOptions.default()
        self._next_name: Optional[str] = None
        self._name_counters: list[int] = [0]
        self._nodes: list[_Node] = [_Node.START_OBJECT]
        self._levels: list[_Level] = []
        self._has_root = False
        self._closed = False

    def __enter__(self) -> "JSONOutputArchive":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        """Finish any open object or array and flush the stream."""
        if self._closed:
            return
        top = self._nodes[-1]
        if top is _Node.IN_OBJECT:
            self._end_object()
        elif top is _Node.IN_ARRAY:
            self._end_array()
        self._closed = True
        flush = getattr(self._stream, "flush", None)
        if flush is not None:
            flush()

    # -- node handling -------------------------------------------------

    def save_binary_value(self, data: bytes, name: Optional[str] = None) -> None:
        """Save bytes as a base64 string in a new, optionally named, node."""
        self.set_next_name(name)
        self.write_name()
        self.save_value(base64.b64encode(bytes(data)).decode("ascii"))

    def start_node(self) -> None:
        """Begin a node that will hold an object or an array."""
        self.write_name()
        self._nodes.append(_Node.START_OBJECT)
        self._name_counters.append(0)

    def finish_node(self) -> None:
        """Close the most recently started node."""
        if len(self._nodes) <= 1:
            raise ArchiveError("no node is open")
        top = self._nodes[-1]
        if top is _Node.START_ARRAY:
            self._start_array()
            self._end_array()
        elif top is _Node.IN_ARRAY:
            self._end_array()
        elif top is _Node.START_OBJECT:
            self._start_object()
            self._end_object()
        else:
            self._end_object()
        self._nodes.pop()
        self._name_counters.pop()

    def set_next_name(self, name: Optional[str]) -> None:
        """Set the name used by the next value or node."""
        self._next_name = name

    def write_name(self) -> None:
        """Open the current object or array if needed and write the next name.

        Inside arrays nothing is named; inside objects the name set with
        :meth:`set_next_name` is used, or ``value<N>`` when none was set.
        """
        top = self._nodes[-1]
        if top is _Node.START_ARRAY:
            self._start_array()
            self._nodes[-1] = _Node.IN_ARRAY
        elif top is _Node.START_OBJECT:
            self._nodes[-1] = _Node.IN_OBJECT
            self._start_object()

        if self._nodes[-1] is _Node.IN_ARRAY:
            return

        if self._next_name is None:
            counter = self._name_counters[-1]
            self._name_counters[-1] = counter + 1
            self.save_value(f"value{counter}")
        else:
            name = self._next_name
            self._next_name = None
            self.save_value(name)

    def make_array(self) -> None:
        """Mark the current node to be written as an array."""
        self._nodes[-1] = _Node.START_ARRAY

    # -- values --------------------------------------------------------

    def save_value(self, value) -> None:
        """Write a scalar: bool, int, float, str or None."""
        if value is None:
            self._write_scalar("null", is_string=False)
        elif isinstance(value, bool):
            self._write_scalar("true" if value else "false", is_string=False)
        elif isinstance(value, int):
            if _INT_MIN <= value <= _UINT_MAX:
                self._write_scalar(str(value), is_string=False)
            else:
                self._write_scalar(_escape_string(str(value)), is_string=True)
        elif isinstance(value, float):
            text = _format_double(value, self._options.precision)
            self._write_scalar(text, is_string=False)
        elif isinstance(value, str):
            self._write_scalar(_escape_string(value), is_string=True)
        else:
            raise TypeError(f"cannot save a value of type {type(value).__name__}")

    # -- low-level writer ---------------------------------------------

    def _emit(self, text: str) -> None:
        if self._closed:
            raise ArchiveError("archive is closed")
        self._stream.write(text)

    def _indent(self) -> None:
        width = self._options.indent_length * len(self._levels)
        if width:
            self._emit(self._options.indent_char.value * width)

    def _prefix(self, is_string: bool) -> None:
        if self._closed:
            raise ArchiveError("archive is closed")
        if not self._levels:
            if self._has_root:
                raise ArchiveError("document already has a root value")
            self._has_root = True
            return
        level = self._levels[-1]
        if level.in_array:
            self._emit(",\n" if level.count else "\n")
            self._indent()
        else:
            if level.count % 2 == 0 and not is_string:
                raise ArchiveError("object member names must be strings")
            if level.count == 0:
                self._emit("\n")
                self._indent()
            elif level.count % 2 == 0:
                self._emit(",\n")
                self._indent()
            else:
                self._emit(": ")
        level.count += 1

    def _write_scalar(self, text: str, is_string: bool) -> None:
        self._prefix(is_string)
        self._emit(text)

    def _start_object(self) -> None:
        self._prefix(is_string=False)
        self._levels.append(_Level(in_array=False))
        self._emit("{")

    def _start_array(self) -> None:
        self._prefix(is_string=False)
        self._levels.append(_Level(in_array=True))
        self._emit("[")

    def _end_level(self, in_array: bool, closer: str) -> None:
        if not self._levels or self._levels[-1].in_array != in_array:
            raise ArchiveError("mismatched end of object or array")
        if not in_array and self._levels[-1].count % 2:
            raise ArchiveError("object member has a name but no value")
        level = self._levels.pop()
        if level.count:
            self._emit("\n")
            self._indent()
        self._emit(closer)

    def _end_object(self) -> None:
        self._end_level(in_array=False, closer="}")

    def _end_array(self) -> None:
        self._end_level(in_array=True, closer="]")