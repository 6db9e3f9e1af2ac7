"""Erlang term text codec.

Dialyzer options are handed to ``erl -eval`` as Erlang source, and the
warnings it produces come back printed with ``~0tp``. This module converts
between those texts and plain Python values:

==================  ==========================
Erlang              Python
==================  ==========================
atom                :class:`Atom` (a ``str``)
true / false        ``bool``
integer / float     ``int`` / ``float``
"string" (charlist) ``str``
[a, b]              ``list``
{a, b}              ``tuple``
<<"bin">>           ``bytes``
#{k => v}           ``dict``
pid, ref, fun       :class:`Opaque`
==================  ==========================
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import PurePath
from typing import Any

_UNQUOTED_ATOM_RE = re.compile(r"[a-z][A-Za-z0-9_@]*\Z")
_ATOM_RE = re.compile(r"[a-z][A-Za-z0-9_@]*")
_NUMBER_RE = re.compile(r"-?\d+(#[0-9A-Za-z]+|\.\d+([eE][-+]?\d+)?)?")

_RESERVED_WORDS = frozenset(
    {
        "after", "and", "andalso", "band", "begin", "bnot", "bor", "bsl", "bsr",
        "bxor", "case", "catch", "cond", "div", "else", "end", "fun", "if", "let",
        "maybe", "not", "of", "or", "orelse", "receive", "rem", "try", "when", "xor",
    }
)  # fmt: skip

_SIMPLE_ESCAPES = {
    "b": "\b",
    "d": "\x7f",
    "e": "\x1b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "s": " ",
    "t": "\t",
    "v": "\v",
}


class Atom(str):
    """An Erlang atom.

    Compares equal to the plain string of the same name, so atoms read back
    from Dialyzer match names written in YAML configuration.
    """

    __slots__ = ()

    def __repr__(self) -> str:
        return f"Atom({str.__repr__(self)})"


@dataclass(frozen=True, slots=True)
class Opaque:
    """A term with no Python counterpart (pid, reference, fun, port)."""

    text: str


class TermSyntaxError(ValueError):
    """Raised when term text cannot be parsed."""

    def __init__(self, message: str, text: str, position: int) -> None:
        super().__init__(f"{message} at position {position}: {text[position : position + 20]!r}")
        self.position = position


# =============================================================================
# Encoding
# =============================================================================


def _escape_char(ch: str, quote: str) -> str:
    if ch == "\\" or ch == quote:
        return "\\" + ch
    if ch == "\n":
        return "\\n"
    if ch == "\t":
        return "\\t"
    code = ord(ch)
    if code < 0x20 or code == 0x7F or code > 0x7E:
        return f"\\x{{{code:X}}}"
    return ch


def format_atom(name: str) -> str:
    """Render an atom, quoting it when Erlang syntax requires."""
    if _UNQUOTED_ATOM_RE.match(name) and name not in _RESERVED_WORDS:
        return name
    return "'" + "".join(_escape_char(c, "'") for c in name) + "'"


def format_string(value: str) -> str:
    """Render a charlist literal. Non-ASCII characters are escaped."""
    return '"' + "".join(_escape_char(c, '"') for c in value) + '"'


def _format_float(value: float) -> str:
    if value != value or value in (float("inf"), float("-inf")):
        raise ValueError(f"Cannot represent {value!r} as an Erlang float")
    text = repr(value)
    mantissa, _, exponent = text.partition("e")
    if "." not in mantissa:
        mantissa += ".0"
    return f"{mantissa}e{exponent}" if exponent else mantissa


def format_term(value: Any) -> str:
    """Render a Python value as Erlang term source text.

    Raises:
        TypeError: If the value has no Erlang representation.
    """
    if value is None:
        return "undefined"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Atom):
        return format_atom(value)
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return _format_float(value)
    if isinstance(value, str):
        return format_string(value)
    if isinstance(value, PurePath):
        return format_string(str(value))
    if isinstance(value, (bytes, bytearray)):
        return "<<" + ",".join(str(b) for b in value) + ">>"
    if isinstance(value, tuple):
        return "{" + ",".join(format_term(v) for v in value) + "}"
    if isinstance(value, list):
        return "[" + ",".join(format_term(v) for v in value) + "]"
    if isinstance(value, dict):
        items = ",".join(f"{format_term(k)} => {format_term(v)}" for k, v in value.items())
        return "#{" + items + "}"
    raise TypeError(f"Cannot encode {type(value).__name__} as an Erlang term")


# =============================================================================
# Decoding
# =============================================================================


class _Parser:
    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0

    def error(self, message: str) -> TermSyntaxError:
        return TermSyntaxError(message, self.text, self.pos)

    def peek(self) -> str:
        return self.text[self.pos] if self.pos < len(self.text) else ""

    def skip_ws(self) -> None:
        while self.pos < len(self.text) and self.text[self.pos].isspace():
            self.pos += 1

    def expect(self, token: str) -> None:
        self.skip_ws()
        if not self.text.startswith(token, self.pos):
            raise self.error(f"Expected {token!r}")
        self.pos += len(token)

    def value(self) -> Any:
        self.skip_ws()
        ch = self.peek()
        if not ch:
            raise self.error("Unexpected end of input")
        if ch == "{":
            self.pos += 1
            return tuple(self.sequence("}"))
        if ch == "[":
            self.pos += 1
            return self.sequence("]")
        if self.text.startswith("#{", self.pos):
            return self.map()
        if ch == "#":
            return self.opaque()
        if self.text.startswith("<<", self.pos):
            return self.binary()
        if ch == "<":
            return self.opaque()
        if ch == '"':
            return self.strings()
        if ch == "'":
            return Atom(self.quoted("'"))
        if ch == "$":
            return self.char()
        if ch.isdigit() or (ch == "-" and self.text[self.pos + 1 : self.pos + 2].isdigit()):
            return self.number()
        if ch.isalpha() and ch.islower():
            return self.atom()
        raise self.error("Unexpected character")

    def sequence(self, close: str) -> list[Any]:
        items: list[Any] = []
        self.skip_ws()
        if self.peek() == close:
            self.pos += 1
            return items
        while True:
            items.append(self.value())
            self.skip_ws()
            ch = self.peek()
            if ch == ",":
                self.pos += 1
            elif ch == close:
                self.pos += 1
                return items
            elif ch == "|":
                raise self.error("Improper lists are not supported")
            else:
                raise self.error(f"Expected ',' or {close!r}")

    def map(self) -> dict[Any, Any]:
        self.pos += 2
        result: dict[Any, Any] = {}
        self.skip_ws()
        if self.peek() == "}":
            self.pos += 1
            return result
        while True:
            key = self.value()
            self.expect("=>")
            result[_hashable(key)] = self.value()
            self.skip_ws()
            ch = self.peek()
            if ch == ",":
                self.pos += 1
            elif ch == "}":
                self.pos += 1
                return result
            else:
                raise self.error("Expected ',' or '}'")

    def binary(self) -> bytes:
        self.pos += 2
        out = bytearray()
        self.skip_ws()
        if self.text.startswith(">>", self.pos):
            self.pos += 2
            return bytes(out)
        while True:
            self.skip_ws()
            if self.peek() == '"':
                out += self.strings().encode("utf-8")
            else:
                segment = self.number()
                if not isinstance(segment, int):
                    raise self.error("Expected integer binary segment")
                out.append(segment & 0xFF)
            self.skip_ws()
            if self.peek() == "/":
                self.pos += 1
                self.atom()
                self.skip_ws()
            if self.peek() == ",":
                self.pos += 1
            elif self.text.startswith(">>", self.pos):
                self.pos += 2
                return bytes(out)
            else:
                raise self.error("Expected ',' or '>>'")

    def opaque(self) -> Opaque:
        end = self.text.find(">", self.pos)
        if end == -1:
            raise self.error("Unterminated opaque term")
        text = self.text[self.pos : end + 1]
        self.pos = end + 1
        return Opaque(text)

    def strings(self) -> str:
        # The pretty printer may split one string into adjacent literals.
        parts = [self.quoted('"')]
        while True:
            mark = self.pos
            self.skip_ws()
            if self.peek() != '"':
                self.pos = mark
                return "".join(parts)
            parts.append(self.quoted('"'))

    def quoted(self, quote: str) -> str:
        self.pos += 1
        out: list[str] = []
        while True:
            ch = self.peek()
            if not ch:
                raise self.error("Unterminated quoted text")
            self.pos += 1
            if ch == quote:
                return "".join(out)
            if ch == "\\":
                out.append(self.escape())
            else:
                out.append(ch)

    def escape(self) -> str:
        ch = self.peek()
        if not ch:
            raise self.error("Unterminated escape")
        self.pos += 1
        if ch in _SIMPLE_ESCAPES:
            return _SIMPLE_ESCAPES[ch]
        if ch in "01234567":
            digits = ch
            while len(digits) < 3 and self.peek() and self.peek() in "01234567":
                digits += self.peek()
                self.pos += 1
            return chr(int(digits, 8))
        if ch == "x":
            if self.peek() == "{":
                end = self.text.find("}", self.pos)
                if end == -1:
                    raise self.error("Unterminated \\x{} escape")
                code = self.text[self.pos + 1 : end]
                self.pos = end + 1
            else:
                code = self.text[self.pos : self.pos + 2]
                self.pos += 2
            try:
                return chr(int(code, 16))
            except ValueError:
                raise self.error(f"Bad hex escape {code!r}") from None
        if ch == "^":
            ctrl = self.peek()
            if not ctrl:
                raise self.error("Unterminated control escape")
            self.pos += 1
            return chr(ord(ctrl) & 0x1F)
        return ch

    def char(self) -> int:
        self.pos += 1
        ch = self.peek()
        if not ch:
            raise self.error("Unterminated character literal")
        self.pos += 1
        if ch == "\\":
            return ord(self.escape())
        return ord(ch)

    def number(self) -> int | float:
        match = _NUMBER_RE.match(self.text, self.pos)
        if match is None:
            raise self.error("Expected number")
        self.pos = match.end()
        literal = match.group(0)
        if "#" in literal:
            base, _, digits = literal.partition("#")
            sign = -1 if base.startswith("-") else 1
            return sign * int(digits, int(base.lstrip("-")))
        if "." in literal:
            return float(literal)
        return int(literal)

    def atom(self) -> Atom | bool:
        match = _ATOM_RE.match(self.text, self.pos)
        if match is None:
            raise self.error("Expected atom")
        self.pos = match.end()
        name = match.group(0)
        if name == "true":
            return True
        if name == "false":
            return False
        return Atom(name)


def _hashable(value: Any) -> Any:
    if isinstance(value, list):
        return tuple(_hashable(v) for v in value)
    if isinstance(value, dict):
        return tuple((k, _hashable(v)) for k, v in value.items())
    return value


def parse_term(text: str) -> Any:
    """Parse one Erlang term, optionally followed by a terminating '.'.

    Raises:
        TermSyntaxError: If the text is not a single well-formed term.
    """
    parser = _Parser(text)
    result = parser.value()
    parser.skip_ws()
    if parser.peek() == ".":
        parser.pos += 1
        parser.skip_ws()
    if parser.pos != len(text):
        raise parser.error("Trailing characters after term")
    return result
