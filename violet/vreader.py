from __future__ import annotations
import codecs
import logging
from dataclasses import dataclass, field
from typing import Any, Iterator, Optional, Union

from pyrsistent import PVector, pvector

__all__ = [
    "Form", "String", "Symbol", "Keyword", "List",
    "Reader", "ReaderError", "UnexpectedEOFError",
    "SEPARATORS", "read_form", "read_all",
]

logger = logging.getLogger(__name__)

Payload = Union[str, bytes]

# ----------------------------
# Forms
# ----------------------------
@dataclass(frozen=True)
class String:
    val: Payload

@dataclass(frozen=True)
class Symbol:
    name: Payload

@dataclass(frozen=True)
class Keyword:
    name: Payload  # without the leading ":"

@dataclass(frozen=True)
class List:
    items: PVector = field(default_factory=pvector)

    def __post_init__(self):
        # Accept any iterable of forms; always store a persistent vector
        if not isinstance(self.items, PVector):
            object.__setattr__(self, "items", pvector(self.items))

    def __iter__(self) -> Iterator["Form"]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def __getitem__(self, idx):
        return self.items[idx]

Form = Union[String, Symbol, Keyword, List]

# ----------------------------
# Errors (strict mode only)
# ----------------------------
class ReaderError(Exception):
    def __init__(self, message: str, offset: int, file: str = "<input>"):
        super().__init__(f"{file}: {message} at byte {offset}")
        self.message = message
        self.offset = offset
        self.file = file

class UnexpectedEOFError(ReaderError):
    """Input ended inside a string or list."""

# ----------------------------
# Reader
# ----------------------------
SEPARATORS = frozenset(b" \n,")  # tab and CR are symbol bytes

QUOTE = ord('"')
LPAREN = ord("(")
RPAREN = ord(")")
COLON = ord(":")

_DELIMITERS = ' \n,"():'

def _check_encoding(encoding: str):
    """Scanning happens on raw bytes, so the codec must keep ASCII delimiters as-is."""
    codecs.lookup(encoding)  # LookupError for unknown codecs
    try:
        encoded = _DELIMITERS.encode(encoding)
    except (LookupError, UnicodeError):
        encoded = None
    if encoded != _DELIMITERS.encode("ascii"):
        raise ValueError(f"encoding {encoding!r} is not ASCII-compatible")

@dataclass
class Reader:
    """Cursor over an in-memory byte buffer producing one top-level form per call.

    By default the reader never fails: unterminated strings and lists come back
    holding whatever was read before the input ran out. With ``strict=True`` those
    cases raise :class:`UnexpectedEOFError` and an unmatched ``)`` raises
    :class:`ReaderError`. ``encoding`` must be ASCII-compatible (ValueError
    otherwise); ``encoding=None`` keeps payloads as raw ``bytes``.
    """
    src: Any
    file: str = "<input>"
    encoding: Optional[str] = "utf-8"
    strict: bool = False
    i: int = 0

    def __post_init__(self):
        if isinstance(self.src, str):
            self.src = self.src.encode("utf-8", "surrogateescape")
        if self.encoding is not None:
            _check_encoding(self.encoding)
        self._buf = memoryview(self.src).cast("B")

    def eof(self) -> bool:
        return self.i >= len(self._buf)

    def peek(self) -> Optional[int]:
        return None if self.i >= len(self._buf) else self._buf[self.i]

    def advance(self):
        if not self.eof():
            self.i += 1

    def skip_separators(self):
        while not self.eof() and self._buf[self.i] in SEPARATORS:
            self.i += 1

    def read(self) -> list[Form]:
        return list(self)

    def __iter__(self) -> Iterator[Form]:
        while True:
            form = self.read_form()
            if form is None:
                return
            yield form

    def read_form(self) -> Optional[Form]:
        """Read the next top-level form, or return None at end of input."""
        self.skip_separators()
        ch = self.peek()
        if ch is None:
            return None
        if ch == LPAREN:
            return self.read_list()
        if ch == RPAREN:
            return self._read_unmatched_close()
        return self._read_atom(ch)

    def _read_atom(self, ch: int) -> Form:
        if ch == QUOTE:
            return self.read_string()
        if ch == COLON:
            return self.read_keyword()
        return self.read_symbol()

    def read_list(self) -> List:
        # Open lists live on an explicit stack so nesting depth is not bounded
        # by the interpreter's recursion limit.
        assert self.peek() == LPAREN
        stack: list[tuple[int, list[Form]]] = [(self.i, [])]
        self.advance()
        while True:
            start, items = stack[-1]
            ch = self.peek()
            if ch is None or ch == RPAREN:
                if ch is None:
                    self._truncated("list", start)
                else:
                    self.advance()
                done = List(pvector(items))
                stack.pop()
                if not stack:
                    return done
                stack[-1][1].append(done)
                continue
            self.skip_separators()
            ch = self.peek()
            if ch is None:
                continue
            if ch == LPAREN:
                stack.append((self.i, []))
                self.advance()
                continue
            # A ")" after separators reads as an empty symbol
            items.append(self._read_atom(ch))

    def read_string(self) -> String:
        assert self.peek() == QUOTE
        start = self.i
        self.advance()
        while not self.eof() and self._buf[self.i] != QUOTE:
            self.i += 1
        val = self._payload(start + 1, self.i)
        if self.eof():
            self._truncated("string", start)
        else:
            self.advance()
        return String(val)

    def read_keyword(self) -> Keyword:
        assert self.peek() == COLON
        self.advance()
        return Keyword(self._read_name())

    def read_symbol(self) -> Symbol:
        return Symbol(self._read_name())

    def _read_name(self) -> Payload:
        start = self.i
        while not self.eof():
            ch = self._buf[self.i]
            if ch in SEPARATORS or ch == RPAREN:
                break
            self.i += 1
        return self._payload(start, self.i)

    def _read_unmatched_close(self) -> Symbol:
        if self.strict:
            raise ReaderError("unexpected ')'", self.i, self.file)
        logger.debug("%s: dropping unmatched ')' at byte %d", self.file, self.i)
        self.advance()
        return Symbol(self._payload(self.i, self.i))

    def _truncated(self, kind: str, start: int):
        if self.strict:
            raise UnexpectedEOFError(f"unterminated {kind}", start, self.file)
        logger.debug("%s: unterminated %s at byte %d truncated at end of input",
                     self.file, kind, start)

    def _payload(self, start: int, end: int) -> Payload:
        raw = bytes(self._buf[start:end])
        if self.encoding is None:
            return raw
        return raw.decode(self.encoding, "surrogateescape")


def read_form(src: Any, **opts) -> Optional[Form]:
    """Read the first form of ``src``; see :class:`Reader` for options."""
    return Reader(src, **opts).read_form()

def read_all(src: Any, **opts) -> list[Form]:
    return Reader(src, **opts).read()
