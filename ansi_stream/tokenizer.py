"""Incremental ANSI escape sequence tokenizer.

Turns a stream of text chunks into tokens. Control sequences split across
chunks are held in a carry buffer until their terminator arrives:

  >>> t = Tokenizer()
  >>> t.push("\\x1b[3")
  []
  >>> t.push("1mred")
  [SetFgColor(color=Color16(code=1)), Text(text='red')]
"""

from __future__ import annotations

import logging
import re
from types import MappingProxyType
from typing import Mapping, Optional

from ansi_stream.tokens import (
    Color16,
    Color256,
    ColorRGB,
    Decoration,
    ResetAll,
    ResetBgColor,
    ResetFgColor,
    SetBgColor,
    SetDecoration,
    SetFgColor,
    Text,
    Token,
    Unknown,
)

logger = logging.getLogger(__name__)

ESC = "\x1b"
CSI = ESC + "["

_PARAMETER_CHARS = frozenset("0123456789;-")
_INT_RE = re.compile(r"(-?)([0-9]+)")
# Digit runs longer than this saturate instead of growing without bound.
_MAX_DIGITS = 64

_ENABLE_CODES = {
    1: Decoration.BOLD,
    2: Decoration.DIM,
    3: Decoration.ITALIC,
    4: Decoration.UNDERLINE,
    5: Decoration.BLINK,
    7: Decoration.REVERSE,
    8: Decoration.HIDDEN,
    9: Decoration.STRIKETHROUGH,
}

_DISABLE_CODES = {
    21: Decoration.BOLD,
    23: Decoration.ITALIC,
    24: Decoration.UNDERLINE,
    25: Decoration.BLINK,
    27: Decoration.REVERSE,
    28: Decoration.HIDDEN,
    29: Decoration.STRIKETHROUGH,
}


def _build_sgr_table() -> Mapping[int, tuple[Token, ...]]:
    table: dict[int, tuple[Token, ...]] = {0: (ResetAll(),)}
    for code, decoration in _ENABLE_CODES.items():
        table[code] = (SetDecoration(decoration, True),)
    for code, decoration in _DISABLE_CODES.items():
        table[code] = (SetDecoration(decoration, False),)
    table[22] = (
        SetDecoration(Decoration.BOLD, False),
        SetDecoration(Decoration.DIM, False),
    )
    for offset in range(8):
        table[30 + offset] = (SetFgColor(Color16(offset)),)
        table[40 + offset] = (SetBgColor(Color16(offset)),)
        table[90 + offset] = (SetFgColor(Color16(offset + 8)),)
        table[100 + offset] = (SetBgColor(Color16(offset + 8)),)
    table[39] = (ResetFgColor(),)
    table[49] = (ResetBgColor(),)
    return MappingProxyType(table)


# Plain SGR codes. 38 and 48 need lookahead and are handled separately.
SGR_TABLE = _build_sgr_table()


def parse_int(text: str, start: int = 0, end: Optional[int] = None) -> Optional[int]:
    """Parse ``text[start:end]`` as an optionally negative decimal integer.

    Returns None for empty or inverted ranges and for anything that is not
    entirely ``-?[0-9]+``. Never raises; very long digit runs saturate.
    """
    if end is None or end > len(text):
        end = len(text)
    if start < 0 or start >= end:
        return None
    match = _INT_RE.fullmatch(text, start, end)
    if match is None:
        return None
    digits = match.group(2).lstrip("0") or "0"
    if len(digits) > _MAX_DIGITS:
        digits = "9" * _MAX_DIGITS
    value = int(digits)
    return -value if match.group(1) else value


def _is_terminator(character: str) -> bool:
    return "@" <= character <= "~"


def _malformed(segments: list[str]) -> Unknown:
    sequence = f"{CSI}{';'.join(segments)}m"
    logger.debug("Malformed extended color %r", sequence)
    return Unknown(sequence)


def _decode_extended(code: int, segments: list[str], start: int) -> tuple[Token, int]:
    """Decode a 38/48 extended color starting at ``segments[start]``.

    Returns the token and the index of the first segment after the ones
    consumed.
    """
    set_color = SetFgColor if code == 38 else SetBgColor
    count = len(segments)

    def segment(index: int) -> Optional[int]:
        return parse_int(segments[index]) if index < count else None

    mode = segment(start + 1)
    if mode == 5:
        return set_color(Color256(segment(start + 2))), start + 3
    if mode == 2:
        r, g, b = segment(start + 2), segment(start + 3), segment(start + 4)
        if r is not None and g is not None and b is not None:
            return set_color(ColorRGB((r, g, b))), start + 5
        end = min(start + 5, count)
        return _malformed(segments[start:end]), end

    end = min(start + 2, count)
    return _malformed(segments[start:end]), end


def decode_sgr(params: str) -> list[Token]:
    """Decode the parameter string of an SGR sequence (``ESC [ params m``)."""
    if not params:
        return [ResetAll()]

    segments = params.split(";")
    tokens: list[Token] = []
    i = 0
    while i < len(segments):
        code = parse_int(segments[i])
        if code is None:
            i += 1
        elif code == 38 or code == 48:
            token, i = _decode_extended(code, segments, i)
            tokens.append(token)
        else:
            # Unrecognised codes are ignored, as terminals do.
            tokens.extend(SGR_TABLE.get(code, ()))
            i += 1
    return tokens


class Tokenizer:
    """Stateful tokenizer; feed it chunks with :meth:`push`."""

    def __init__(self) -> None:
        self._buffer = ""

    @property
    def pending(self) -> str:
        """The incomplete sequence carried over to the next push."""
        return self._buffer

    def reset(self) -> None:
        self._buffer = ""

    def push(self, chunk: str) -> list[Token]:
        data = self._buffer + chunk
        self._buffer = ""
        tokens: list[Token] = []
        text_parts: list[str] = []

        def flush_text() -> None:
            if text_parts:
                tokens.append(Text("".join(text_parts)))
                text_parts.clear()

        size = len(data)
        i = 0
        while i < size:
            esc = data.find(ESC, i)
            if esc == -1:
                text_parts.append(data[i:])
                break
            if esc > i:
                text_parts.append(data[i:esc])
            i = esc

            if i + 1 >= size:
                # Lone ESC at the end; it may still become a CSI.
                flush_text()
                self._buffer = data[i:]
                return tokens

            if data[i + 1] != "[":
                # Not a CSI: the ESC is literal text up to the next ESC.
                next_esc = data.find(ESC, i + 1)
                end = size if next_esc == -1 else next_esc
                text_parts.append(data[i:end])
                i = end
                continue

            flush_text()
            j = i + 2
            while j < size and data[j] in _PARAMETER_CHARS:
                j += 1
            if j >= size:
                self._buffer = data[i:]
                return tokens

            final = data[j]
            if final == "m":
                tokens.extend(decode_sgr(data[i + 2 : j]))
                i = j + 1
            elif _is_terminator(final):
                tokens.append(self._unknown(data[i : j + 1]))
                i = j + 1
            else:
                # The offending character is not part of the sequence.
                tokens.append(self._unknown(data[i:j]))
                i = j

        flush_text()
        return tokens

    @staticmethod
    def _unknown(sequence: str) -> Unknown:
        logger.debug("Unknown control sequence %r", sequence)
        return Unknown(sequence)
