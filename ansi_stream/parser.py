"""SGR style interpreter.

Consumes tokens from a private :class:`Tokenizer` and emits styled runs:

  [StyledText(text="hello", fg=Color16(2), decorations=(Decoration.BOLD,)), ...]
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional, Tuple

from ansi_stream.tokenizer import Tokenizer
from ansi_stream.tokens import (
    Color,
    Color16,
    Color256,
    ColorRGB,
    Decoration,
    RawColor,
    ResetAll,
    ResetBgColor,
    ResetFgColor,
    SetBgColor,
    SetDecoration,
    SetFgColor,
    Text,
    Unknown,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StyledText:
    text: str
    fg: Optional[Color] = None
    bg: Optional[Color] = None
    decorations: Optional[Tuple[Decoration, ...]] = None

    def to_dict(self) -> dict[str, Any]:
        """Build a compact dict, omitting inactive fields."""
        run: dict[str, Any] = {"text": self.text}
        if self.fg is not None:
            run["fg"] = self.fg.to_dict()
        if self.bg is not None:
            run["bg"] = self.bg.to_dict()
        if self.decorations:
            run["decorations"] = [d.value for d in self.decorations]
        return run


def _in_byte_range(value: Optional[int]) -> bool:
    return value is not None and 0 <= value <= 255


def validate_color(color: RawColor) -> Optional[Color]:
    """Return an in-range copy of *color*, or None if it cannot be used."""
    if isinstance(color, Color16):
        if color.code is None or not 0 <= color.code <= 15:
            return None
        return Color16(color.code)
    if isinstance(color, Color256):
        if not _in_byte_range(color.code):
            return None
        return Color256(color.code)
    if isinstance(color, ColorRGB):
        if color.rgb is None or not all(_in_byte_range(c) for c in color.rgb):
            return None
        r, g, b = color.rgb
        return ColorRGB((r, g, b))
    raise AssertionError(f"Unhandled color: {color!r}")


class _Style:
    __slots__ = ("fg", "bg", "decorations")

    def __init__(self) -> None:
        self.fg: Optional[Color] = None
        self.bg: Optional[Color] = None
        # dict keys double as an insertion-ordered set
        self.decorations: dict[Decoration, None] = {}

    def snapshot(self, text: str) -> StyledText:
        return StyledText(
            text=text,
            fg=self.fg,
            bg=self.bg,
            decorations=tuple(self.decorations) or None,
        )


class Parser:
    """Incremental ANSI parser producing :class:`StyledText` chunks."""

    def __init__(self) -> None:
        self._tokenizer = Tokenizer()
        self._style = _Style()

    @property
    def pending(self) -> str:
        """Incomplete escape sequence held until the next push."""
        return self._tokenizer.pending

    def reset(self) -> None:
        """Forget buffered input and return to the default style."""
        self._tokenizer.reset()
        self._style = _Style()

    def push(self, chunk: str) -> list[StyledText]:
        chunks: list[StyledText] = []
        for token in self._tokenizer.push(chunk):
            style = self._style
            if isinstance(token, Text):
                chunks.append(style.snapshot(token.text))
            elif isinstance(token, SetFgColor):
                # An invalid color resets the channel.
                style.fg = self._validate(token.color)
            elif isinstance(token, SetBgColor):
                style.bg = self._validate(token.color)
            elif isinstance(token, ResetFgColor):
                style.fg = None
            elif isinstance(token, ResetBgColor):
                style.bg = None
            elif isinstance(token, ResetAll):
                self._style = _Style()
            elif isinstance(token, SetDecoration):
                if token.enable:
                    style.decorations.setdefault(token.decoration, None)
                else:
                    style.decorations.pop(token.decoration, None)
            elif isinstance(token, Unknown):
                continue
            else:
                raise AssertionError(f"Unhandled token: {token!r}")
        return chunks

    @staticmethod
    def _validate(color: RawColor) -> Optional[Color]:
        validated = validate_color(color)
        if validated is None:
            logger.debug("Rejected color %r", color)
        return validated
