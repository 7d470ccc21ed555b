"""Token and color types shared by the tokenizer and the parser.

Tokens are small frozen dataclasses. Each one knows how to render itself as a
compact dict for the ``/tokens`` debug endpoint:

  {"type": "set-fg-color", "color": {"type": "256", "code": 196}}
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Tuple, Union


class Decoration(str, Enum):
    BOLD = "bold"
    DIM = "dim"
    ITALIC = "italic"
    UNDERLINE = "underline"
    BLINK = "blink"
    REVERSE = "reverse"
    HIDDEN = "hidden"
    STRIKETHROUGH = "strikethrough"


@dataclass(frozen=True)
class Color16:
    code: int

    def to_dict(self) -> dict[str, Any]:
        return {"type": "16", "code": self.code}


@dataclass(frozen=True)
class Color256:
    # None means the parameter segment was empty or never supplied.
    code: Optional[int]

    def to_dict(self) -> dict[str, Any]:
        return {"type": "256", "code": self.code}


@dataclass(frozen=True)
class ColorRGB:
    rgb: Optional[Tuple[int, int, int]]

    def to_dict(self) -> dict[str, Any]:
        return {"type": "rgb", "rgb": list(self.rgb) if self.rgb is not None else None}


# Unvalidated colors come straight out of the tokenizer; the parser narrows
# them to in-range colors of the same shape.
RawColor = Union[Color16, Color256, ColorRGB]
Color = Union[Color16, Color256, ColorRGB]


@dataclass(frozen=True)
class Text:
    text: str

    def to_dict(self) -> dict[str, Any]:
        return {"type": "text", "text": self.text}


@dataclass(frozen=True)
class SetFgColor:
    color: RawColor

    def to_dict(self) -> dict[str, Any]:
        return {"type": "set-fg-color", "color": self.color.to_dict()}


@dataclass(frozen=True)
class SetBgColor:
    color: RawColor

    def to_dict(self) -> dict[str, Any]:
        return {"type": "set-bg-color", "color": self.color.to_dict()}


@dataclass(frozen=True)
class ResetFgColor:
    def to_dict(self) -> dict[str, Any]:
        return {"type": "reset-fg-color"}


@dataclass(frozen=True)
class ResetBgColor:
    def to_dict(self) -> dict[str, Any]:
        return {"type": "reset-bg-color"}


@dataclass(frozen=True)
class ResetAll:
    def to_dict(self) -> dict[str, Any]:
        return {"type": "reset-all"}


@dataclass(frozen=True)
class SetDecoration:
    """Turn one decoration on (``enable=True``) or off."""

    decoration: Decoration
    enable: bool = True

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.decoration.value, "enable": self.enable}


@dataclass(frozen=True)
class Unknown:
    """A sequence that was recognised as a control sequence but not applied."""

    sequence: str

    def to_dict(self) -> dict[str, Any]:
        return {"type": "unknown", "sequence": self.sequence}


Token = Union[
    Text,
    SetFgColor,
    SetBgColor,
    ResetFgColor,
    ResetBgColor,
    ResetAll,
    SetDecoration,
    Unknown,
]
