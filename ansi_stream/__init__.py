"""Incremental ANSI SGR parsing into styled text chunks."""

from ansi_stream.color import Color16Code, color16_name, color_to_hex, color_to_rgb
from ansi_stream.parser import Parser, StyledText, validate_color
from ansi_stream.tokenizer import Tokenizer, parse_int
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

__version__ = "1.0.0"

__all__ = [
    "Color16",
    "Color16Code",
    "Color256",
    "ColorRGB",
    "Decoration",
    "Parser",
    "ResetAll",
    "ResetBgColor",
    "ResetFgColor",
    "SetBgColor",
    "SetDecoration",
    "SetFgColor",
    "StyledText",
    "Text",
    "Token",
    "Tokenizer",
    "Unknown",
    "color16_name",
    "color_to_hex",
    "color_to_rgb",
    "parse_int",
    "validate_color",
]
