"""Render parser output as HTML ``<span>`` fragments.

Only the text content is escaped; class names and style values come from the
transform function and are trusted.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Callable, Iterable, Union

from ansi_stream.color import color_to_hex
from ansi_stream.parser import Parser, StyledText
from ansi_stream.tokens import Decoration

_ESCAPE_RE = re.compile(r"[&<>\"']")
_ESCAPE_MAP = {
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "'": "&#039;",
}

DECORATION_CLASSES = {
    Decoration.BOLD: "ansi-bold",
    Decoration.DIM: "ansi-dim",
    Decoration.ITALIC: "ansi-italic",
    Decoration.UNDERLINE: "ansi-underline",
    Decoration.BLINK: "ansi-blink",
    Decoration.REVERSE: "ansi-reverse",
    Decoration.HIDDEN: "ansi-hidden",
    Decoration.STRIKETHROUGH: "ansi-strikethrough",
}


@dataclass(frozen=True)
class Classes:
    classes: tuple[str, ...]


@dataclass(frozen=True)
class Styles:
    styles: dict[str, str] = field(default_factory=dict)


ClassOrStyle = Union[Classes, Styles]
TransformFunction = Callable[[StyledText], Iterable[ClassOrStyle]]


def escape_html(text: str) -> str:
    return _ESCAPE_RE.sub(lambda m: _ESCAPE_MAP[m.group()], text)


def default_transform(chunk: StyledText) -> list[ClassOrStyle]:
    result: list[ClassOrStyle] = []
    if chunk.fg is not None:
        result.append(Styles({"color": color_to_hex(chunk.fg)}))
    if chunk.bg is not None:
        result.append(Styles({"background-color": color_to_hex(chunk.bg)}))
    if chunk.decorations:
        result.append(Classes(tuple(DECORATION_CLASSES[d] for d in chunk.decorations)))
    return result


def render(chunk: StyledText, transform: TransformFunction = default_transform) -> str:
    """Render one chunk as ``<span class=".." style="..">text</span>``."""
    classes: dict[str, None] = {}
    styles: dict[str, str] = {}
    for item in transform(chunk):
        if isinstance(item, Classes):
            for name in item.classes:
                classes.setdefault(name, None)
        elif isinstance(item, Styles):
            styles.update(item.styles)
        else:
            raise AssertionError(f"Unknown class or style: {item!r}")

    class_attr = ""
    if classes:
        names = " ".join(classes)
        class_attr = f' class="{names}"'
    style_attr = ""
    if styles:
        declarations = "; ".join(f"{key}: {value}" for key, value in styles.items())
        style_attr = f' style="{declarations}"'
    return f"<span{class_attr}{style_attr}>{escape_html(chunk.text)}</span>"


class HtmlTransformer:
    """Incremental ANSI to HTML conversion; one fragment per styled chunk."""

    def __init__(self, transform: TransformFunction = default_transform) -> None:
        self._parser = Parser()
        self._transform = transform

    def push(self, text: str) -> list[str]:
        return [render(chunk, self._transform) for chunk in self._parser.push(text)]

    def reset(self) -> None:
        self._parser.reset()
