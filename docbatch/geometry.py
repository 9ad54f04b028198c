# docbatch/geometry.py
# Colour decoding and coordinate mapping between the on-screen preview and
# template page-space (origin top-left, native template units).

import re
from dataclasses import dataclass
from typing import Tuple

import fitz  # PyMuPDF

from docbatch.errors import InvalidColorError

_HEX_COLOR = re.compile(r"^#[0-9a-fA-F]{6}$")

Size = Tuple[float, float]


def hex_to_rgb01(hex_color: str) -> Tuple[float, float, float]:
    if not isinstance(hex_color, str) or not _HEX_COLOR.match(hex_color):
        raise InvalidColorError(f"Color must be in #RRGGBB form, got {hex_color!r}")
    s = hex_color[1:]
    return (int(s[0:2], 16)/255.0, int(s[2:4], 16)/255.0, int(s[4:6], 16)/255.0)


@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    w: float
    h: float

    def as_rect(self) -> fitz.Rect:
        return fitz.Rect(self.x, self.y, self.x + self.w, self.y + self.h)


def _scale(src: Size, dst: Size) -> Tuple[float, float]:
    src_w, src_h = src
    dst_w, dst_h = dst
    if src_w <= 0 or src_h <= 0 or dst_w <= 0 or dst_h <= 0:
        raise ValueError(f"Sizes must be positive, got {src} -> {dst}")
    return dst_w / src_w, dst_h / src_h


def screen_to_native(rect: Rect, container_size: Size, native_size: Size) -> Rect:
    """Map a rectangle drawn on the preview (pixels) to template page-space."""
    sx, sy = _scale(container_size, native_size)
    return Rect(rect.x * sx, rect.y * sy, rect.w * sx, rect.h * sy)


def native_to_screen(rect: Rect, native_size: Size, container_size: Size) -> Rect:
    """Map a page-space rectangle onto the preview at its current size.

    Call on every render; the result depends only on the current container size.
    """
    sx, sy = _scale(native_size, container_size)
    return Rect(rect.x * sx, rect.y * sy, rect.w * sx, rect.h * sy)


def fraction_to_native(fx: float, fy: float, fw: float, fh: float, native_size: Size) -> Rect:
    native_w, native_h = native_size
    return Rect(fx * native_w, fy * native_h, fw * native_w, fh * native_h)
