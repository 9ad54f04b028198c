# docbatch/layout.py
from typing import List

import fitz  # PyMuPDF

# Single fixed typeface (PyMuPDF base-14 Helvetica).
FONT_NAME = "helv"
LINE_HEIGHT_FACTOR = 1.2


def text_width(text: str, fontsize: float, fontname: str = FONT_NAME) -> float:
    return fitz.get_text_length(text, fontname=fontname, fontsize=float(fontsize))


def wrap_text(text: str, max_width: float, fontsize: float, fontname: str = FONT_NAME) -> List[str]:
    """Greedy word wrap of ``text`` into lines no wider than ``max_width``.

    Words are never broken: a word wider than ``max_width`` gets a line of
    its own. The result always holds at least one (possibly empty) line.
    """
    lines: List[str] = []
    current: List[str] = []
    for word in text.split():
        candidate = " ".join(current + [word])
        if current and text_width(candidate, fontsize, fontname) > max_width:
            lines.append(" ".join(current))
            current = [word]
        else:
            current.append(word)
    lines.append(" ".join(current))
    return lines


def line_advance(fontsize: float) -> float:
    return float(fontsize) * LINE_HEIGHT_FACTOR


def baselines(page_height: float, y: float, fontsize: float, line_count: int) -> List[float]:
    """Baselines in bottom-left page space for ``line_count`` lines.

    ``y`` is the placeholder's top-left offset; the first baseline sits one
    font size below the box top.
    """
    first = page_height - y - fontsize
    step = line_advance(fontsize)
    return [first - i * step for i in range(line_count)]
