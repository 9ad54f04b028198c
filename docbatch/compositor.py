# docbatch/compositor.py
import io
from typing import Sequence, Tuple

import fitz  # PyMuPDF

from docbatch.errors import DocumentBuildError
from docbatch.geometry import hex_to_rgb01
from docbatch.layout import FONT_NAME, baselines, wrap_text
from docbatch.models import DataRow, Placeholder, Template

EMBEDDABLE_IMAGE_TYPES = ("image/png", "image/jpeg", "image/jpg")


# -------------------------------
# Page setup
# -------------------------------

def open_template_page(template: Template) -> fitz.Document:
    """Fresh single-page document built from the template bytes."""
    if template.kind == "pdf":
        doc = fitz.open(stream=template.data, filetype="pdf")
        if len(doc) > 1:
            doc.select([0])
        return doc

    if template.mime_type not in EMBEDDABLE_IMAGE_TYPES:
        raise DocumentBuildError(f"Unsupported image type for PDF embedding: {template.mime_type}")
    doc = fitz.open()
    page = doc.new_page(width=float(template.width), height=float(template.height))
    page.insert_image(page.rect, stream=template.data)
    return doc


def draw_text_lines(page: fitz.Page, placeholder: Placeholder, text: str,
                    color: Tuple[float, float, float]):
    page_height = page.rect.height
    lines = wrap_text(text, placeholder.width, placeholder.font_size)
    # Baselines are bottom-left based; PyMuPDF points are top-left based.
    # No clipping against placeholder.height: long text runs past the box.
    for line, baseline in zip(lines, baselines(page_height, placeholder.y, placeholder.font_size, len(lines))):
        if not line:
            continue
        page.insert_text(
            fitz.Point(placeholder.x, page_height - baseline),
            line,
            fontsize=float(placeholder.font_size),
            fontname=FONT_NAME,
            color=color,
        )


# -------------------------------
# Filling engine
# -------------------------------

def render_page(template: Template, placeholders: Sequence[Placeholder], row: DataRow) -> bytes:
    doc = open_template_page(template)
    try:
        page = doc[0]
        for placeholder in placeholders:
            text = row.value_for(placeholder.key)
            color = hex_to_rgb01(placeholder.color)
            draw_text_lines(page, placeholder, text, color)

        out = io.BytesIO()
        doc.save(out, garbage=3, deflate=True)
        return out.getvalue()
    finally:
        doc.close()
