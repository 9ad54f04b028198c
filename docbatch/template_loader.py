# docbatch/template_loader.py
import io
from typing import Optional, Tuple

import fitz  # PyMuPDF
from PIL import Image

from docbatch.config import get_logger, settings
from docbatch.errors import TemplateProcessingError, UnsupportedTemplateError
from docbatch.models import Template

logger = get_logger(__name__)


def template_kind(mime_type: str) -> str:
    if mime_type == "application/pdf":
        return "pdf"
    if mime_type and mime_type.startswith("image/"):
        return "image"
    raise UnsupportedTemplateError(f"Unsupported template file type: {mime_type or 'unknown'}")


def render_page_image(doc: fitz.Document, page_index: int,
                      scale: Optional[float] = None) -> Tuple[bytes, Tuple[int, int]]:
    """Rasterise one page to PNG bytes at `scale` px per pt (preview scale by default).

    Returns the PNG and its pixel size. Transparency is flattened to white.
    """
    zoom = settings.PREVIEW_SCALE if scale is None else scale
    pix = doc[page_index].get_pixmap(matrix=fitz.Matrix(zoom, zoom), alpha=False)
    png = Image.frombytes("RGB", (pix.width, pix.height), pix.samples)
    out = io.BytesIO()
    png.save(out, format="PNG")
    return out.getvalue(), (pix.width, pix.height)


def load_template(data: bytes, mime_type: str, filename: str = "") -> Template:
    """Build a Template with native page-1 size and a PNG preview."""
    kind = template_kind(mime_type)
    try:
        if kind == "pdf":
            with fitz.open(stream=data, filetype="pdf") as doc:
                if len(doc) == 0:
                    raise ValueError("PDF has no pages")
                rect = doc[0].rect
                preview, _ = render_page_image(doc, 0)
                width, height = rect.width, rect.height
        else:
            with Image.open(io.BytesIO(data)) as img:
                img.load()
                width, height = img.size
                buf = io.BytesIO()
                img.convert("RGB").save(buf, format="PNG")
                preview = buf.getvalue()
    except Exception as e:
        logger.error(f"Could not process template '{filename}': {e}")
        raise TemplateProcessingError(f"Could not process the template file: {e}") from e

    return Template(
        data=bytes(data), kind=kind, mime_type=mime_type,
        width=float(width), height=float(height),
        preview_png=preview, filename=filename,
    )
