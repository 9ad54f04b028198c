# docbatch/canvas.py
# Glue between the drawable canvas (fabric.js JSON, screen pixels) and page-space placeholders.
import io
from typing import Iterable, Optional, Tuple

from PIL import Image

from docbatch.config import settings
from docbatch.geometry import Rect, native_to_screen
from docbatch.models import Placeholder, Template

MIN_DRAWN_SIZE = 5  # px on canvas


def canvas_size(template: Template) -> Tuple[int, int]:
    with Image.open(io.BytesIO(template.preview_png)) as img:
        img_w, img_h = img.size
    width = min(settings.CANVAS_MAX_WIDTH, img_w)
    return width, int(round(img_h * width / img_w))


def overlay_drawing(placeholders: Iterable[Placeholder], native_size: Tuple[float, float],
                    size: Tuple[int, int]) -> dict:
    """Existing placeholders as fabric.js rects, positioned for the current canvas size."""
    objects = []
    for p in placeholders:
        r = native_to_screen(p.rect, native_size, size)
        objects.append({
            "type": "rect", "left": r.x, "top": r.y, "width": r.w, "height": r.h,
            "fill": "rgba(59,130,246,0.15)", "stroke": "#3B82F6", "strokeWidth": 2,
        })
    return {"version": "4.4.0", "objects": objects}


def last_rect_from_canvas_json(json_data: Optional[dict], existing: int) -> Optional[Rect]:
    """Return the LAST newly drawn rectangle (canvas pixels), ignoring the overlay."""
    if not json_data or len(json_data.get('objects') or []) <= existing:
        return None
    obj = json_data['objects'][-1]
    left = float(obj.get('left', 0))
    top = float(obj.get('top', 0))
    width = float(obj.get('width', 0)) * float(obj.get('scaleX', 1))
    height = float(obj.get('height', 0)) * float(obj.get('scaleY', 1))
    if width < MIN_DRAWN_SIZE and height < MIN_DRAWN_SIZE:
        return None
    return Rect(left, top, width, height)
