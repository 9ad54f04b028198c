# docbatch/models.py
import json
import re
import uuid
from dataclasses import dataclass, asdict, field
from typing import Dict, List, Tuple

from docbatch.errors import LayoutError
from docbatch.geometry import Rect

_KEY_DECORATION = re.compile(r"{{|}}")


def new_id() -> str:
    return uuid.uuid4().hex


def key_from_name(name: str) -> str:
    """Data-column key for a placeholder name: ``{{first_name}}`` -> ``first_name``."""
    return _KEY_DECORATION.sub("", name).strip()


@dataclass(frozen=True)
class Template:
    data: bytes
    kind: str                # 'image' | 'pdf'
    mime_type: str
    width: float             # native page-space units (pt for PDF, px for images)
    height: float
    preview_png: bytes
    filename: str = ""

    @property
    def native_size(self) -> Tuple[float, float]:
        return (self.width, self.height)


@dataclass
class Placeholder:
    name: str
    x: float
    y: float
    width: float
    height: float
    font_size: float = 12.0
    color: str = "#000000"
    id: str = field(default_factory=new_id)

    @property
    def key(self) -> str:
        return key_from_name(self.name)

    @property
    def rect(self) -> Rect:
        return Rect(self.x, self.y, self.width, self.height)


@dataclass
class DataRow:
    values: Dict[str, str] = field(default_factory=dict)
    id: str = field(default_factory=new_id)

    def value_for(self, key: str) -> str:
        return self.values.get(key, "")


# -------------------------------
# Layout persistence
# -------------------------------

def layout_to_json(placeholders: List[Placeholder], native_size: Tuple[float, float]) -> str:
    d = {
        "native_size": list(native_size),
        "placeholders": [asdict(p) for p in placeholders],
    }
    return json.dumps(d, indent=2)


def layout_from_json(s: str) -> Tuple[List[Placeholder], Tuple[float, float]]:
    """Parse a saved layout; anything malformed raises LayoutError."""
    try:
        d = json.loads(s)
        native_size = tuple(float(v) for v in d.get("native_size", (0, 0)))
        placeholders = []
        for x in d.get("placeholders", []):
            x = dict(x)
            x.setdefault("id", new_id())
            if not isinstance(x.get("name"), str):
                raise TypeError(f"placeholder name must be a string, got {x.get('name')!r}")
            placeholders.append(Placeholder(**x))
    except (json.JSONDecodeError, TypeError, KeyError, ValueError, AttributeError) as e:
        raise LayoutError(f"Invalid layout file: {e}") from e
    return placeholders, native_size
