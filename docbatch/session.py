# docbatch/session.py
import copy
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional

from docbatch.config import get_logger, settings
from docbatch.errors import (
    DuplicatePlaceholderError,
    InvalidPlaceholderError,
    SessionBusyError,
)
from docbatch.geometry import Rect, fraction_to_native, hex_to_rgb01
from docbatch.models import DataRow, Placeholder, Template, key_from_name
from docbatch.pipeline import GenerationJob

logger = get_logger(__name__)

EDITABLE_FIELDS = ("name", "x", "y", "width", "height", "font_size", "color")


@dataclass
class Detection:
    """AI-detected field; coordinates are fractions of the template size."""
    name: str
    x: float
    y: float
    width: float
    height: float


@dataclass
class SessionState:
    """Template, placeholders and rows for one user session.

    Placeholder keys are unique: adding or renaming to an existing key is
    rejected, so every key maps to exactly one placeholder.
    """
    template: Optional[Template] = None
    placeholders: List[Placeholder] = field(default_factory=list)
    rows: List[DataRow] = field(default_factory=list)
    busy: bool = False

    # -------------------------------
    # Template
    # -------------------------------

    def set_template(self, template: Template):
        self.template = template
        self.placeholders = []
        self.rows = []
        logger.info(f"Template loaded: {template.kind} {template.width:.0f}x{template.height:.0f}")

    # -------------------------------
    # Placeholders
    # -------------------------------

    @property
    def keys(self) -> List[str]:
        return [p.key for p in self.placeholders]

    def _check_key(self, name: str, ignore_id: Optional[str] = None) -> str:
        key = key_from_name(name)
        if not key:
            raise InvalidPlaceholderError(f"Placeholder name {name!r} has an empty key.")
        for p in self.placeholders:
            if p.id != ignore_id and p.key == key:
                raise DuplicatePlaceholderError(f"A placeholder with key '{key}' already exists.")
        return key

    def default_name(self) -> str:
        return f"{{{{field_{len(self.placeholders) + 1}}}}}"

    def add_placeholder(self, rect: Rect, name: Optional[str] = None) -> Placeholder:
        name = name if name is not None else self.default_name()
        key = self._check_key(name)
        p = Placeholder(
            name=name, x=rect.x, y=rect.y, width=rect.w, height=rect.h,
            font_size=settings.DEFAULT_FONT_SIZE, color=settings.DEFAULT_COLOR,
        )
        self.placeholders.append(p)
        for row in self.rows:
            row.values.setdefault(key, "")
        if not self.rows:
            self.add_row()
        return p

    def get_placeholder(self, placeholder_id: str) -> Placeholder:
        for p in self.placeholders:
            if p.id == placeholder_id:
                return p
        raise KeyError(placeholder_id)

    def update_placeholder(self, placeholder_id: str, **changes) -> Placeholder:
        p = self.get_placeholder(placeholder_id)
        unknown = set(changes) - set(EDITABLE_FIELDS)
        if unknown:
            raise InvalidPlaceholderError(f"Cannot update placeholder field(s): {sorted(unknown)}")
        if "name" in changes:
            self._check_key(changes["name"], ignore_id=placeholder_id)
        if "font_size" in changes and float(changes["font_size"]) <= 0:
            raise InvalidPlaceholderError("Font size must be positive.")
        if "color" in changes:
            hex_to_rgb01(changes["color"])
        for name, value in changes.items():
            setattr(p, name, value)
        return p

    def delete_placeholder(self, placeholder_id: str):
        self.placeholders = [p for p in self.placeholders if p.id != placeholder_id]

    def add_detected_placeholders(self, detections: Iterable[Detection]) -> List[Placeholder]:
        if self.template is None:
            raise InvalidPlaceholderError("Load a template before detecting placeholders.")
        added = []
        taken = set(self.keys)
        for d in detections:
            base = key_from_name(d.name) or "field"
            key, n = base, 2
            while key in taken:
                key = f"{base}_{n}"
                n += 1
            taken.add(key)
            rect = fraction_to_native(d.x, d.y, d.width, d.height, self.template.native_size)
            added.append(self.add_placeholder(rect, name=f"{{{{{key}}}}}"))
        return added

    def apply_layout(self, placeholders: Iterable[Placeholder]) -> List[Placeholder]:
        """Add a saved layout's placeholders, all or none.

        Every key, font size and colour is checked before anything is added,
        so a rejected layout leaves the session untouched.
        """
        placeholders = list(placeholders)
        taken = set(self.keys)
        for p in placeholders:
            key = key_from_name(p.name)
            if not key:
                raise InvalidPlaceholderError(f"Placeholder name {p.name!r} has an empty key.")
            if key in taken:
                raise DuplicatePlaceholderError(f"A placeholder with key '{key}' already exists.")
            taken.add(key)
            try:
                font_size = float(p.font_size)
            except (TypeError, ValueError) as e:
                raise InvalidPlaceholderError(f"Font size of '{key}' is not a number.") from e
            if font_size <= 0:
                raise InvalidPlaceholderError(f"Font size of '{key}' must be positive.")
            hex_to_rgb01(p.color)

        added = []
        for p in placeholders:
            new = self.add_placeholder(p.rect, name=p.name)
            new.font_size = float(p.font_size)
            new.color = p.color
            added.append(new)
        logger.info(f"Layout applied: {len(added)} placeholders")
        return added

    # -------------------------------
    # Data rows
    # -------------------------------

    def add_row(self) -> DataRow:
        row = DataRow(values={key: "" for key in self.keys})
        self.rows.append(row)
        return row

    def remove_row(self, row_id: str):
        self.rows = [r for r in self.rows if r.id != row_id]

    def set_value(self, row_id: str, key: str, value: str):
        for row in self.rows:
            if row.id == row_id:
                row.values[key] = value
                return
        raise KeyError(row_id)

    def replace_rows(self, records: Iterable[Mapping[str, object]]) -> List[DataRow]:
        rows = []
        for record in records:
            values: Dict[str, str] = {
                str(k): "" if v is None else str(v) for k, v in record.items() if k != "id"
            }
            rows.append(DataRow(values=values))
        self.rows = rows
        return rows

    # -------------------------------
    # Generation
    # -------------------------------

    def can_proceed(self, step: int) -> bool:
        if step == 1:
            return self.template is not None
        if step == 2:
            return len(self.placeholders) > 0
        if step == 3:
            return len(self.rows) > 0
        return False

    def snapshot(self) -> GenerationJob:
        if self.template is None:
            raise InvalidPlaceholderError("No template loaded.")
        return GenerationJob(
            template=self.template,
            placeholders=tuple(copy.deepcopy(self.placeholders)),
            rows=tuple(copy.deepcopy(self.rows)),
        )

    @contextmanager
    def generating(self):
        if self.busy:
            raise SessionBusyError("A generation run is already in progress.")
        self.busy = True
        try:
            yield self.snapshot()
        finally:
            self.busy = False
