"""
Template Definition Data Structures

Defines data classes for template definitions: sections, field maps, styles,
placements, grid rows and custom rows. These structures are edited by the
TemplateStore and consumed by the TemplateRenderer.
"""

import re
import uuid
from dataclasses import asdict, dataclass, field, fields
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from resumebuilder.contexts.templating.defaults import (
    DEFAULT_GLOBAL_STYLES,
    DEFAULT_SECTION_TITLES,
    SECTION_COLLECTIONS,
)


def new_id() -> str:
    """Mint a short identifier for sections, rows and columns."""
    return uuid.uuid4().hex[:8]


# Field keys become placeholder tokens and CSS class names
FIELD_KEY_PATTERN = re.compile(r"\w+")


def validate_field_key(key: str) -> str:
    """
    Check that a field key is safe to emit as a token and class name.

    Raises:
        ValueError: If the key is not made of letters, digits and underscores
    """
    if not isinstance(key, str) or not FIELD_KEY_PATTERN.fullmatch(key):
        raise ValueError(f"Invalid field key {key!r}: use letters, digits and underscores")
    return key


class SectionType(str, Enum):
    """Section type tag. Determines the default field map and rendering style."""

    HEADER = "header"
    SUMMARY = "summary"
    EXPERIENCE = "experience"
    EDUCATION = "education"
    SKILLS = "skills"
    CERTIFICATIONS = "certifications"
    PROJECTS = "projects"
    LANGUAGES = "languages"
    REFERENCES = "references"
    CUSTOM = "custom"

    @property
    def collection(self) -> Optional[str]:
        """Resume collection this type repeats over, or None for single-value sections."""
        return SECTION_COLLECTIONS.get(self.value)

    @property
    def default_title(self) -> str:
        return DEFAULT_SECTION_TITLES[self.value]


class LayoutType(str, Enum):
    """Overall layout discriminator. Determines which placements are rendered."""

    SINGLE = "single"
    LEFT_SIDEBAR = "left-sidebar"
    RIGHT_SIDEBAR = "right-sidebar"
    GRID = "grid"
    CUSTOM = "custom"


@dataclass
class FieldSpec:
    """
    Per-field configuration within a section's field map.

    Attributes:
        enabled: Whether the field is rendered at all
        label: Display label
        input_kind: Form input type used by the editor (text, email, date, ...)
        required: Whether the editor requires a value
    """

    enabled: bool = True
    label: str = ""
    input_kind: str = "text"
    required: bool = False


@dataclass
class SectionStyle:
    """
    Visual style attributes for one section. None means "not set".

    Numeric values are pixels.
    """

    background_color: Optional[str] = None
    text_color: Optional[str] = None
    border_color: Optional[str] = None
    border_width: Optional[int] = None
    border_radius: Optional[int] = None
    padding: Optional[int] = None
    margin: Optional[int] = None
    font_size: Optional[str] = None
    font_family: Optional[str] = None
    text_align: Optional[str] = None

    @classmethod
    def keys(cls) -> List[str]:
        return [f.name for f in fields(cls)]


@dataclass(frozen=True)
class Location:
    """
    Placement of a section.

    Attributes:
        kind: "sidebar", "main", "grid" or "custom"
        row_id: Row identifier for grid and custom placements
        column: Column index (grid) or column identifier (custom)

    String form: ``sidebar``, ``main``, ``grid:<row>:<col>``, ``custom:<row>:<column>``.
    """

    kind: str
    row_id: Optional[str] = None
    column: Optional[Union[int, str]] = None

    @classmethod
    def sidebar(cls) -> "Location":
        return cls("sidebar")

    @classmethod
    def main(cls) -> "Location":
        return cls("main")

    @classmethod
    def grid(cls, row_id: str, column_index: int) -> "Location":
        return cls("grid", row_id, int(column_index))

    @classmethod
    def custom(cls, row_id: str, column_id: str) -> "Location":
        return cls("custom", row_id, column_id)

    @classmethod
    def parse(cls, value: Union[str, "Location"]) -> "Location":
        """
        Parse a location from its string form.

        Raises:
            ValueError: If the string is not a recognized location
        """
        if isinstance(value, Location):
            return value

        parts = str(value).split(":")
        if len(parts) == 1 and parts[0] in ("sidebar", "main"):
            return cls(parts[0])
        if len(parts) == 3 and parts[0] == "grid":
            try:
                return cls.grid(parts[1], int(parts[2]))
            except ValueError:
                raise ValueError(f"Invalid grid column index in location: {value!r}")
        if len(parts) == 3 and parts[0] == "custom":
            return cls.custom(parts[1], parts[2])

        raise ValueError(
            f"Invalid location: {value!r}. "
            "Use 'sidebar', 'main', 'grid:<row>:<col>' or 'custom:<row>:<column>'"
        )

    def __str__(self) -> str:
        if self.kind in ("sidebar", "main"):
            return self.kind
        return f"{self.kind}:{self.row_id}:{self.column}"


@dataclass
class Section:
    """
    Titled, independently placeable block within a template.

    Attributes:
        id: Unique identifier within the template
        type: Section type tag
        title: Display title
        fields: Field map (field key -> FieldSpec), in display order
        style: Visual style attributes
        location: Where the section is placed (must match the list holding it)
    """

    id: str
    type: SectionType
    title: str
    fields: Dict[str, FieldSpec] = field(default_factory=dict)
    style: SectionStyle = field(default_factory=SectionStyle)
    location: Location = field(default_factory=Location.main)

    def enabled_fields(self) -> List[str]:
        """Field keys that are rendered, in field map order."""
        return [key for key, spec in self.fields.items() if spec.enabled]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type.value,
            "title": self.title,
            "fields": {key: asdict(spec) for key, spec in self.fields.items()},
            "style": {k: v for k, v in asdict(self.style).items() if v is not None},
            "location": str(self.location),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Section":
        section_type = SectionType(data["type"])
        return cls(
            id=str(data["id"]),
            type=section_type,
            title=data.get("title") or section_type.default_title,
            fields={
                validate_field_key(key): FieldSpec(**spec)
                for key, spec in (data.get("fields") or {}).items()
            },
            style=SectionStyle(**(data.get("style") or {})),
            location=Location.parse(data.get("location", "main")),
        )


@dataclass
class Row:
    """
    Grid row of N equal-width columns.

    Attributes:
        id: Row identifier
        columns: Number of columns (1-5)
        cells: One ordered section list per column
    """

    id: str
    columns: int
    cells: List[List[Section]] = field(default_factory=list)

    def __post_init__(self):
        while len(self.cells) < self.columns:
            self.cells.append([])


@dataclass
class CustomColumn:
    """
    Column of a custom row.

    Attributes:
        id: Column identifier
        width: Width in percent of the row
        sections: Ordered sections in this column
    """

    id: str
    width: float
    sections: List[Section] = field(default_factory=list)


@dataclass
class CustomRow:
    """
    Row of independently sized columns.

    Attributes:
        id: Row identifier
        kind: Preset the row was created from ("header", "sidebar", "content")
        columns: Ordered columns
    """

    id: str
    kind: str
    columns: List[CustomColumn] = field(default_factory=list)

    def get_column(self, column_id: str) -> Optional[CustomColumn]:
        for column in self.columns:
            if column.id == column_id:
                return column
        return None


@dataclass
class GlobalStyles:
    """Template-wide styles from the builder's global style panel."""

    primary_color: str = DEFAULT_GLOBAL_STYLES["primary_color"]
    secondary_color: str = DEFAULT_GLOBAL_STYLES["secondary_color"]
    accent_color: str = DEFAULT_GLOBAL_STYLES["accent_color"]
    font_family: str = DEFAULT_GLOBAL_STYLES["font_family"]
    font_size: str = DEFAULT_GLOBAL_STYLES["font_size"]
    photo_style: str = DEFAULT_GLOBAL_STYLES["photo_style"]
    header_style: str = DEFAULT_GLOBAL_STYLES["header_style"]
    spacing: str = DEFAULT_GLOBAL_STYLES["spacing"]


@dataclass
class TemplateDefinition:
    """
    Named, reusable layout description.

    Attributes:
        name: Template name
        category: Category shown in the template selector (e.g., "professional")
        description: Free-text description
        layout_type: Layout discriminator
        sidebar_sections: Sections placed in the sidebar
        main_sections: Sections placed in the main region
        grid_rows: Grid rows (rendered for the grid layout)
        custom_rows: Custom rows (rendered for the custom layout)
        global_styles: Template-wide styles
    """

    name: str = "Custom Template"
    category: str = "professional"
    description: str = ""
    layout_type: LayoutType = LayoutType.SINGLE
    sidebar_sections: List[Section] = field(default_factory=list)
    main_sections: List[Section] = field(default_factory=list)
    grid_rows: List[Row] = field(default_factory=list)
    custom_rows: List[CustomRow] = field(default_factory=list)
    global_styles: GlobalStyles = field(default_factory=GlobalStyles)

    def get_row(self, row_id: str) -> Optional[Row]:
        for row in self.grid_rows:
            if row.id == row_id:
                return row
        return None

    def get_custom_row(self, row_id: str) -> Optional[CustomRow]:
        for row in self.custom_rows:
            if row.id == row_id:
                return row
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Serializable representation (used for YAML persistence)."""
        return {
            "name": self.name,
            "category": self.category,
            "description": self.description,
            "layout_type": self.layout_type.value,
            "global_styles": asdict(self.global_styles),
            "sidebar_sections": [s.to_dict() for s in self.sidebar_sections],
            "main_sections": [s.to_dict() for s in self.main_sections],
            "grid_rows": [
                {
                    "id": row.id,
                    "columns": row.columns,
                    "cells": [[s.to_dict() for s in cell] for cell in row.cells],
                }
                for row in self.grid_rows
            ],
            "custom_rows": [
                {
                    "id": row.id,
                    "kind": row.kind,
                    "columns": [
                        {
                            "id": column.id,
                            "width": column.width,
                            "sections": [s.to_dict() for s in column.sections],
                        }
                        for column in row.columns
                    ],
                }
                for row in self.custom_rows
            ],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TemplateDefinition":
        """
        Build a TemplateDefinition from its serialized form.

        Raises:
            ValueError: If a layout type, section type or location is not recognized
            TypeError: If a field spec or style carries unknown keys
        """

        def sections(items) -> List[Section]:
            return [Section.from_dict(item) for item in items or []]

        return cls(
            name=data.get("name", "Custom Template"),
            category=data.get("category", "professional"),
            description=data.get("description") or "",
            layout_type=LayoutType(data.get("layout_type", LayoutType.SINGLE.value)),
            sidebar_sections=sections(data.get("sidebar_sections")),
            main_sections=sections(data.get("main_sections")),
            grid_rows=[
                Row(
                    id=str(row["id"]),
                    columns=int(row["columns"]),
                    cells=[sections(cell) for cell in row.get("cells") or []],
                )
                for row in data.get("grid_rows") or []
            ],
            custom_rows=[
                CustomRow(
                    id=str(row["id"]),
                    kind=row.get("kind", "content"),
                    columns=[
                        CustomColumn(
                            id=str(column["id"]),
                            width=float(column["width"]),
                            sections=sections(column.get("sections")),
                        )
                        for column in row.get("columns") or []
                    ],
                )
                for row in data.get("custom_rows") or []
            ],
            global_styles=GlobalStyles(**(data.get("global_styles") or {})),
        )
