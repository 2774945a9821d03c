"""
Template Definition Store

Holds the authoritative layout tree of one template and applies structural
edits to it. Every section lives in exactly one location list and its stored
``location`` always names that list; moves are remove-then-insert and only
duplicate_section() creates a second copy (with a new identifier).
"""

import copy
from dataclasses import replace
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple, Union

from resumebuilder.contexts.templating.defaults import (
    CUSTOM_ROW_PRESETS,
    DEFAULT_SECTION_STYLE,
    MAX_GRID_COLUMNS,
    get_default_field_map,
)
from resumebuilder.contexts.templating.exceptions import SectionNotFoundError
from resumebuilder.contexts.templating.logger import _log_warning, log_edit
from resumebuilder.contexts.templating.template_data_structures import (
    CustomColumn,
    CustomRow,
    FieldSpec,
    LayoutType,
    Location,
    Row,
    Section,
    SectionStyle,
    SectionType,
    TemplateDefinition,
    new_id,
    validate_field_key,
)

LocationLike = Union[str, Location]


class TemplateStore:
    """
    Editable layout tree for a template plus the selected-section focus.

    Attributes:
        definition: The template being edited (mutated in place)
        selected_section_id: Section currently focused in the editor, or None
    """

    def __init__(
        self,
        definition: Optional[TemplateDefinition] = None,
        id_factory: Optional[Callable[[], str]] = None,
    ):
        """
        Initialize the store.

        Args:
            definition: Template to edit (default: empty single-column template)
            id_factory: Callable minting identifiers for sections, rows and
                        columns (default: random 8-character hex)
        """
        self.definition = definition or TemplateDefinition()
        self.selected_section_id: Optional[str] = None
        self._id_factory = id_factory or new_id

    # -------------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------------

    def _mint_id(self) -> str:
        taken = self._taken_ids()
        while True:
            candidate = self._id_factory()
            if candidate not in taken:
                return candidate

    def _taken_ids(self) -> set:
        taken = {section.id for section in self.all_sections()}
        taken.update(row.id for row in self.definition.grid_rows)
        for row in self.definition.custom_rows:
            taken.add(row.id)
            taken.update(column.id for column in row.columns)
        return taken

    def slot(self, location: LocationLike) -> Optional[List[Section]]:
        """
        Get the ordered section list for a location.

        Args:
            location: Location or its string form

        Returns:
            The live list, or None if the location names a missing Row/Column
        """
        location = Location.parse(location)
        if location.kind == "sidebar":
            return self.definition.sidebar_sections
        if location.kind == "main":
            return self.definition.main_sections
        if location.kind == "grid":
            row = self.definition.get_row(location.row_id)
            if row is None or not 0 <= location.column < len(row.cells):
                return None
            return row.cells[location.column]
        if location.kind == "custom":
            row = self.definition.get_custom_row(location.row_id)
            column = row.get_column(location.column) if row else None
            return column.sections if column else None
        return None

    def iter_slots(self) -> Iterator[Tuple[Location, List[Section]]]:
        """Yield every (location, section list) pair in a fixed order."""
        yield Location.sidebar(), self.definition.sidebar_sections
        yield Location.main(), self.definition.main_sections
        for row in self.definition.grid_rows:
            for index, cell in enumerate(row.cells):
                yield Location.grid(row.id, index), cell
        for row in self.definition.custom_rows:
            for column in row.columns:
                yield Location.custom(row.id, column.id), column.sections

    def locations(self) -> List[Location]:
        """All locations that currently exist in the template."""
        return [location for location, _ in self.iter_slots()]

    def all_sections(self) -> List[Section]:
        """Every section in the template, in location order."""
        return [section for _, sections in self.iter_slots() for section in sections]

    def _locate(self, section_id: str) -> Optional[Tuple[Location, List[Section], int]]:
        for location, sections in self.iter_slots():
            for index, section in enumerate(sections):
                if section.id == section_id:
                    return location, sections, index
        return None

    def find_section(self, section_id: str) -> Optional[Section]:
        """Find a section anywhere in the template, or None."""
        found = self._locate(section_id)
        if found is None:
            return None
        _, sections, index = found
        return sections[index]

    def get_section(self, section_id: str) -> Section:
        """
        Find a section anywhere in the template.

        Raises:
            SectionNotFoundError: If no section has this identifier
        """
        section = self.find_section(section_id)
        if section is None:
            raise SectionNotFoundError("Section not found", section_id=section_id)
        return section

    # -------------------------------------------------------------------------
    # Section edits
    # -------------------------------------------------------------------------

    def add_section(
        self,
        section_type: Union[str, SectionType],
        title: Optional[str] = None,
        location: LocationLike = "main",
    ) -> Optional[Section]:
        """
        Append a new section with the type's default field map.

        Args:
            section_type: Section type tag
            title: Display title (default: the type's default title)
            location: Target location

        Returns:
            The new Section, or None if the location names a missing Row/Column
        """
        section_type = SectionType(section_type)
        location = Location.parse(location)

        target = self.slot(location)
        if target is None:
            _log_warning(f"add_section ignored: no such location {location}")
            return None

        section = Section(
            id=self._mint_id(),
            type=section_type,
            title=title or section_type.default_title,
            fields={
                key: FieldSpec(**spec) for key, spec in get_default_field_map(section_type.value).items()
            },
            style=SectionStyle(**DEFAULT_SECTION_STYLE),
            location=location,
        )
        target.append(section)
        log_edit("add_section", f"{section.type.value} '{section.title}' -> {location}")
        return section

    def move_section(
        self,
        section_id: str,
        from_location: LocationLike,
        to_location: LocationLike,
        target_index: int,
    ) -> bool:
        """
        Move a section between (or within) locations.

        The section is removed from ``from_location`` and inserted into
        ``to_location`` at ``target_index`` (clamped to the list bounds, counted
        after removal), and its stored location is updated.

        Returns:
            True if moved, False if the destination does not exist (no change)

        Raises:
            SectionNotFoundError: If the section is not in ``from_location``
        """
        from_location = Location.parse(from_location)
        to_location = Location.parse(to_location)

        destination = self.slot(to_location)
        if destination is None:
            _log_warning(f"move_section ignored: no such location {to_location}")
            return False

        source = self.slot(from_location)
        index = next(
            (i for i, s in enumerate(source or []) if s.id == section_id),
            None,
        )
        if index is None:
            raise SectionNotFoundError(
                "Section not found at source location",
                section_id=section_id,
                location=str(from_location),
            )

        section = source.pop(index)
        target_index = max(0, min(target_index, len(destination)))
        destination.insert(target_index, section)
        section.location = to_location

        log_edit("move_section", f"{section_id}: {from_location} -> {to_location}[{target_index}]")
        return True

    def duplicate_section(self, section_id: str) -> Section:
        """
        Copy a section into the same location, appended at the end.

        The copy has a new identifier, the same field map and style, and its
        title suffixed with " (Copy)".

        Raises:
            SectionNotFoundError: If no section has this identifier
        """
        found = self._locate(section_id)
        if found is None:
            raise SectionNotFoundError("Section not found", section_id=section_id)
        location, sections, index = found

        original = sections[index]
        duplicate = copy.deepcopy(original)
        duplicate.id = self._mint_id()
        duplicate.title = f"{original.title} (Copy)"
        duplicate.location = location
        sections.append(duplicate)

        log_edit("duplicate_section", f"{section_id} -> {duplicate.id} at {location}")
        return duplicate

    def delete_section(self, section_id: str) -> bool:
        """
        Remove a section from every location. Clears the selection if it was selected.

        Returns:
            True if anything was removed
        """
        removed = False
        for _, sections in self.iter_slots():
            before = len(sections)
            sections[:] = [s for s in sections if s.id != section_id]
            removed = removed or len(sections) != before

        if self.selected_section_id == section_id:
            self.selected_section_id = None

        if removed:
            log_edit("delete_section", section_id)
        return removed

    def update_section_style(self, section_id: str, **updates: Any) -> Section:
        """
        Merge style attributes into a section. Unspecified keys are untouched.

        Raises:
            SectionNotFoundError: If no section has this identifier
            ValueError: If an update key is not a style attribute
        """
        section = self.get_section(section_id)
        unknown = sorted(set(updates) - set(SectionStyle.keys()))
        if unknown:
            raise ValueError(f"Unknown style keys: {unknown}. Valid keys: {SectionStyle.keys()}")

        section.style = replace(section.style, **updates)
        log_edit("update_section_style", f"{section_id}: {sorted(updates)}")
        return section

    def update_section_fields(
        self, section_id: str, updates: Dict[str, Union[FieldSpec, Dict[str, Any]]]
    ) -> Section:
        """
        Merge field map updates into a section.

        Existing fields take a partial update (e.g., ``{"email": {"enabled": False}}``);
        new keys are added with FieldSpec defaults for anything unspecified.

        Raises:
            SectionNotFoundError: If no section has this identifier
            ValueError: If a key is not a valid field key, or an update carries
                an unknown field spec attribute. Nothing is changed.
        """
        section = self.get_section(section_id)
        valid = set(FieldSpec.__dataclass_fields__)

        for key, update in updates.items():
            validate_field_key(key)
            unknown = [] if isinstance(update, FieldSpec) else sorted(set(update) - valid)
            if unknown:
                raise ValueError(f"Unknown field spec keys for '{key}': {unknown}")

        for key, update in updates.items():
            if isinstance(update, FieldSpec):
                section.fields[key] = replace(update)
                continue
            current = section.fields.get(key, FieldSpec(label=key))
            section.fields[key] = replace(current, **update)

        log_edit("update_section_fields", f"{section_id}: {sorted(updates)}")
        return section

    def add_custom_field(self, section_id: str) -> str:
        """
        Add an enabled text field named ``custom_field_N`` to a section.

        Returns:
            The new field key
        """
        section = self.get_section(section_id)
        number = len(section.fields) + 1
        while f"custom_field_{number}" in section.fields:
            number += 1

        key = f"custom_field_{number}"
        section.fields[key] = FieldSpec(enabled=True, label=f"Custom Field {number}", input_kind="text")
        log_edit("add_custom_field", f"{section_id}: {key}")
        return key

    def rename_section(self, section_id: str, title: str) -> Section:
        section = self.get_section(section_id)
        section.title = title
        return section

    def select_section(self, section_id: Optional[str]) -> None:
        """
        Focus a section in the editor (None clears the selection).

        Raises:
            SectionNotFoundError: If no section has this identifier
        """
        if section_id is not None:
            self.get_section(section_id)
        self.selected_section_id = section_id

    # -------------------------------------------------------------------------
    # Layout edits
    # -------------------------------------------------------------------------

    def set_layout_type(self, layout_type: Union[str, LayoutType]) -> None:
        """Switch the layout. Sections in categories the layout does not render are kept."""
        self.definition.layout_type = LayoutType(layout_type)
        log_edit("set_layout_type", self.definition.layout_type.value)

    def add_row(self, column_count: int) -> Row:
        """
        Append a grid row with ``column_count`` empty cells.

        Raises:
            ValueError: If column_count is not between 1 and 5
        """
        if not 1 <= column_count <= MAX_GRID_COLUMNS:
            raise ValueError(f"Grid rows take 1-{MAX_GRID_COLUMNS} columns, got {column_count}")

        row = Row(id=self._mint_id(), columns=column_count)
        self.definition.grid_rows.append(row)
        log_edit("add_row", f"{row.id} ({column_count} columns)")
        return row

    def add_custom_row(self, kind: str) -> CustomRow:
        """
        Append a custom row built from a preset.

        Args:
            kind: "header" (1 column, 100%), "sidebar" (25% + 75%) or
                  "content" (50% + 50%)

        Raises:
            ValueError: If kind is not a known preset
        """
        if kind not in CUSTOM_ROW_PRESETS:
            raise ValueError(
                f"Unknown custom row kind: {kind!r}. Valid kinds: {list(CUSTOM_ROW_PRESETS)}"
            )

        row = CustomRow(id=self._mint_id(), kind=kind)
        self.definition.custom_rows.append(row)
        for width in CUSTOM_ROW_PRESETS[kind]:
            row.columns.append(CustomColumn(id=self._mint_id(), width=width))

        log_edit("add_custom_row", f"{row.id} ({kind})")
        return row

    def update_custom_column_width(
        self, row_id: str, column_id: str, new_width: float
    ) -> Optional[CustomRow]:
        """
        Set a custom column's width and rebalance the rest of the row.

        The target width is clamped to 0-100. Every other column is scaled by
        ``(100 - new_width) / sum_of_others`` so the row still sums to 100.
        When the other columns sum to 0 they are left as they are.

        Returns:
            The updated row, or None if the row or column does not exist
        """
        row = self.definition.get_custom_row(row_id)
        column = row.get_column(column_id) if row else None
        if column is None:
            _log_warning(f"update_custom_column_width ignored: no column {row_id}:{column_id}")
            return None

        new_width = max(0.0, min(100.0, float(new_width)))
        column.width = new_width

        others = [c for c in row.columns if c.id != column_id]
        sum_of_others = sum(c.width for c in others)
        if sum_of_others > 0:
            scale = (100.0 - new_width) / sum_of_others
            for other in others:
                other.width = other.width * scale

        log_edit("update_custom_column_width", f"{row_id}:{column_id} = {new_width:g}%")
        return row


def build_starter_template(
    name: str,
    layout_type: Union[str, LayoutType] = LayoutType.SINGLE,
    id_factory: Optional[Callable[[], str]] = None,
) -> TemplateDefinition:
    """
    Build a template with the standard sections placed for a layout.

    Args:
        name: Template name
        layout_type: Layout to build for
        id_factory: Identifier factory passed to the store

    Returns:
        New TemplateDefinition
    """
    layout_type = LayoutType(layout_type)
    store = TemplateStore(TemplateDefinition(name=name), id_factory=id_factory)
    store.set_layout_type(layout_type)

    main_types = ["header", "summary", "experience", "education"]
    side_types = ["skills", "languages"]

    if layout_type == LayoutType.GRID:
        header_row = store.add_row(1)
        body_row = store.add_row(2)
        store.add_section("header", location=Location.grid(header_row.id, 0))
        for section_type in main_types[1:]:
            store.add_section(section_type, location=Location.grid(body_row.id, 0))
        for section_type in side_types:
            store.add_section(section_type, location=Location.grid(body_row.id, 1))
    elif layout_type == LayoutType.CUSTOM:
        header_row = store.add_custom_row("header")
        body_row = store.add_custom_row("sidebar")
        side_column, main_column = body_row.columns
        store.add_section("header", location=Location.custom(header_row.id, header_row.columns[0].id))
        for section_type in side_types:
            store.add_section(section_type, location=Location.custom(body_row.id, side_column.id))
        for section_type in main_types[1:]:
            store.add_section(section_type, location=Location.custom(body_row.id, main_column.id))
    else:
        side_location = "main" if layout_type == LayoutType.SINGLE else "sidebar"
        for section_type in main_types:
            store.add_section(section_type, location="main")
        for section_type in side_types:
            store.add_section(section_type, location=side_location)

    return store.definition
