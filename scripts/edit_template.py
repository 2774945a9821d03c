#!/usr/bin/env python3
"""
Template Editing CLI

Creates and edits template definitions stored as YAML. Every edit saves the
structured template and rewrites its flattened .html/.css pair.

Commands:
    new                - Create a starter template for a layout
    show               - Print a template's layout tree
    add-section        - Add a section to a location
    move-section       - Move a section between locations
    duplicate-section  - Copy a section into the same location
    delete-section     - Remove a section
    set-style          - Update a section's style attributes
    toggle-field       - Enable or disable a field of a section
    add-row            - Add a grid row
    add-custom-row     - Add a custom row (header, sidebar or content)
    set-width          - Set a custom column's width (others rebalance)
    set-layout         - Switch the layout type
    presets            - List available style presets
    apply-presets      - Apply style presets to a template

Examples:\n

    edit_template.py new "Modern" data/templates/modern.yaml --layout left-sidebar

    edit_template.py add-section data/templates/modern.yaml certifications -l sidebar

    edit_template.py move-section data/templates/modern.yaml 3f2a91c0 main sidebar -i 0

    edit_template.py apply-presets data/templates/modern.yaml colors_slate spacing_compact
"""

from pathlib import Path
from typing import List, Optional

import typer
from typing_extensions import Annotated

from resumebuilder.contexts.templating import (
    LayoutType,
    SectionType,
    TemplateStore,
    TemplateStructureError,
    apply_style_presets,
    build_starter_template,
    load_style_presets,
    load_template_definition,
    save_template_definition,
)

app = typer.Typer(
    help="Create and edit resume template definitions",
    add_completion=False,
    invoke_without_command=True,
)


@app.callback()
def main(ctx: typer.Context):
    """Show help by default when no command is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


def _load_store(template_path: Path) -> TemplateStore:
    return TemplateStore(load_template_definition(template_path))


def _save(store: TemplateStore, template_path: Path) -> None:
    try:
        save_template_definition(store.definition, template_path)
    except TemplateStructureError as e:
        typer.secho(f"✗ {e}\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
    typer.secho(f"✓ Saved {template_path}", fg=typer.colors.GREEN)


def _fail(message: str) -> None:
    typer.secho(f"Error: {message}\n", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1)


@app.command("new")
def new_command(
    name: Annotated[str, typer.Argument(help="Template name")],
    template_path: Annotated[Path, typer.Argument(help="Output template YAML path")],
    layout: Annotated[
        LayoutType,
        typer.Option("--layout", "-l", help="Layout type"),
    ] = LayoutType.SINGLE,
):
    """Create a starter template with the standard sections."""
    if template_path.exists():
        _fail(f"{template_path} already exists")
    store = TemplateStore(build_starter_template(name, layout))
    _save(store, template_path)


@app.command("show")
def show_command(
    template_path: Annotated[Path, typer.Argument(help="Template YAML file", exists=True)],
):
    """Print the layout tree with section ids and locations."""
    store = _load_store(template_path)
    definition = store.definition

    typer.secho(f"\n{definition.name}", fg=typer.colors.BLUE, bold=True)
    typer.echo(f"Layout: {definition.layout_type.value}  Category: {definition.category}")
    for location, sections in store.iter_slots():
        typer.echo(f"\n  {location}")
        for section in sections:
            enabled = ", ".join(section.enabled_fields())
            typer.echo(f"    {section.id}  {section.type.value:<15} {section.title}  [{enabled}]")
        if not sections:
            typer.echo("    (empty)")
    for row in definition.custom_rows:
        widths = " + ".join(f"{column.width:g}%" for column in row.columns)
        typer.echo(f"\n  custom row {row.id} ({row.kind}): {widths}")
    typer.echo("")


@app.command("add-section")
def add_section_command(
    template_path: Annotated[Path, typer.Argument(help="Template YAML file", exists=True)],
    section_type: Annotated[SectionType, typer.Argument(help="Section type")],
    title: Annotated[Optional[str], typer.Option("--title", "-t", help="Section title")] = None,
    location: Annotated[
        str,
        typer.Option("--location", "-l", help="sidebar, main, grid:<row>:<col> or custom:<row>:<column>"),
    ] = "main",
):
    """Add a section with the type's default fields."""
    store = _load_store(template_path)
    try:
        section = store.add_section(section_type, title=title, location=location)
    except ValueError as e:
        _fail(str(e))
    if section is None:
        _fail(f"Location {location} does not exist")
    typer.echo(f"Added {section.type.value} section {section.id}")
    _save(store, template_path)


@app.command("move-section")
def move_section_command(
    template_path: Annotated[Path, typer.Argument(help="Template YAML file", exists=True)],
    section_id: Annotated[str, typer.Argument(help="Section id")],
    from_location: Annotated[str, typer.Argument(help="Current location")],
    to_location: Annotated[str, typer.Argument(help="Destination location")],
    index: Annotated[int, typer.Option("--index", "-i", help="Position in destination")] = 0,
):
    """Move a section to another location (or another position in the same one)."""
    store = _load_store(template_path)
    try:
        moved = store.move_section(section_id, from_location, to_location, index)
    except (TemplateStructureError, ValueError) as e:
        _fail(str(e))
    if not moved:
        _fail(f"Location {to_location} does not exist")
    _save(store, template_path)


@app.command("duplicate-section")
def duplicate_section_command(
    template_path: Annotated[Path, typer.Argument(help="Template YAML file", exists=True)],
    section_id: Annotated[str, typer.Argument(help="Section id")],
):
    """Copy a section into the same location."""
    store = _load_store(template_path)
    try:
        duplicate = store.duplicate_section(section_id)
    except TemplateStructureError as e:
        _fail(str(e))
    typer.echo(f"Created {duplicate.id} ({duplicate.title})")
    _save(store, template_path)


@app.command("delete-section")
def delete_section_command(
    template_path: Annotated[Path, typer.Argument(help="Template YAML file", exists=True)],
    section_id: Annotated[str, typer.Argument(help="Section id")],
):
    """Remove a section from the template."""
    store = _load_store(template_path)
    if not store.delete_section(section_id):
        _fail(f"No section {section_id}")
    _save(store, template_path)


@app.command("set-style")
def set_style_command(
    template_path: Annotated[Path, typer.Argument(help="Template YAML file", exists=True)],
    section_id: Annotated[str, typer.Argument(help="Section id")],
    assignments: Annotated[
        List[str],
        typer.Argument(help="Style assignments, e.g. background_color=#f3f4f6 padding=12"),
    ],
):
    """Update style attributes of a section."""
    updates = {}
    for assignment in assignments:
        key, sep, value = assignment.partition("=")
        if not sep:
            _fail(f"Expected key=value, got {assignment!r}")
        updates[key] = int(value) if value.isdigit() else value

    store = _load_store(template_path)
    try:
        store.update_section_style(section_id, **updates)
    except (TemplateStructureError, ValueError) as e:
        _fail(str(e))
    _save(store, template_path)


@app.command("toggle-field")
def toggle_field_command(
    template_path: Annotated[Path, typer.Argument(help="Template YAML file", exists=True)],
    section_id: Annotated[str, typer.Argument(help="Section id")],
    field_key: Annotated[str, typer.Argument(help="Field key (e.g. linkedin)")],
    enabled: Annotated[bool, typer.Option("--enable/--disable", help="Enable or disable")] = True,
):
    """Enable or disable one field of a section."""
    store = _load_store(template_path)
    try:
        store.update_section_fields(section_id, {field_key: {"enabled": enabled}})
    except (TemplateStructureError, ValueError) as e:
        _fail(str(e))
    _save(store, template_path)


@app.command("add-row")
def add_row_command(
    template_path: Annotated[Path, typer.Argument(help="Template YAML file", exists=True)],
    columns: Annotated[int, typer.Argument(help="Number of columns", min=1, max=5)],
):
    """Add a grid row of equal columns."""
    store = _load_store(template_path)
    row = store.add_row(columns)
    typer.echo(f"Added grid row {row.id}")
    _save(store, template_path)


@app.command("add-custom-row")
def add_custom_row_command(
    template_path: Annotated[Path, typer.Argument(help="Template YAML file", exists=True)],
    kind: Annotated[str, typer.Argument(help="header, sidebar or content")],
):
    """Add a custom row from a preset."""
    store = _load_store(template_path)
    try:
        row = store.add_custom_row(kind)
    except ValueError as e:
        _fail(str(e))
    columns = ", ".join(f"{column.id} ({column.width:g}%)" for column in row.columns)
    typer.echo(f"Added custom row {row.id}: {columns}")
    _save(store, template_path)


@app.command("set-width")
def set_width_command(
    template_path: Annotated[Path, typer.Argument(help="Template YAML file", exists=True)],
    row_id: Annotated[str, typer.Argument(help="Custom row id")],
    column_id: Annotated[str, typer.Argument(help="Column id")],
    width: Annotated[float, typer.Argument(help="New width in percent")],
):
    """Set a custom column's width; the other columns are rebalanced."""
    store = _load_store(template_path)
    if store.update_custom_column_width(row_id, column_id, width) is None:
        _fail(f"No column {column_id} in custom row {row_id}")
    _save(store, template_path)


@app.command("set-layout")
def set_layout_command(
    template_path: Annotated[Path, typer.Argument(help="Template YAML file", exists=True)],
    layout: Annotated[LayoutType, typer.Argument(help="Layout type")],
):
    """Switch the layout type."""
    store = _load_store(template_path)
    store.set_layout_type(layout)
    _save(store, template_path)


@app.command("presets")
def presets_command(
    category: Annotated[
        Optional[str],
        typer.Argument(help="Category to filter (e.g., 'colors', 'spacing')"),
    ] = None,
):
    """List available style presets."""
    presets = load_style_presets()
    for name, config in presets.items():
        if category and not name.startswith(f"{category}_"):
            continue
        settings = ", ".join(f"{k}={v}" for k, v in config.items())
        typer.echo(f"  {name:<24} {settings}")


@app.command("apply-presets")
def apply_presets_command(
    template_path: Annotated[Path, typer.Argument(help="Template YAML file", exists=True)],
    preset_names: Annotated[List[str], typer.Argument(help="Preset names, applied in order")],
):
    """Apply style presets to a template (later presets override earlier ones)."""
    store = _load_store(template_path)
    try:
        apply_style_presets(store.definition, preset_names)
    except ValueError as e:
        _fail(str(e))
    _save(store, template_path)


if __name__ == "__main__":
    app()
