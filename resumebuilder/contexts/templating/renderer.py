"""
Template Renderer

Turns a TemplateDefinition into flattened markup-with-placeholders plus a
stylesheet, and fills flattened templates with Resume data.

Flattened format:
    {{field}}                            scalar placeholder
    {{#each collection}}...{{/each}}     block repeated once per collection entry

Filling is a single left-to-right pass. Substituted values are HTML-escaped and
never re-scanned, and tokens that name no known value are left as literal text.
"""

import html
import re
import time
from collections import ChainMap
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from jinja2 import TemplateError

from resumebuilder.contexts.intake.resume_data_structure import COLLECTION_TYPES, SCALAR_FIELDS, Resume
from resumebuilder.contexts.templating.defaults import FONT_SIZES, MAX_GRID_COLUMNS, SPACING
from resumebuilder.contexts.templating.exceptions import TemplatePlacementError, TemplateRenderError
from resumebuilder.contexts.templating.logger import _log_debug, log_render_result, log_render_start
from resumebuilder.contexts.templating.registries import TemplateRegistry, default_registry
from resumebuilder.contexts.templating.template_data_structures import (
    LayoutType,
    Section,
    SectionType,
    TemplateDefinition,
)
from resumebuilder.contexts.templating.template_store import TemplateStore

# {{#each collection}}body{{/each}} (not nested) or {{token}}
PLACEHOLDER_PATTERN = re.compile(
    r"\{\{#each (?P<collection>\w+)\}\}(?P<body>.*?)\{\{/each\}\}|\{\{(?P<name>\w+)\}\}",
    re.DOTALL,
)
TOKEN_PATTERN = re.compile(r"\{\{(\w+)\}\}")

# Header fields with dedicated markup; every other enabled header field is a contact item
HEADER_PHOTO_FIELD = "photo_url"
HEADER_NAME_FIELD = "full_name"
HEADER_HEADLINE_FIELD = "professional_title"

# Section style attribute -> CSS property
STYLE_PROPERTIES = {
    "background_color": "background-color",
    "text_color": "color",
    "border_radius": "border-radius",
    "padding": "padding",
    "margin": "margin",
    "font_size": "font-size",
    "font_family": "font-family",
    "text_align": "text-align",
}
PIXEL_STYLES = {"border_radius", "padding", "margin"}


@dataclass
class FlattenedTemplate:
    """
    Persisted template format: markup with placeholders plus a stylesheet.

    Attributes:
        html: Markup containing {{field}} tokens and {{#each}} blocks
        css: Stylesheet
    """

    html: str
    css: str


@dataclass
class RenderedDocument:
    """
    Markup and stylesheet with all resolvable placeholders substituted.

    Ephemeral: regenerated on every render or export request.
    """

    html: str
    css: str
    title: str = "Resume"

    def to_html(self, registry: Optional[TemplateRegistry] = None) -> str:
        """Merge markup and stylesheet into one standalone HTML document."""
        registry = registry or default_registry()
        template = registry.get_structure_template("document.html")
        return template.render(title=self.title, css=self.css, html=self.html)


# =============================================================================
# VALUE CONTEXT
# =============================================================================


def format_value(value: Any) -> str:
    """
    Convert a Resume value to display text (before escaping).

    None becomes "", booleans become "Yes"/"No", lists are comma-joined.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if isinstance(value, (list, tuple)):
        return ", ".join(format_value(v) for v in value)
    return str(value)


def build_context(resume: Resume) -> Dict[str, Any]:
    """Scalar placeholder values for a resume."""
    return {name: getattr(resume, name) for name in SCALAR_FIELDS}


def build_entry_contexts(resume: Resume) -> Dict[str, List[Dict[str, Any]]]:
    """Per-entry placeholder values for every repeatable collection."""
    contexts = {}
    for name in COLLECTION_TYPES:
        contexts[name] = [
            {**entry.to_dict(), **entry.derived_values()} for entry in resume.collection(name)
        ]
    return contexts


def _substitute_tokens(text: str, values: Mapping[str, Any]) -> str:
    def replace_token(match: re.Match) -> str:
        name = match.group(1)
        if name not in values:
            return match.group(0)
        return html.escape(format_value(values[name]), quote=True)

    return TOKEN_PATTERN.sub(replace_token, text)


def fill_placeholders(
    markup: str,
    values: Mapping[str, Any],
    collections: Mapping[str, List[Mapping[str, Any]]],
) -> str:
    """
    Expand each-blocks and substitute tokens in one pass.

    Args:
        markup: Flattened markup
        values: Scalar values available everywhere
        collections: Collection name -> list of entry values

    Returns:
        Filled markup. Unknown tokens and each-blocks over unknown collections
        are left unchanged.
    """

    def replace(match: re.Match) -> str:
        name = match.group("name")
        if name is not None:
            if name not in values:
                return match.group(0)
            return html.escape(format_value(values[name]), quote=True)

        collection = match.group("collection")
        if collection not in collections:
            return match.group(0)

        body = match.group("body")
        return "".join(
            _substitute_tokens(body, ChainMap(entry, values)) for entry in collections[collection]
        )

    return PLACEHOLDER_PATTERN.sub(replace, markup)


# =============================================================================
# RENDERER
# =============================================================================


class TemplateRenderer:
    """
    Renders template definitions to flattened markup and fills them with resume data.

    Section markup is produced by per-type Jinja2 templates and composed by the
    layout template; the stylesheet comes from the global styles.
    """

    def __init__(self, registry: Optional[TemplateRegistry] = None):
        self.registry = registry or default_registry()

    def _render_jinja(self, template, type_name: str, **context) -> str:
        try:
            return template.render(**context)
        except TemplateError as e:
            raise TemplateRenderError(
                f"Failed to render {type_name}",
                type_name=type_name,
                template_path=Path(template.filename) if template.filename else None,
                original_error=e,
            ) from e

    @staticmethod
    def section_style(section: Section) -> str:
        """Inline CSS declarations for a section's style attributes."""
        style = section.style
        declarations = []
        for attribute, css_property in STYLE_PROPERTIES.items():
            value = getattr(style, attribute)
            if value is None or value == "":
                continue
            if attribute in PIXEL_STYLES:
                value = f"{value}px"
                if attribute == "margin":
                    value = f"{value} 0"
            elif attribute == "font_size":
                value = FONT_SIZES.get(value, value)
            declarations.append(f"{css_property}: {value}")

        if style.border_width:
            declarations.append(f"border: {style.border_width}px solid {style.border_color or 'currentColor'}")

        return "; ".join(declarations) + (";" if declarations else "")

    def render_section(self, section: Section, template: TemplateDefinition) -> str:
        """
        Render one section to markup with placeholders.

        Header sections emit the inline contact list; every other type emits
        label/value pairs. Disabled fields are omitted.
        """
        enabled = [(key, spec) for key, spec in section.fields.items() if spec.enabled]
        style = self.section_style(section)

        if section.type == SectionType.HEADER:
            keys = {key for key, _ in enabled}
            photo_spec = section.fields.get(HEADER_PHOTO_FIELD)
            return self._render_jinja(
                self.registry.get_template("header"),
                "header",
                section=section,
                style=style,
                photo=HEADER_PHOTO_FIELD if HEADER_PHOTO_FIELD in keys else None,
                photo_label=photo_spec.label if photo_spec else "",
                photo_style=template.global_styles.photo_style,
                name=HEADER_NAME_FIELD if HEADER_NAME_FIELD in keys else None,
                headline=HEADER_HEADLINE_FIELD if HEADER_HEADLINE_FIELD in keys else None,
                contacts=[
                    (key, spec)
                    for key, spec in enabled
                    if key not in (HEADER_PHOTO_FIELD, HEADER_NAME_FIELD, HEADER_HEADLINE_FIELD)
                ],
            )

        return self._render_jinja(
            self.registry.get_template("field_list"),
            "field_list",
            section=section,
            style=style,
            fields=enabled,
            collection=section.type.collection,
        )

    def validate_placements(self, template: TemplateDefinition) -> None:
        """
        Check that every section sits where its stored location says.

        Raises:
            TemplatePlacementError: If a stored location names a missing
                Row/Column or disagrees with where the section is found
        """
        store = TemplateStore(template)
        for location, sections in store.iter_slots():
            for section in sections:
                if section.location == location:
                    continue
                if store.slot(section.location) is None:
                    raise TemplatePlacementError(
                        "Missing placement: section references a row/column that does not exist",
                        section_id=section.id,
                        location=str(section.location),
                    )
                raise TemplatePlacementError(
                    f"Missing placement: section stored at {section.location} is found at {location}",
                    section_id=section.id,
                    location=str(section.location),
                )

    def render_stylesheet(self, template: TemplateDefinition) -> str:
        styles = template.global_styles
        return self._render_jinja(
            self.registry.get_structure_template("stylesheet.css"),
            "stylesheet",
            styles=styles,
            font_size=FONT_SIZES.get(styles.font_size, styles.font_size),
            spacing=SPACING.get(styles.spacing, styles.spacing),
            max_grid_columns=MAX_GRID_COLUMNS,
        )

    def render_layout(self, template: TemplateDefinition) -> str:
        """
        Compose section markup according to the layout type.

        Only the placements the layout renders are emitted: single renders
        main, sidebars render sidebar and main, grid renders grid rows and
        custom renders custom rows.
        """

        def sections(items: List[Section]) -> List[str]:
            return [self.render_section(section, template) for section in items]

        layout = template.layout_type
        regions = []
        grid_rows = []
        custom_rows = []

        if layout == LayoutType.SINGLE:
            regions = [{"css_class": "main-content", "sections": sections(template.main_sections)}]
        elif layout in (LayoutType.LEFT_SIDEBAR, LayoutType.RIGHT_SIDEBAR):
            sidebar = {"css_class": "sidebar", "sections": sections(template.sidebar_sections)}
            main = {"css_class": "main-content", "sections": sections(template.main_sections)}
            regions = [sidebar, main] if layout == LayoutType.LEFT_SIDEBAR else [main, sidebar]
        elif layout == LayoutType.GRID:
            grid_rows = [
                {"column_count": row.columns, "cells": [sections(cell) for cell in row.cells]}
                for row in template.grid_rows
            ]
        elif layout == LayoutType.CUSTOM:
            custom_rows = [
                {
                    "kind": row.kind,
                    "column_list": [
                        {"width": f"{column.width:g}", "sections": sections(column.sections)}
                        for column in row.columns
                    ],
                }
                for row in template.custom_rows
            ]

        return self._render_jinja(
            self.registry.get_structure_template("layout.html"),
            "layout",
            layout=layout.value,
            regions=regions,
            grid_rows=grid_rows,
            custom_rows=custom_rows,
        )

    def flatten(self, template: TemplateDefinition) -> FlattenedTemplate:
        """
        Reduce a template definition to the persisted markup + stylesheet pair.

        Raises:
            TemplatePlacementError: If the layout tree has a dangling placement
            TemplateRenderError: If a Jinja2 template fails to render
        """
        self.validate_placements(template)
        return FlattenedTemplate(
            html=self.render_layout(template),
            css=self.render_stylesheet(template),
        )

    def fill(self, flattened: FlattenedTemplate, resume: Resume) -> RenderedDocument:
        """
        Substitute resume data into a flattened template.

        Each-blocks repeat once per collection entry (none for an empty
        collection); tokens are replaced by escaped values.
        """
        markup = fill_placeholders(flattened.html, build_context(resume), build_entry_contexts(resume))
        _log_debug(f"Filled {len(flattened.html)} chars of markup for {resume.full_name or '(unnamed)'}")
        return RenderedDocument(html=markup, css=flattened.css, title=resume.full_name or "Resume")

    def render(self, template: TemplateDefinition, resume: Resume) -> RenderedDocument:
        """Render a template definition with resume data (flatten, then fill)."""
        start_time = time.time()
        log_render_start(
            template.name,
            template.layout_type.value,
            len(TemplateStore(template).all_sections()),
        )

        document = self.fill(self.flatten(template), resume)

        log_render_result(template.name, document, time.time() - start_time)
        return document
