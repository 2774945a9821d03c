"""
Templating Context

Responsibilities:
- Manages template definitions (sections, field maps, styles, placements)
- Applies structural edits through the TemplateStore
- Flattens templates to markup-with-placeholders plus a stylesheet
- Fills flattened templates with Resume data
- Applies global style presets and persists templates

Owns: Template definition model, layout composition, placeholder substitution
Never: Launches a browser or writes PDF output
"""

from resumebuilder.contexts.templating.config_resolver import apply_style_presets, load_style_presets
from resumebuilder.contexts.templating.exceptions import (
    InvalidTemplateFileError,
    SectionNotFoundError,
    TemplatePlacementError,
    TemplateRenderError,
    TemplateStructureError,
)
from resumebuilder.contexts.templating.renderer import (
    FlattenedTemplate,
    RenderedDocument,
    TemplateRenderer,
)
from resumebuilder.contexts.templating.template_data_structures import (
    CustomColumn,
    CustomRow,
    FieldSpec,
    GlobalStyles,
    LayoutType,
    Location,
    Row,
    Section,
    SectionStyle,
    SectionType,
    TemplateDefinition,
)
from resumebuilder.contexts.templating.template_io import (
    load_flattened_template,
    load_template_definition,
    save_template_definition,
)
from resumebuilder.contexts.templating.template_store import TemplateStore, build_starter_template

__all__ = [
    # Data structure classes
    "TemplateDefinition",
    "Section",
    "SectionType",
    "FieldSpec",
    "SectionStyle",
    "Location",
    "Row",
    "CustomRow",
    "CustomColumn",
    "LayoutType",
    "GlobalStyles",
    # Editing
    "TemplateStore",
    "build_starter_template",
    # Rendering
    "TemplateRenderer",
    "FlattenedTemplate",
    "RenderedDocument",
    # Presets and persistence
    "apply_style_presets",
    "load_style_presets",
    "save_template_definition",
    "load_template_definition",
    "load_flattened_template",
    # Exceptions
    "TemplateStructureError",
    "SectionNotFoundError",
    "TemplatePlacementError",
    "TemplateRenderError",
    "InvalidTemplateFileError",
]
