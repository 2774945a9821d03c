"""
Template persistence.

Templates are stored as YAML holding the structured layout tree (so they stay
editable), with the flattened markup + stylesheet pair written alongside:

    modern.yaml   structured TemplateDefinition under a 'template' root key
    modern.html   flattened markup with placeholders
    modern.css    stylesheet
"""

from pathlib import Path
from typing import Optional, Tuple

from omegaconf import OmegaConf

from resumebuilder.contexts.templating.exceptions import InvalidTemplateFileError
from resumebuilder.contexts.templating.logger import _log_info
from resumebuilder.contexts.templating.renderer import FlattenedTemplate, TemplateRenderer
from resumebuilder.contexts.templating.template_data_structures import TemplateDefinition


def flattened_paths(path: Path) -> Tuple[Path, Path]:
    """Markup and stylesheet paths stored next to a template YAML file."""
    path = Path(path)
    return path.with_suffix(".html"), path.with_suffix(".css")


def save_template_definition(
    template: TemplateDefinition,
    path: Path,
    renderer: Optional[TemplateRenderer] = None,
    write_flattened: bool = True,
) -> Path:
    """
    Save a template definition as YAML, plus its flattened pair.

    The flattened pair is rendered before anything is written, so a template
    with a dangling placement leaves existing files untouched.

    Args:
        template: Template to save
        path: Destination YAML path
        renderer: Renderer used for flattening (default: TemplateRenderer())
        write_flattened: Also write the .html/.css pair

    Returns:
        Path to the YAML file

    Raises:
        TemplatePlacementError: If the layout tree has a dangling placement
    """
    path = Path(path)
    flattened = (renderer or TemplateRenderer()).flatten(template) if write_flattened else None

    path.parent.mkdir(parents=True, exist_ok=True)
    OmegaConf.save(OmegaConf.create({"template": template.to_dict()}), path)

    if flattened is not None:
        html_path, css_path = flattened_paths(path)
        html_path.write_text(flattened.html, encoding="utf-8")
        css_path.write_text(flattened.css, encoding="utf-8")

    _log_info(f"Saved template '{template.name}' to {path}")
    return path


def load_template_definition(path: Path) -> TemplateDefinition:
    """
    Load a template definition saved by save_template_definition().

    Raises:
        FileNotFoundError: If path does not exist
        InvalidTemplateFileError: If the YAML has no 'template' root key or
            holds unrecognized values
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Template file not found: {path}")

    data = OmegaConf.to_container(OmegaConf.load(path), resolve=False)
    if not isinstance(data, dict) or "template" not in data:
        raise InvalidTemplateFileError(f"Invalid template file: missing 'template' key in {path}")

    try:
        return TemplateDefinition.from_dict(data["template"])
    except (KeyError, TypeError, ValueError) as e:
        raise InvalidTemplateFileError(f"Invalid template file {path}: {e}") from e


def load_flattened_template(path: Path) -> FlattenedTemplate:
    """
    Load the flattened pair stored next to a template YAML file.

    Raises:
        FileNotFoundError: If the .html or .css file is missing
    """
    html_path, css_path = flattened_paths(path)
    for required in (html_path, css_path):
        if not required.exists():
            raise FileNotFoundError(f"Flattened template file not found: {required}")

    return FlattenedTemplate(
        html=html_path.read_text(encoding="utf-8"),
        css=css_path.read_text(encoding="utf-8"),
    )
