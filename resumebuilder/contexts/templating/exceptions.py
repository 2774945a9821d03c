"""Custom exceptions for templating context with template references."""

from pathlib import Path
from typing import Optional


class TemplateStructureError(Exception):
    """
    Exception raised when a template definition's layout tree is inconsistent.

    Attributes:
        message: Error description
        section_id: Identifier of the section involved, if any
        location: String form of the location involved, if any
    """

    def __init__(
        self,
        message: str,
        section_id: Optional[str] = None,
        location: Optional[str] = None,
    ):
        self.message = message
        self.section_id = section_id
        self.location = location

        # Build enhanced error message
        parts = [message]

        if section_id:
            parts.append(f"Section: {section_id}")

        if location:
            parts.append(f"Location: {location}")

        super().__init__("\n".join(parts))


class SectionNotFoundError(TemplateStructureError):
    """Exception raised when an edit names a section that is not where it is expected."""

    pass


class TemplatePlacementError(TemplateStructureError):
    """
    Exception raised at render time when a section has no valid placement.

    Either its stored location names a Row/Column that does not exist, or the
    section is physically found somewhere other than its stored location.
    """

    pass


class TemplateRenderError(Exception):
    """
    Exception raised when template rendering fails.

    Attributes:
        message: Error description
        type_name: Name of the section type or structure being rendered
        template_path: Path to the template file
        original_error: The original Jinja2 error
    """

    def __init__(
        self,
        message: str,
        type_name: Optional[str] = None,
        template_path: Optional[Path] = None,
        original_error: Optional[Exception] = None,
    ):
        self.message = message
        self.type_name = type_name
        self.template_path = template_path
        self.original_error = original_error

        # Build enhanced error message
        parts = [message]

        if type_name and template_path:
            parts.append(f"\nTemplate: {template_path}")
            parts.append(f"Type: {type_name}")

        if original_error:
            parts.append(f"\nOriginal error: {str(original_error)}")

        super().__init__("\n".join(parts))


class InvalidTemplateFileError(ValueError):
    """
    Exception raised when a saved template YAML file is invalid.

    Raised when the file has no 'template' root key or a value (layout type,
    section type, location) is not recognized.
    """

    pass
