"""
Default values for ResumeBuilder template definitions.

Provides shared defaults used by:
- template_store.py (field maps for new sections, custom row presets)
- template_data_structures.py (global style defaults)

Field map keys are Resume attribute names (or derived display values such as
``date_range`` and ``proficiency_stars``) so that default templates resolve.
"""

from typing import Any, Dict, List

# Section type -> Resume collection it repeats over. Types not listed here
# (header, summary, custom) read scalar Resume fields.
SECTION_COLLECTIONS = {
    "experience": "work_experience",
    "education": "education",
    "skills": "skills",
    "certifications": "certifications",
    "projects": "projects",
    "languages": "languages",
    "references": "references",
}

DEFAULT_SECTION_TITLES = {
    "header": "Header",
    "summary": "Professional Summary",
    "experience": "Work Experience",
    "education": "Education",
    "skills": "Skills",
    "certifications": "Certifications",
    "projects": "Projects",
    "languages": "Languages",
    "references": "References",
    "custom": "Custom Section",
}


def _field(label: str, input_kind: str = "text", enabled: bool = True, required: bool = False) -> Dict[str, Any]:
    return {"enabled": enabled, "label": label, "input_kind": input_kind, "required": required}


DEFAULT_FIELD_MAPS: Dict[str, Dict[str, Dict[str, Any]]] = {
    "header": {
        "full_name": _field("Full Name", required=True),
        "professional_title": _field("Professional Title"),
        "email": _field("Email", "email", required=True),
        "phone": _field("Phone", "tel"),
        "address": _field("Address"),
        "photo_url": _field("Photo", "file"),
        "linkedin": _field("LinkedIn", "url", enabled=False),
        "website": _field("Website", "url", enabled=False),
    },
    "summary": {
        "summary": _field("Summary Text", "textarea", required=True),
    },
    "experience": {
        "company": _field("Company", required=True),
        "position": _field("Position", required=True),
        "start_date": _field("Start Date", "date"),
        "end_date": _field("End Date", "date"),
        "is_current": _field("Current Position", "checkbox"),
        "description": _field("Description", "textarea"),
        "achievements": _field("Key Achievements", "textarea", enabled=False),
    },
    "education": {
        "institution": _field("Institution", required=True),
        "degree": _field("Degree", required=True),
        "field": _field("Field of Study"),
        "start_date": _field("Start Date", "date"),
        "end_date": _field("End Date", "date"),
        "gpa": _field("GPA", "number", enabled=False),
        "honors": _field("Honors", enabled=False),
    },
    "skills": {
        "name": _field("Skill Name", required=True),
        "proficiency_stars": _field("Proficiency Level", "select"),
        "category": _field("Category", enabled=False),
    },
    "certifications": {
        "name": _field("Certification", required=True),
        "issuer": _field("Issuer"),
        "issue_date": _field("Issue Date", "date"),
        "expiry_date": _field("Expiry Date", "date", enabled=False),
        "credential_id": _field("Credential ID", enabled=False),
        "url": _field("URL", "url", enabled=False),
    },
    "projects": {
        "name": _field("Project Name", required=True),
        "description": _field("Description", "textarea"),
        "technologies": _field("Technologies"),
        "date_range": _field("Dates", enabled=False),
        "url": _field("URL", "url", enabled=False),
        "repository": _field("Repository", "url", enabled=False),
    },
    "languages": {
        "name": _field("Language", required=True),
        "proficiency_stars": _field("Proficiency", "select"),
        "certification": _field("Certification", enabled=False),
    },
    "references": {
        "name": _field("Name", required=True),
        "title": _field("Title"),
        "company": _field("Company"),
        "email": _field("Email", "email"),
        "phone": _field("Phone", "tel"),
        "relationship": _field("Relationship", enabled=False),
    },
    "custom": {
        "custom_field_1": _field("Custom Field 1"),
    },
}

# Style applied to sections created by the store
DEFAULT_SECTION_STYLE = {
    "padding": 16,
    "font_size": "base",
}

# Custom row kind -> initial column widths (percent)
CUSTOM_ROW_PRESETS: Dict[str, List[float]] = {
    "header": [100.0],
    "sidebar": [25.0, 75.0],
    "content": [50.0, 50.0],
}

# Grid rows support 1-5 equal columns (one stylesheet class per count)
MAX_GRID_COLUMNS = 5

DEFAULT_GLOBAL_STYLES = {
    "primary_color": "#6366f1",
    "secondary_color": "#8b5cf6",
    "accent_color": "#10b981",
    "font_family": "Inter",
    "font_size": "base",
    "photo_style": "circle",
    "header_style": "centered",
    "spacing": "normal",
}

# Named font sizes -> CSS values
FONT_SIZES = {
    "sm": "13px",
    "base": "15px",
    "lg": "17px",
}

# Named spacing -> section bottom margin
SPACING = {
    "compact": "0.75rem",
    "normal": "1.5rem",
    "relaxed": "2.25rem",
}


def get_default_field_map(section_type: str) -> Dict[str, Dict[str, Any]]:
    """
    Get a fresh copy of the default field map for a section type.

    Args:
        section_type: Section type value (e.g., "experience")

    Returns:
        Dict of field key -> field spec values (safe to mutate)
    """
    return {key: dict(spec) for key, spec in DEFAULT_FIELD_MAPS.get(section_type, {}).items()}
