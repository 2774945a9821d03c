"""
Resume Data Structure

Defines the canonical structured representation of one person's resume.
This structure is the interface between the Intake context (manual entry, AI
parsing) and the Templating context (rendering).

Construction is deliberately tolerant: AI-parsed input is partial and loosely
typed, so every field is optional and every repeatable collection defaults to
an empty list. Only values that cannot be coerced raise ResumeValidationError.
"""

import math
import re
import tempfile
import uuid
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional, Type

from omegaconf import OmegaConf

from resumebuilder.contexts.intake.exceptions import InvalidResumeFileError, ResumeValidationError

PROFICIENCY_MAX = 5

# Word levels produced by forms and AI parsing, mapped onto the 0-5 scale
SKILL_LEVELS = {"beginner": 1, "intermediate": 3, "advanced": 4, "expert": 5}
LANGUAGE_LEVELS = {"basic": 1, "conversational": 3, "fluent": 4, "native": 5}

# Alternate key spellings accepted on input (after camelCase -> snake_case)
KEY_ALIASES = {
    "mobile_number": "phone",
    "phone_number": "phone",
    "linkedin_id": "linkedin",
    "linkedin_url": "linkedin",
    "photo": "photo_url",
    "hobbies": "interests",
    "level": "proficiency",
    "field_of_study": "field",
    "title_text": "title",
}

_TRUE_STRINGS = {"true", "yes", "y", "1", "present", "current"}


def new_entry_id() -> str:
    """Mint a short identifier for a repeatable entry."""
    return uuid.uuid4().hex[:8]


def _snake_case(key: str) -> str:
    """Convert camelCase keys (as produced by the web client) to snake_case."""
    return re.sub(r"(?<!^)(?=[A-Z])", "_", key).lower()


def _normalize_keys(data: Dict[str, Any]) -> Dict[str, Any]:
    normalized = {}
    for key, value in data.items():
        snake = _snake_case(str(key))
        normalized[KEY_ALIASES.get(snake, snake)] = value
    return normalized


def _coerce_str(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return ", ".join(str(v) for v in value if v is not None)
    return str(value).strip()


def _coerce_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    return bool(value)


def _coerce_str_list(value: Any) -> List[str]:
    if value is None or value == "":
        return []
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    if isinstance(value, (list, tuple)):
        return [str(v).strip() for v in value if v is not None and str(v).strip()]
    return [str(value)]


def _coerce_proficiency(value: Any, levels: Dict[str, int], path: str, errors: List[str]) -> int:
    raw = value
    if value is None or value == "":
        return 0
    if isinstance(value, bool):
        errors.append(f"{path}: expected 0-{PROFICIENCY_MAX}, got {value!r}")
        return 0
    if isinstance(value, str):
        text = value.strip().lower()
        if text in levels:
            return levels[text]
        try:
            value = float(text)
        except ValueError:
            errors.append(
                f"{path}: expected 0-{PROFICIENCY_MAX} or one of {sorted(levels)}, got {value!r}"
            )
            return 0
    # float() also accepts nan and inf
    if isinstance(value, float) and math.isfinite(value):
        value = int(round(value))
    if isinstance(value, int) and 0 <= value <= PROFICIENCY_MAX:
        return value
    errors.append(f"{path}: expected 0-{PROFICIENCY_MAX}, got {raw!r}")
    return 0


# =============================================================================
# REPEATABLE ENTRIES
# =============================================================================


@dataclass
class ResumeEntry:
    """
    Base for repeatable resume entries.

    The ``id`` is a list key for UI stability only; it carries no relational
    identity and is minted when absent.
    """

    id: str = field(default_factory=new_entry_id)

    # Proficiency word scale for entries that have a proficiency field
    _levels = {}

    @classmethod
    def from_dict(cls, data: Any, path: str, errors: List[str]) -> "ResumeEntry":
        """
        Build an entry from loosely-typed input, collecting coercion errors.

        Args:
            data: Mapping of entry values (non-mappings are reported as errors)
            path: Field path used in error messages (e.g., "skills[2]")
            errors: List that receives field-level error messages

        Returns:
            Entry instance (with defaults where values were missing or invalid)
        """
        if not isinstance(data, dict):
            errors.append(f"{path}: expected a mapping, got {type(data).__name__}")
            return cls()

        data = _normalize_keys(data)
        values = {}
        for f in fields(cls):
            if f.name == "id":
                entry_id = _coerce_str(data.get("id"))
                if entry_id:
                    values["id"] = entry_id
                continue
            raw = data.get(f.name)
            if f.name == "proficiency":
                values[f.name] = _coerce_proficiency(raw, cls._levels, f"{path}.{f.name}", errors)
            elif f.type is bool:
                values[f.name] = _coerce_bool(raw)
            elif f.type == List[str]:
                values[f.name] = _coerce_str_list(raw)
            else:
                values[f.name] = _coerce_str(raw)
        return cls(**values)

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: _copy_value(getattr(self, f.name)) for f in fields(self)}

    def derived_values(self) -> Dict[str, str]:
        """Display values computed from several fields, available as placeholders."""
        return {}


def _date_range(start: str, end: str, is_current: bool = False) -> str:
    end_text = "Present" if is_current else end
    if start and end_text:
        return f"{start} - {end_text}"
    return start or end_text


def _stars(proficiency: int) -> str:
    return "★" * proficiency + "☆" * (PROFICIENCY_MAX - proficiency)


@dataclass
class WorkExperience(ResumeEntry):
    company: str = ""
    position: str = ""
    location: str = ""
    start_date: str = ""
    end_date: str = ""
    is_current: bool = False
    description: str = ""
    achievements: List[str] = field(default_factory=list)

    def derived_values(self) -> Dict[str, str]:
        return {"date_range": _date_range(self.start_date, self.end_date, self.is_current)}


@dataclass
class Education(ResumeEntry):
    institution: str = ""
    degree: str = ""
    field: str = ""
    start_date: str = ""
    end_date: str = ""
    gpa: str = ""
    honors: str = ""
    description: str = ""

    def derived_values(self) -> Dict[str, str]:
        return {"date_range": _date_range(self.start_date, self.end_date)}


@dataclass
class Skill(ResumeEntry):
    name: str = ""
    proficiency: int = 0
    category: str = ""

    _levels = SKILL_LEVELS

    def derived_values(self) -> Dict[str, str]:
        return {"proficiency_stars": _stars(self.proficiency)}


@dataclass
class Certification(ResumeEntry):
    name: str = ""
    issuer: str = ""
    issue_date: str = ""
    expiry_date: str = ""
    credential_id: str = ""
    url: str = ""


@dataclass
class Project(ResumeEntry):
    name: str = ""
    description: str = ""
    technologies: List[str] = field(default_factory=list)
    start_date: str = ""
    end_date: str = ""
    url: str = ""
    repository: str = ""

    def derived_values(self) -> Dict[str, str]:
        return {"date_range": _date_range(self.start_date, self.end_date)}


@dataclass
class Language(ResumeEntry):
    name: str = ""
    proficiency: int = 0
    certification: str = ""

    _levels = LANGUAGE_LEVELS

    def derived_values(self) -> Dict[str, str]:
        return {"proficiency_stars": _stars(self.proficiency)}


@dataclass
class Reference(ResumeEntry):
    name: str = ""
    title: str = ""
    company: str = ""
    email: str = ""
    phone: str = ""
    relationship: str = ""


# Collection attribute name -> entry type
COLLECTION_TYPES: Dict[str, Type[ResumeEntry]] = {
    "work_experience": WorkExperience,
    "education": Education,
    "skills": Skill,
    "certifications": Certification,
    "projects": Project,
    "languages": Language,
    "references": Reference,
}


def _copy_value(value: Any) -> Any:
    return list(value) if isinstance(value, list) else value


# =============================================================================
# RESUME
# =============================================================================


@dataclass
class Resume:
    """
    Structured resume for one profile.

    Attributes:
        title: Document title shown in listings (not rendered by default templates)
        full_name ... date_of_birth: Identity and contact fields
        summary, highlights, affiliations, interests, additional_info: Free text
        work_experience ... references: Ordered repeatable collections, never None
    """

    title: str = ""
    full_name: str = ""
    professional_title: str = ""
    email: str = ""
    phone: str = ""
    address: str = ""
    linkedin: str = ""
    website: str = ""
    photo_url: str = ""
    date_of_birth: str = ""

    summary: str = ""
    highlights: str = ""
    affiliations: str = ""
    interests: str = ""
    additional_info: str = ""

    work_experience: List[WorkExperience] = field(default_factory=list)
    education: List[Education] = field(default_factory=list)
    skills: List[Skill] = field(default_factory=list)
    certifications: List[Certification] = field(default_factory=list)
    projects: List[Project] = field(default_factory=list)
    languages: List[Language] = field(default_factory=list)
    references: List[Reference] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "Resume":
        """
        Build a Resume from partial, loosely-typed data.

        Unknown keys are ignored, missing keys take defaults, None collections
        become empty lists and camelCase keys are accepted.

        Args:
            data: Resume-shaped mapping (may be None or empty)

        Returns:
            Resume instance

        Raises:
            ResumeValidationError: If any value cannot be coerced (all field
                errors are reported together)
        """
        data = _normalize_keys(data or {})
        errors: List[str] = []
        values: Dict[str, Any] = {}

        for name in SCALAR_FIELDS:
            values[name] = _coerce_str(data.get(name))

        for name, entry_type in COLLECTION_TYPES.items():
            raw = data.get(name)
            if raw is None:
                values[name] = []
                continue
            if not isinstance(raw, (list, tuple)):
                errors.append(f"{name}: expected a list, got {type(raw).__name__}")
                values[name] = []
                continue
            entries = [
                entry_type.from_dict(item, f"{name}[{i}]", errors) for i, item in enumerate(raw)
            ]
            values[name] = _dedupe_ids(entries)

        if errors:
            raise ResumeValidationError(errors)

        return cls(**values)

    def to_dict(self) -> Dict[str, Any]:
        """Serializable representation (plain dicts, lists and strings)."""
        result: Dict[str, Any] = {name: getattr(self, name) for name in SCALAR_FIELDS}
        for name in COLLECTION_TYPES:
            result[name] = [entry.to_dict() for entry in getattr(self, name)]
        return result

    def collection(self, name: str) -> List[ResumeEntry]:
        """Return the repeatable collection called ``name``."""
        if name not in COLLECTION_TYPES:
            raise KeyError(f"Unknown resume collection: {name!r}")
        return getattr(self, name)


SCALAR_FIELDS = [f.name for f in fields(Resume) if f.name not in COLLECTION_TYPES]


def _dedupe_ids(entries: List[ResumeEntry]) -> List[ResumeEntry]:
    seen = set()
    for entry in entries:
        while entry.id in seen:
            entry.id = new_entry_id()
        seen.add(entry.id)
    return entries


# =============================================================================
# DRAFT UPDATES
# =============================================================================


def update_resume_field(resume: Resume, field_name: str, value: Any) -> Resume:
    """
    Return a new Resume with one field replaced.

    This is the single update path for drafts: the value is re-coerced through
    Resume.from_dict, so the result obeys the same invariants as parsed data.

    Args:
        resume: Current draft
        field_name: Scalar field or collection name
        value: New value (collections take a list of entry mappings)

    Returns:
        Updated Resume (the input is not modified)

    Raises:
        ResumeValidationError: If the field is unknown or the value is invalid
    """
    if field_name not in SCALAR_FIELDS and field_name not in COLLECTION_TYPES:
        raise ResumeValidationError([f"{field_name}: unknown resume field"])

    data = resume.to_dict()
    data[field_name] = value
    return Resume.from_dict(data)


def add_entry(resume: Resume, collection: str, **values: Any) -> Resume:
    """Return a new Resume with an entry appended to ``collection``."""
    if collection not in COLLECTION_TYPES:
        raise ResumeValidationError([f"{collection}: unknown resume collection"])

    data = resume.to_dict()
    data[collection].append(values)
    return Resume.from_dict(data)


def remove_entry(resume: Resume, collection: str, entry_id: str) -> Resume:
    """Return a new Resume without the entry ``entry_id`` in ``collection``."""
    if collection not in COLLECTION_TYPES:
        raise ResumeValidationError([f"{collection}: unknown resume collection"])

    data = resume.to_dict()
    remaining = [entry for entry in data[collection] if entry["id"] != entry_id]
    if len(remaining) == len(data[collection]):
        raise ResumeValidationError([f"{collection}: no entry with id {entry_id!r}"])
    data[collection] = remaining
    return Resume.from_dict(data)


# =============================================================================
# PERSISTENCE
# =============================================================================


def save_resume(resume: Resume, path: Path) -> Path:
    """
    Save a resume as YAML, superseding any previous file at ``path``.

    Last write wins: the file is replaced wholesale, never merged. The new
    content is written to a temporary file first and moved into place.

    Args:
        resume: Resume to persist
        path: Destination YAML path

    Returns:
        Path to the written file
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    config = OmegaConf.create({"resume": resume.to_dict()})

    with tempfile.NamedTemporaryFile(
        "w", dir=path.parent, suffix=".yaml", delete=False, encoding="utf-8"
    ) as tmp:
        try:
            OmegaConf.save(config, tmp)
        except Exception:
            tmp.close()
            Path(tmp.name).unlink()
            raise
    Path(tmp.name).replace(path)
    return path


def load_resume(path: Path) -> Resume:
    """
    Load a resume saved by save_resume().

    Raises:
        FileNotFoundError: If path does not exist
        InvalidResumeFileError: If the YAML has no 'resume' root key
        ResumeValidationError: If stored values cannot be coerced
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Resume file not found: {path}")

    data = OmegaConf.to_container(OmegaConf.load(path), resolve=False)
    if not isinstance(data, dict) or "resume" not in data:
        raise InvalidResumeFileError(f"Invalid resume file: missing 'resume' key in {path}")

    return Resume.from_dict(data["resume"])
