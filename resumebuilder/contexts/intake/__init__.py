"""
Intake Context

Responsibilities:
- Defines the structured Resume data model and its draft update functions
- Extracts text from uploaded PDF/DOCX/TXT resumes
- Parses raw resume text into a Resume through an LLM provider
- Persists resumes as YAML (last write wins)

Owns: Resume data model, upload text extraction, AI parsing
Never: Makes layout or styling decisions
"""

from resumebuilder.contexts.intake.exceptions import (
    EmptyDocumentError,
    InvalidResumeFileError,
    ResumeParsingError,
    ResumeValidationError,
    UnsupportedFileError,
)
from resumebuilder.contexts.intake.file_parser import extract_text
from resumebuilder.contexts.intake.resume_data_structure import (
    Certification,
    Education,
    Language,
    Project,
    Reference,
    Resume,
    Skill,
    WorkExperience,
    add_entry,
    load_resume,
    remove_entry,
    save_resume,
    update_resume_field,
)
from resumebuilder.contexts.intake.resume_parser import parse_resume_file, parse_resume_text

__all__ = [
    # Data model
    "Resume",
    "WorkExperience",
    "Education",
    "Skill",
    "Certification",
    "Project",
    "Language",
    "Reference",
    # Draft updates and persistence
    "update_resume_field",
    "add_entry",
    "remove_entry",
    "save_resume",
    "load_resume",
    # Upload handling
    "extract_text",
    "parse_resume_text",
    "parse_resume_file",
    # Exceptions
    "ResumeValidationError",
    "InvalidResumeFileError",
    "UnsupportedFileError",
    "EmptyDocumentError",
    "ResumeParsingError",
]
