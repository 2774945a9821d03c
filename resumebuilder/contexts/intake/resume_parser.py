"""
AI resume parsing.

Converts raw resume text into a Resume with a single LLM call. The result is
best-effort: any field may be missing, and callers fall back to manual entry
when parsing fails.
"""

import json
import time
from pathlib import Path
from typing import Optional, Union

from resumebuilder.contexts.intake.exceptions import ResumeParsingError, ResumeValidationError
from resumebuilder.contexts.intake.file_parser import extract_text
from resumebuilder.contexts.intake.logger import (
    _log_debug,
    _log_error,
    _log_info,
    _log_warning,
    log_parse_result,
)
from resumebuilder.contexts.intake.resume_data_structure import Resume
from resumebuilder.utils.llm import LLMProvider, get_provider, parse_json_object

# Providers only see the head of very long documents
MAX_INPUT_CHARS = 20000

# =============================================================================
# PROMPT TEMPLATES
# =============================================================================

_SYSTEM_PROMPT = """\
You are a resume parsing assistant. Extract structured data from the resume text provided.
Return ONLY a JSON object matching the requested schema. Use empty strings or empty lists
for anything you cannot find. Never invent information that is not in the text."""

_USER_PROMPT_TEMPLATE = """\
Extract this resume into a JSON object with the following structure:

{schema_json}

Skill levels must be one of: Beginner, Intermediate, Advanced, Expert.
Language levels must be one of: Basic, Conversational, Fluent, Native.

---
Resume:
{content}"""

_SCHEMA = {
    "full_name": "",
    "professional_title": "",
    "email": "",
    "phone": "",
    "address": "",
    "linkedin": "",
    "website": "",
    "date_of_birth": "",
    "summary": "",
    "highlights": "",
    "affiliations": "",
    "interests": "",
    "work_experience": [
        {
            "company": "",
            "position": "",
            "location": "",
            "start_date": "",
            "end_date": "",
            "is_current": False,
            "description": "",
            "achievements": [],
        }
    ],
    "education": [
        {
            "institution": "",
            "degree": "",
            "field": "",
            "start_date": "",
            "end_date": "",
            "gpa": "",
            "honors": "",
        }
    ],
    "skills": [{"name": "", "level": "Intermediate", "category": ""}],
    "certifications": [{"name": "", "issuer": "", "issue_date": "", "expiry_date": ""}],
    "projects": [{"name": "", "description": "", "technologies": [], "url": ""}],
    "languages": [{"name": "", "level": "Fluent"}],
    "references": [{"name": "", "title": "", "company": "", "email": "", "phone": ""}],
}


def build_parse_prompt(raw_text: str) -> str:
    """Build the user prompt for resume extraction."""
    return _USER_PROMPT_TEMPLATE.format(
        schema_json=json.dumps(_SCHEMA, indent=2),
        content=raw_text[:MAX_INPUT_CHARS],
    )


# =============================================================================
# PARSING
# =============================================================================


def parse_resume_text(
    raw_text: str,
    provider: Optional[Union[str, LLMProvider]] = None,
    model: Optional[str] = None,
) -> Resume:
    """
    Parse raw resume text into a Resume.

    Args:
        raw_text: Text extracted from an uploaded document
        provider: Provider name ("openai" or "anthropic"), a ready LLMProvider
                  instance, or None for the LLM_PROVIDER default
        model: Model name override

    Returns:
        Partially populated Resume (every field optional)

    Raises:
        ResumeParsingError: If the provider call fails or its output cannot be
            turned into resume data. The message is generic; the cause is chained.
    """
    if not raw_text or not raw_text.strip():
        raise ResumeParsingError("Failed to parse resume: no text provided")

    start_time = time.time()

    try:
        llm = provider if isinstance(provider, LLMProvider) else get_provider(provider, model)
        _log_info(f"Parsing resume with {llm.name}")
        response = llm.generate_json(
            system_prompt=_SYSTEM_PROMPT, user_prompt=build_parse_prompt(raw_text)
        )
    except Exception as e:
        _log_error(f"Resume parsing failed: {type(e).__name__}: {e}")
        raise ResumeParsingError(original_error=e) from e

    _log_debug(f"Tokens: {response.input_tokens} in, {response.output_tokens} out")

    data = parse_json_object(response.content)
    if not data:
        _log_error("Provider response contained no JSON object")
        raise ResumeParsingError()

    try:
        resume = Resume.from_dict(data)
    except ResumeValidationError as e:
        for error in e.errors:
            _log_warning(f"  {error}")
        raise ResumeParsingError(original_error=e) from e
    except (TypeError, ValueError) as e:
        _log_error(f"Provider response has unusable values: {e}")
        raise ResumeParsingError(original_error=e) from e

    log_parse_result(resume, time.time() - start_time)
    return resume


def parse_resume_file(
    path: Path,
    provider: Optional[Union[str, LLMProvider]] = None,
    model: Optional[str] = None,
) -> Resume:
    """Extract text from an uploaded file and parse it into a Resume."""
    return parse_resume_text(extract_text(path), provider=provider, model=model)
