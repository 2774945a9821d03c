"""
Intake context logger.

Provides logging interface for intake context with automatic [intake] prefix.
All intake modules should import from this module, not from utils.logger directly.
"""

import os
from pathlib import Path

from dotenv import load_dotenv
from loguru import logger

from resumebuilder.utils.logger import setup_logger as _setup_logger

load_dotenv()

CONTEXT_PREFIX = "[intake]"


def setup_intake_logger(log_dir: Path) -> Path:
    """
    Setup logger for intake context.

    Args:
        log_dir: Directory for this intake session

    Returns:
        Path to log file
    """
    return _setup_logger(
        context_name="intake",
        log_dir=log_dir,
        extra_provenance={"LLM provider": os.getenv("LLM_PROVIDER", "openai")},
    )


# Wrapper functions with automatic [intake] prefix


def _log_info(message: str) -> None:
    """Log info message with [intake] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [intake] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [intake] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [intake] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [intake] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level intake-specific logging helpers


def log_extraction_result(source: Path, text: str) -> None:
    """Log the outcome of text extraction from an uploaded file."""
    _log_info(f"Extracted {len(text)} characters from {source.name}")
    _log_debug(f"Source: {source}")


def log_parse_result(resume, elapsed_time: float) -> None:
    """
    Log a parsed resume summary.

    Args:
        resume: Resume returned by parse_resume_text()
        elapsed_time: Time taken by the provider call and coercion
    """
    counts = {
        "experience": len(resume.work_experience),
        "education": len(resume.education),
        "skills": len(resume.skills),
        "languages": len(resume.languages),
    }
    summary = ", ".join(f"{k}: {v}" for k, v in counts.items())
    _log_success(f"Parsed resume for {resume.full_name or '(unnamed)'} ({elapsed_time:.2f}s)")
    _log_info(f"  Entries: {summary}")
