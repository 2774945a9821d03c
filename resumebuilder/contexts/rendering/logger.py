"""
Rendering context logger.

Provides logging interface for rendering context with automatic [export] prefix.
All rendering modules should import from this module, not from utils.logger directly.
"""

import os
from pathlib import Path

from dotenv import load_dotenv
from loguru import logger

from resumebuilder.utils.logger import setup_logger as _setup_logger

load_dotenv()

CONTEXT_PREFIX = "[export]"


def setup_rendering_logger(log_dir: Path) -> Path:
    """
    Setup logger for rendering context.

    Configures loguru with provenance tracking and export-specific context.

    Args:
        log_dir: Directory for this export session

    Returns:
        Path to log file

    Example:
        from resumebuilder.contexts.rendering.logger import setup_rendering_logger, _log_info

        log_file = setup_rendering_logger(log_dir)
        _log_info("Starting export...")
    """
    return _setup_logger(
        context_name="export",
        log_dir=log_dir,
        extra_provenance={
            "Chromium": os.getenv("CHROMIUM_EXECUTABLE_PATH") or "playwright bundled",
            "Load timeout (ms)": os.getenv("EXPORT_LOAD_TIMEOUT_MS", "10000"),
        },
    )


# Wrapper functions with automatic [export] prefix


def _log_info(message: str) -> None:
    """Log info message with [export] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [export] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [export] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [export] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [export] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level rendering-specific logging helpers


def log_export_start(resume_name: str, template_name: str, options) -> None:
    """Log start of export with context."""
    _log_info(f"Starting export: {resume_name} with template '{template_name}'")
    _log_debug(f"  Format: {options.page_format}, margin: {options.margin}")
    _log_debug(f"  Load timeout: {options.load_timeout_ms}ms")


def log_export_result(
    resume_name: str,
    result,  # ExportResult
    elapsed_time: float,
) -> None:
    """
    Log a successful export.

    Args:
        resume_name: Resume identifier
        result: ExportResult from export_resume()
        elapsed_time: Time taken to render and export
    """
    pages = f"{result.page_count} page(s)" if result.page_count is not None else "unknown page count"
    _log_success(f"{resume_name}: exported {len(result.pdf_bytes)} bytes, {pages} ({elapsed_time:.2f}s)")
    if result.output_path:
        _log_info(f"  Output: {result.output_path}")


def log_export_failure(resume_name: str, error: Exception, elapsed_time: float) -> None:
    """Log a failed export with its underlying cause."""
    _log_error(f"Failed to export {resume_name} ({elapsed_time:.2f}s)")
    cause = error.__cause__ or error
    _log_error(f"  Error: {type(cause).__name__}: {cause}")
