"""
Templating context logger.

Provides logging interface for templating context with automatic [template] prefix.
All templating modules should import from this module, not from utils.logger directly.
"""

from pathlib import Path

from loguru import logger

from resumebuilder.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[template]"


def setup_templating_logger(log_dir: Path, phase: str = "render") -> Path:
    """
    Setup logger for templating context.

    Configures loguru with provenance tracking and templating-specific context.

    Args:
        log_dir: Directory for this templating session
        phase: Phase name for provenance ("edit" or "render")

    Returns:
        Path to log file

    Example:
        from resumebuilder.contexts.templating.logger import setup_templating_logger, _log_info

        log_file = setup_templating_logger(log_dir, phase="edit")
        _log_info("Adding section...")
    """
    return _setup_logger(
        context_name="template",
        log_dir=log_dir,
        extra_provenance={"Phase": phase},
    )


# Wrapper functions with automatic [template] prefix


def _log_info(message: str) -> None:
    """Log info message with [template] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [template] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [template] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [template] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [template] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level templating-specific logging helpers


def log_render_start(template_name: str, layout_type: str, section_count: int) -> None:
    """Log start of rendering with context."""
    _log_info(f"Rendering template '{template_name}' ({layout_type}, {section_count} sections)")


def log_render_result(template_name: str, document, elapsed_time: float) -> None:
    """
    Log rendering result.

    Args:
        template_name: Template name
        document: RenderedDocument or FlattenedTemplate
        elapsed_time: Time taken
    """
    _log_success(f"{template_name}: rendered ({elapsed_time:.3f}s)")
    _log_debug(f"  Markup: {len(document.html)} chars, stylesheet: {len(document.css)} chars")


def log_edit(operation: str, detail: str) -> None:
    """Log a structural template edit."""
    _log_debug(f"{operation}: {detail}")
