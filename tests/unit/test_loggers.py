"""Unit tests for the per-context loguru setup."""

import pytest
from loguru import logger

from resumebuilder.contexts.intake.logger import setup_intake_logger
from resumebuilder.contexts.rendering.logger import setup_rendering_logger
from resumebuilder.contexts.templating import logger as templating_logger
from resumebuilder.contexts.templating.logger import setup_templating_logger


@pytest.fixture(autouse=True)
def reset_loguru():
    yield
    logger.remove()


@pytest.mark.unit
@pytest.mark.parametrize(
    "setup, filename, provenance",
    [
        (setup_intake_logger, "intake.log", "LLM provider:"),
        (setup_rendering_logger, "export.log", "Load timeout (ms):"),
        (setup_templating_logger, "template.log", "Phase: render"),
    ],
)
def test_context_logger_writes_provenance(setup, filename, provenance, tmp_path):
    """Test each context logger creates its log file with a provenance header."""
    log_dir = tmp_path / "session"

    log_file = setup(log_dir)

    assert log_file == log_dir / filename
    content = log_file.read_text()
    assert "Working directory:" in content
    assert provenance in content


@pytest.mark.unit
def test_prefixed_messages_reach_file(tmp_path):
    """Test context wrappers prefix messages and debug output goes to the file only."""
    log_file = setup_templating_logger(tmp_path, phase="edit")

    templating_logger._log_info("Added section")
    templating_logger._log_debug("Flattened 4 sections")
    logger.complete()

    content = log_file.read_text()
    assert "Phase: edit" in content
    assert "[template] Added section" in content
    assert "[template] Flattened 4 sections" in content
