"""Shared fixtures for ResumeBuilder tests."""

import itertools
from pathlib import Path

import pytest

from resumebuilder.contexts.intake import load_resume

FIXTURES_PATH = Path(__file__).parent / "fixtures"


@pytest.fixture
def fixtures_path() -> Path:
    return FIXTURES_PATH


@pytest.fixture
def sample_resume():
    """Jane Doe resume with experience, education, skills and languages."""
    return load_resume(FIXTURES_PATH / "sample_resume.yaml")


@pytest.fixture
def id_factory():
    """Deterministic identifiers: id1, id2, ..."""
    counter = itertools.count(1)
    return lambda: f"id{next(counter)}"
