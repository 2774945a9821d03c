"""
Shared utilities for ResumeBuilder.

Common functionality used across contexts:
- Logger setup
- LLM provider access
- Timestamps
- Text helpers
"""

from resumebuilder.utils.timestamp import now, today

__all__ = ["now", "today"]
