"""Custom exceptions for the intake context."""

from pathlib import Path
from typing import List, Optional


class ResumeValidationError(ValueError):
    """
    Exception raised when resume data contains values that cannot be coerced.

    Attributes:
        errors: Field-level messages, each prefixed with the field path
                (e.g., "skills[1].proficiency: expected 0-5, got 9")
    """

    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__("Invalid resume data:\n" + "\n".join(f"  - {e}" for e in self.errors))


class InvalidResumeFileError(ValueError):
    """Exception raised when a saved resume YAML file lacks the 'resume' root key."""

    pass


class UnsupportedFileError(ValueError):
    """Exception raised for uploads whose format cannot be converted to text."""

    def __init__(self, path: Path, supported: List[str]):
        self.path = path
        self.supported = supported
        super().__init__(
            f"Unsupported file format: {path.suffix or path.name}. "
            f"Supported formats: {', '.join(supported)}"
        )


class EmptyDocumentError(ValueError):
    """Exception raised when an uploaded document contains no extractable text."""

    pass


class ResumeParsingError(Exception):
    """
    Exception raised when AI resume parsing fails.

    The message stays generic; the provider error is kept on ``original_error``
    and chained as the cause.
    """

    def __init__(self, message: str = "Failed to parse resume", original_error: Optional[Exception] = None):
        self.message = message
        self.original_error = original_error
        super().__init__(message)
