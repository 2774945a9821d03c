"""Custom exceptions for rendering context."""

from typing import Optional


class ExportError(Exception):
    """
    Exception raised when PDF export fails.

    The message stays generic ("Failed to generate PDF"); the browser or page
    error is kept on ``original_error`` and chained as the cause.
    """

    def __init__(self, message: str = "Failed to generate PDF", original_error: Optional[Exception] = None):
        self.message = message
        self.original_error = original_error
        super().__init__(message)
