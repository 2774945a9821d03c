"""
PDF processing utilities for exported documents.

Helper functions:
    page_count: Quick page count without full extraction.
"""

from io import BytesIO
from pathlib import Path
from typing import Optional, Union

from PyPDF2 import PdfReader
from PyPDF2.errors import PdfReadError


def page_count(pdf: Union[Path, bytes]) -> Optional[int]:
    """Get page count from a PDF file or in-memory PDF bytes, or None if unreadable."""
    try:
        source = BytesIO(pdf) if isinstance(pdf, (bytes, bytearray)) else str(pdf)
        reader = PdfReader(source)
        return len(reader.pages)
    except (PdfReadError, OSError, ValueError):
        return None
