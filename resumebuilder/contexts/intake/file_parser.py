"""
Text extraction from uploaded resume files.

Supports PDF (pdfplumber), DOCX (python-docx) and plain text. The extracted
text is the input to parse_resume_text().
"""

from pathlib import Path

import pdfplumber
from docx import Document

from resumebuilder.contexts.intake.exceptions import EmptyDocumentError, UnsupportedFileError
from resumebuilder.contexts.intake.logger import _log_debug, log_extraction_result
from resumebuilder.utils.text_processing import set_max_consecutive_blank_lines

SUPPORTED_SUFFIXES = [".pdf", ".docx", ".txt", ".md"]


def _extract_pdf(path: Path) -> str:
    pages = []
    with pdfplumber.open(path) as pdf:
        for page in pdf.pages:
            pages.append(page.extract_text() or "")
    _log_debug(f"Read {len(pages)} PDF page(s)")
    return "\n\n".join(pages)


def _extract_docx(path: Path) -> str:
    document = Document(str(path))
    lines = [paragraph.text for paragraph in document.paragraphs]

    # Resume templates often lay out contact details and skills in tables
    for table in document.tables:
        for row in table.rows:
            cells = [cell.text.strip() for cell in row.cells if cell.text.strip()]
            if cells:
                lines.append(" | ".join(cells))

    return "\n".join(lines)


def extract_text(path: Path) -> str:
    """
    Extract plain text from an uploaded resume document.

    Args:
        path: Path to a .pdf, .docx, .txt or .md file

    Returns:
        Extracted text with runs of blank lines collapsed

    Raises:
        FileNotFoundError: If path does not exist
        UnsupportedFileError: If the suffix is not supported
        EmptyDocumentError: If no text could be extracted (e.g., scanned PDF)
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    suffix = path.suffix.lower()
    if suffix == ".pdf":
        text = _extract_pdf(path)
    elif suffix == ".docx":
        text = _extract_docx(path)
    elif suffix in (".txt", ".md"):
        text = path.read_text(encoding="utf-8", errors="replace")
    else:
        raise UnsupportedFileError(path, SUPPORTED_SUFFIXES)

    text = set_max_consecutive_blank_lines(text.strip(), max_consecutive=1)
    if not text:
        raise EmptyDocumentError(f"No text could be extracted from {path.name}")

    log_extraction_result(path, text)
    return text
