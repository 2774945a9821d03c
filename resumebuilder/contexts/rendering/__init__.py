"""
Rendering Context

Responsibilities:
- Exports rendered resume documents to PDF through headless Chromium
- Scopes one browser per export and guarantees its teardown
- Bounds page-load waiting so slow or missing images cannot hang an export
- Writes output files and reports page counts

Owns: Browser lifecycle, PDF generation, output management
Never: Modifies template content
"""

from resumebuilder.contexts.rendering.exceptions import ExportError
from resumebuilder.contexts.rendering.exporter import (
    ExportOptions,
    ExportResult,
    export_pdf,
    export_resume,
    headless_browser,
)

__all__ = [
    "ExportOptions",
    "ExportResult",
    "ExportError",
    "export_pdf",
    "export_resume",
    "headless_browser",
]
