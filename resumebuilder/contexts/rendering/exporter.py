"""
PDF Export Module

Converts rendered resume documents to fixed-page-size PDF using headless
Chromium through Playwright.

Each export launches its own browser and closes it on every exit path; no
browser is shared between exports. Loading waits for network idle up to a
timeout, after which the page is captured as-is, so unreachable images cannot
hang an export.
"""

import os
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, List, Optional

from dotenv import load_dotenv
from playwright.sync_api import Browser
from playwright.sync_api import TimeoutError as PlaywrightTimeoutError
from playwright.sync_api import sync_playwright

from resumebuilder.contexts.intake.resume_data_structure import Resume
from resumebuilder.contexts.rendering.exceptions import ExportError
from resumebuilder.contexts.rendering.logger import (
    _log_debug,
    _log_warning,
    log_export_failure,
    log_export_result,
    log_export_start,
)
from resumebuilder.contexts.templating.renderer import TemplateRenderer
from resumebuilder.contexts.templating.template_data_structures import TemplateDefinition
from resumebuilder.utils.pdf_processing import page_count

load_dotenv()

CHROMIUM_EXECUTABLE_PATH = os.getenv("CHROMIUM_EXECUTABLE_PATH") or None
EXPORT_LOAD_TIMEOUT_MS = int(os.getenv("EXPORT_LOAD_TIMEOUT_MS", "10000"))

# Container-friendly Chromium flags
CHROMIUM_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-gpu",
    "--no-first-run",
]


@dataclass
class ExportOptions:
    """
    Page and browser settings for one export.

    Attributes:
        page_format: Paper size understood by Chromium (e.g., "A4", "Letter")
        margin: Margin applied to all four sides (CSS length)
        print_background: Print background colors and images
        load_timeout_ms: Upper bound on waiting for network idle before capture
        executable_path: Chromium binary (None uses Playwright's bundled browser)
        browser_args: Extra Chromium command-line flags
    """

    page_format: str = "A4"
    margin: str = "0.5in"
    print_background: bool = True
    load_timeout_ms: int = EXPORT_LOAD_TIMEOUT_MS
    executable_path: Optional[str] = CHROMIUM_EXECUTABLE_PATH
    browser_args: List[str] = field(default_factory=lambda: list(CHROMIUM_ARGS))


@dataclass
class ExportResult:
    """
    Result of exporting a resume.

    Attributes:
        pdf_bytes: The PDF document
        page_count: Number of pages (None if the PDF could not be read back)
        elapsed_time: Seconds spent rendering and exporting
        output_path: Where the PDF was written (None if not written)
    """

    pdf_bytes: bytes
    page_count: Optional[int] = None
    elapsed_time: float = 0.0
    output_path: Optional[Path] = None


@contextmanager
def headless_browser(options: ExportOptions) -> Iterator[Browser]:
    """
    Launch a dedicated headless Chromium and close it on exit.

    Args:
        options: Export options (executable path and flags)

    Yields:
        Playwright Browser
    """
    with sync_playwright() as playwright:
        browser = playwright.chromium.launch(
            headless=True,
            args=options.browser_args,
            executable_path=options.executable_path,
        )
        _log_debug("Browser launched")
        try:
            yield browser
        finally:
            browser.close()
            _log_debug("Browser closed")


def export_pdf(html: str, options: Optional[ExportOptions] = None) -> bytes:
    """
    Render a standalone HTML document to PDF bytes.

    Args:
        html: Complete HTML document (markup and stylesheet merged)
        options: Export options (default: A4, 0.5in margins, backgrounds printed)

    Returns:
        PDF document bytes

    Raises:
        ExportError: If the browser cannot be launched, or the page fails to
            load or print. The original error is chained as the cause.
    """
    options = options or ExportOptions()

    try:
        with headless_browser(options) as browser:
            page = browser.new_page()
            page.set_content(html, wait_until="domcontentloaded", timeout=options.load_timeout_ms)

            # Remote images may never settle; capture whatever has loaded by the deadline
            try:
                page.wait_for_load_state("networkidle", timeout=options.load_timeout_ms)
            except PlaywrightTimeoutError:
                _log_warning(
                    f"Network not idle after {options.load_timeout_ms}ms, capturing page as loaded"
                )

            return page.pdf(
                format=options.page_format,
                print_background=options.print_background,
                margin={
                    "top": options.margin,
                    "right": options.margin,
                    "bottom": options.margin,
                    "left": options.margin,
                },
            )
    except Exception as e:
        raise ExportError(original_error=e) from e


def export_resume(
    template: TemplateDefinition,
    resume: Resume,
    output_path: Optional[Path] = None,
    options: Optional[ExportOptions] = None,
    renderer: Optional[TemplateRenderer] = None,
) -> ExportResult:
    """
    Render a resume with a template and export it to PDF.

    Nothing is cached: every call renders and launches a browser afresh.

    Args:
        template: Template definition
        resume: Resume data
        output_path: Optional path to write the PDF to
        options: Export options
        renderer: Renderer to use (default: TemplateRenderer())

    Returns:
        ExportResult with the PDF bytes and diagnostics

    Raises:
        TemplatePlacementError: If the template has a dangling placement
        ExportError: If PDF generation fails
    """
    options = options or ExportOptions()
    renderer = renderer or TemplateRenderer()
    resume_name = resume.full_name or "(unnamed)"

    log_export_start(resume_name, template.name, options)
    start_time = time.time()

    document = renderer.render(template, resume)
    try:
        pdf_bytes = export_pdf(document.to_html(renderer.registry), options)
    except ExportError as e:
        log_export_failure(resume_name, e, time.time() - start_time)
        raise

    if output_path is not None:
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_bytes(pdf_bytes)

    result = ExportResult(
        pdf_bytes=pdf_bytes,
        page_count=page_count(pdf_bytes),
        elapsed_time=time.time() - start_time,
        output_path=output_path,
    )
    log_export_result(resume_name, result, result.elapsed_time)
    return result
