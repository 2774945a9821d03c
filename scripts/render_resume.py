#!/usr/bin/env python3
"""
Resume Rendering and PDF Export CLI

Renders a resume YAML with a template YAML and exports it to PDF.

Commands:
    export  - Render and export a resume to PDF
    html    - Render a resume to a standalone HTML file (no browser needed)
    flatten - Write a template's flattened markup + stylesheet pair

Examples:\n

    render_resume.py export data/resumes/jane.yaml data/templates/modern.yaml

    render_resume.py export data/resumes/jane.yaml data/templates/modern.yaml -o jane.pdf

    render_resume.py html data/resumes/jane.yaml data/templates/modern.yaml -o jane.html

    render_resume.py flatten data/templates/modern.yaml
"""

import os
from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv
from typing_extensions import Annotated

from resumebuilder.contexts.intake import load_resume
from resumebuilder.contexts.rendering import ExportError, ExportOptions, export_resume
from resumebuilder.contexts.rendering.logger import setup_rendering_logger
from resumebuilder.contexts.templating import (
    TemplateRenderer,
    TemplateStructureError,
    load_template_definition,
)
from resumebuilder.contexts.templating.template_io import flattened_paths
from resumebuilder.utils.text_processing import slugify
from resumebuilder.utils.timestamp import now, today

load_dotenv()
LOGS_PATH = Path(os.getenv("LOGS_PATH", "outs/logs"))
RESULTS_PATH = Path(os.getenv("RESULTS_PATH", "outs/results"))


app = typer.Typer(
    help="Render resumes with templates and export them to PDF",
    add_completion=False,
    invoke_without_command=True,
)


@app.callback()
def main(ctx: typer.Context):
    """Show help by default when no command is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


@app.command("export")
def export_command(
    resume_path: Annotated[Path, typer.Argument(help="Resume YAML file", exists=True)],
    template_path: Annotated[Path, typer.Argument(help="Template YAML file", exists=True)],
    output: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", help="Output PDF path (default: dated results directory)"),
    ] = None,
    page_format: Annotated[
        str,
        typer.Option("--format", "-f", help="Paper size (A4, Letter, ...)"),
    ] = "A4",
    timeout_ms: Annotated[
        Optional[int],
        typer.Option("--timeout", "-t", help="Max milliseconds to wait for images to load", min=0),
    ] = None,
):
    """
    Render a resume and export it to PDF.

    Examples:\n

        $ render_resume.py export jane.yaml modern.yaml               # Dated results directory

        $ render_resume.py export jane.yaml modern.yaml -o jane.pdf   # Explicit output path
    """
    log_dir = LOGS_PATH / f"export_{now()}"
    setup_rendering_logger(log_dir)

    resume = load_resume(resume_path)
    template = load_template_definition(template_path)

    if output is None:
        output = RESULTS_PATH / today() / f"{slugify(resume.full_name or resume_path.stem)}.pdf"

    options = ExportOptions(page_format=page_format)
    if timeout_ms is not None:
        options.load_timeout_ms = timeout_ms

    typer.secho(f"\nExporting: {resume.full_name or resume_path.stem}", fg=typer.colors.BLUE, bold=True)
    typer.echo(f"Template: {template.name} ({template.layout_type.value})")
    typer.echo("")

    try:
        result = export_resume(template, resume, output_path=output, options=options)
    except (ExportError, TemplateStructureError) as e:
        typer.secho(f"✗ {e}\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    typer.secho("✓ Export succeeded", fg=typer.colors.GREEN, bold=True)
    if result.page_count is not None:
        typer.echo(f"  Pages: {result.page_count}")
    typer.echo(f"  PDF: {result.output_path}")
    typer.echo(f"  Log: {log_dir / 'export.log'}")


@app.command("html")
def html_command(
    resume_path: Annotated[Path, typer.Argument(help="Resume YAML file", exists=True)],
    template_path: Annotated[Path, typer.Argument(help="Template YAML file", exists=True)],
    output: Annotated[Path, typer.Option("--output", "-o", help="Output HTML path")] = Path(
        "resume.html"
    ),
):
    """Render a resume to a standalone HTML document."""
    resume = load_resume(resume_path)
    template = load_template_definition(template_path)

    try:
        document = TemplateRenderer().render(template, resume)
    except TemplateStructureError as e:
        typer.secho(f"✗ {e}\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    output.write_text(document.to_html(), encoding="utf-8")
    typer.secho(f"✓ Wrote {output}", fg=typer.colors.GREEN)


@app.command("flatten")
def flatten_command(
    template_path: Annotated[Path, typer.Argument(help="Template YAML file", exists=True)],
):
    """Write the flattened markup (.html) and stylesheet (.css) next to a template."""
    template = load_template_definition(template_path)

    try:
        flattened = TemplateRenderer().flatten(template)
    except TemplateStructureError as e:
        typer.secho(f"✗ {e}\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    html_path, css_path = flattened_paths(template_path)
    html_path.write_text(flattened.html, encoding="utf-8")
    css_path.write_text(flattened.css, encoding="utf-8")
    typer.secho(f"✓ Wrote {html_path} and {css_path}", fg=typer.colors.GREEN)


if __name__ == "__main__":
    app()
