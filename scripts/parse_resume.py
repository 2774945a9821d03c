#!/usr/bin/env python3
"""
Resume Upload Parsing CLI

Extracts text from uploaded resume files and parses it into structured
resume YAML with an LLM.

Commands:
    extract - Print the text extracted from a PDF/DOCX/TXT file
    parse   - Parse a file into resume YAML

Examples:\n

    parse_resume.py extract uploads/jane_doe.pdf

    parse_resume.py parse uploads/jane_doe.pdf -o data/resumes/jane.yaml

    parse_resume.py parse uploads/jane_doe.docx --provider anthropic
"""

import os
from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv
from typing_extensions import Annotated

from resumebuilder.contexts.intake import (
    EmptyDocumentError,
    ResumeParsingError,
    UnsupportedFileError,
    extract_text,
    parse_resume_text,
    save_resume,
)
from resumebuilder.contexts.intake.logger import setup_intake_logger
from resumebuilder.utils.timestamp import now

load_dotenv()
LOGS_PATH = Path(os.getenv("LOGS_PATH", "outs/logs"))


app = typer.Typer(
    help="Extract and parse uploaded resumes into structured YAML",
    add_completion=False,
    invoke_without_command=True,
)


@app.callback()
def main(ctx: typer.Context):
    """Show help by default when no command is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


def _extract_or_exit(file_path: Path) -> str:
    try:
        return extract_text(file_path)
    except (UnsupportedFileError, EmptyDocumentError) as e:
        typer.secho(f"Error: {e}\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)


@app.command("extract")
def extract_command(
    file_path: Annotated[Path, typer.Argument(help="Resume file (.pdf, .docx, .txt, .md)", exists=True)],
):
    """Print the text extracted from an uploaded resume."""
    typer.echo(_extract_or_exit(file_path))


@app.command("parse")
def parse_command(
    file_path: Annotated[Path, typer.Argument(help="Resume file (.pdf, .docx, .txt, .md)", exists=True)],
    output: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", help="Output YAML path (default: <file stem>.yaml)"),
    ] = None,
    provider: Annotated[
        Optional[str],
        typer.Option("--provider", "-p", help="LLM provider: openai or anthropic (default: LLM_PROVIDER)"),
    ] = None,
    model: Annotated[Optional[str], typer.Option("--model", "-m", help="Model override")] = None,
):
    """
    Parse an uploaded resume into structured YAML.

    When parsing fails, the resume can still be entered manually.

    Examples:\n

        $ parse_resume.py parse jane_doe.pdf                      # Writes jane_doe.yaml

        $ parse_resume.py parse jane_doe.pdf -p anthropic -o jane.yaml
    """
    setup_intake_logger(LOGS_PATH / f"intake_{now()}")

    text = _extract_or_exit(file_path)

    try:
        resume = parse_resume_text(text, provider=provider, model=model)
    except ResumeParsingError as e:
        typer.secho(f"✗ {e}. Enter the resume manually instead.\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    output = output or file_path.with_suffix(".yaml")
    save_resume(resume, output)

    typer.secho(f"✓ Parsed {resume.full_name or file_path.name}", fg=typer.colors.GREEN, bold=True)
    typer.echo(f"  Experience: {len(resume.work_experience)}, education: {len(resume.education)}")
    typer.echo(f"  Skills: {len(resume.skills)}, languages: {len(resume.languages)}")
    typer.echo(f"  Saved: {output}")


if __name__ == "__main__":
    app()
