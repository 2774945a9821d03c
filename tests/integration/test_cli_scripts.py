"""
Integration tests for the template editing and rendering CLIs (no browser needed).
"""

import importlib.util
from pathlib import Path

import pytest
from typer.testing import CliRunner

from resumebuilder.contexts.templating import TemplateStore, load_template_definition

SCRIPTS_PATH = Path(__file__).parents[2] / "scripts"

runner = CliRunner()


def load_script(name: str):
    spec = importlib.util.spec_from_file_location(name, SCRIPTS_PATH / f"{name}.py")
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture(scope="module")
def edit_app():
    return load_script("edit_template").app


@pytest.fixture(scope="module")
def render_app():
    return load_script("render_resume").app


@pytest.fixture
def template_path(edit_app, tmp_path):
    path = tmp_path / "modern.yaml"
    result = runner.invoke(edit_app, ["new", "Modern", str(path), "--layout", "left-sidebar"])
    assert result.exit_code == 0, result.output
    return path


@pytest.mark.integration
def test_new_template_writes_files(template_path):
    """Test 'new' writes the YAML and the flattened pair."""
    assert template_path.exists()
    assert template_path.with_suffix(".html").exists()
    assert template_path.with_suffix(".css").exists()

    template = load_template_definition(template_path)
    assert template.name == "Modern"
    assert [s.type.value for s in template.sidebar_sections] == ["skills", "languages"]


@pytest.mark.integration
def test_new_refuses_to_overwrite(edit_app, template_path):
    """Test 'new' does not replace an existing template."""
    result = runner.invoke(edit_app, ["new", "Other", str(template_path)])
    assert result.exit_code == 1


@pytest.mark.integration
def test_add_move_and_delete_section(edit_app, template_path):
    """Test section edits through the CLI persist."""
    result = runner.invoke(edit_app, ["add-section", str(template_path), "certifications", "-l", "sidebar"])
    assert result.exit_code == 0, result.output

    section = load_template_definition(template_path).sidebar_sections[-1]
    assert section.type.value == "certifications"

    result = runner.invoke(
        edit_app, ["move-section", str(template_path), section.id, "sidebar", "main", "-i", "0"]
    )
    assert result.exit_code == 0, result.output
    assert load_template_definition(template_path).main_sections[0].id == section.id

    result = runner.invoke(edit_app, ["delete-section", str(template_path), section.id])
    assert result.exit_code == 0, result.output
    assert TemplateStore(load_template_definition(template_path)).find_section(section.id) is None


@pytest.mark.integration
def test_move_from_wrong_location_fails(edit_app, template_path):
    """Test moving a section from a location that does not hold it exits with an error."""
    section_id = load_template_definition(template_path).main_sections[0].id

    result = runner.invoke(edit_app, ["move-section", str(template_path), section_id, "sidebar", "main"])
    assert result.exit_code == 1


@pytest.mark.integration
def test_toggle_field_rejects_invalid_key(edit_app, template_path):
    """Test a field key that is not a plain identifier exits with an error."""
    section_id = load_template_definition(template_path).main_sections[0].id

    result = runner.invoke(edit_app, ["toggle-field", str(template_path), section_id, "bad}}key"])
    assert result.exit_code == 1

    result = runner.invoke(edit_app, ["toggle-field", str(template_path), section_id, "linkedin"])
    assert result.exit_code == 0, result.output


@pytest.mark.integration
def test_custom_row_width(edit_app, tmp_path):
    """Test custom rows and column widths through the CLI."""
    path = tmp_path / "custom.yaml"
    runner.invoke(edit_app, ["new", "Custom", str(path), "--layout", "custom"])

    result = runner.invoke(edit_app, ["add-custom-row", str(path), "content"])
    assert result.exit_code == 0, result.output

    row = load_template_definition(path).custom_rows[-1]
    result = runner.invoke(edit_app, ["set-width", str(path), row.id, row.columns[0].id, "20"])
    assert result.exit_code == 0, result.output

    widths = [c.width for c in load_template_definition(path).custom_rows[-1].columns]
    assert widths == pytest.approx([20, 80])


@pytest.mark.integration
def test_apply_presets(edit_app, template_path):
    """Test presets are applied and unknown presets are rejected."""
    result = runner.invoke(edit_app, ["apply-presets", str(template_path), "colors_crimson", "spacing_compact"])
    assert result.exit_code == 0, result.output

    styles = load_template_definition(template_path).global_styles
    assert styles.primary_color == "#b91c1c"
    assert styles.spacing == "compact"

    result = runner.invoke(edit_app, ["apply-presets", str(template_path), "colors_neon"])
    assert result.exit_code == 1


@pytest.mark.integration
def test_show_lists_sections(edit_app, template_path):
    """Test 'show' prints every location."""
    result = runner.invoke(edit_app, ["show", str(template_path)])

    assert result.exit_code == 0, result.output
    assert "sidebar" in result.output
    assert "Work Experience" in result.output


@pytest.mark.integration
def test_render_html(render_app, template_path, fixtures_path, tmp_path):
    """Test rendering a resume to a standalone HTML file."""
    output = tmp_path / "jane.html"
    result = runner.invoke(
        render_app,
        ["html", str(fixtures_path / "sample_resume.yaml"), str(template_path), "-o", str(output)],
    )

    assert result.exit_code == 0, result.output
    page = output.read_text(encoding="utf-8")
    assert "<title>Jane Doe</title>" in page
    assert "Acme Analytics" in page
