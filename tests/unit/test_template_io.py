"""Unit tests for template persistence and style presets."""

import pytest
from omegaconf import OmegaConf

from resumebuilder.contexts.templating import (
    InvalidTemplateFileError,
    LayoutType,
    Location,
    TemplatePlacementError,
    TemplateRenderer,
    TemplateStore,
    apply_style_presets,
    build_starter_template,
    load_flattened_template,
    load_style_presets,
    load_template_definition,
    save_template_definition,
)
from resumebuilder.contexts.templating.template_io import flattened_paths


# =============================================================================
# PERSISTENCE
# =============================================================================


@pytest.mark.unit
@pytest.mark.parametrize("layout", list(LayoutType))
def test_save_and_load_template(layout, tmp_path):
    """Test a saved template loads back equal to the original."""
    template = build_starter_template("Modern", layout)
    store = TemplateStore(template)
    section = store.all_sections()[0]
    store.update_section_style(section.id, background_color="#f3f4f6")
    store.update_section_fields(section.id, {"custom_field_9": {"label": "Extra"}})

    path = save_template_definition(template, tmp_path / "templates" / "modern.yaml")

    assert load_template_definition(path) == template


@pytest.mark.unit
def test_save_and_load_text_with_dollar_braces(tmp_path):
    """Test names and titles that look like config interpolations are stored verbatim."""
    template = build_starter_template("Pitch ${deck}", LayoutType.SINGLE)
    store = TemplateStore(template)
    section = store.all_sections()[0]
    store.rename_section(section.id, "Raised ${2M}")

    loaded = load_template_definition(save_template_definition(template, tmp_path / "pitch.yaml"))

    assert loaded.name == "Pitch ${deck}"
    assert loaded.main_sections[0].title == "Raised ${2M}"
    assert loaded == template


@pytest.mark.unit
def test_save_writes_flattened_pair(tmp_path):
    """Test saving writes the markup and stylesheet next to the YAML."""
    template = build_starter_template("Modern", LayoutType.LEFT_SIDEBAR)
    path = save_template_definition(template, tmp_path / "modern.yaml")

    html_path, css_path = flattened_paths(path)
    assert html_path.name == "modern.html"
    assert css_path.name == "modern.css"

    flattened = load_flattened_template(path)
    assert flattened == TemplateRenderer().flatten(template)


@pytest.mark.unit
def test_save_without_flattened_pair(tmp_path):
    """Test the flattened pair can be skipped."""
    path = save_template_definition(build_starter_template("Plain"), tmp_path / "plain.yaml", write_flattened=False)

    assert path.exists()
    with pytest.raises(FileNotFoundError):
        load_flattened_template(path)


@pytest.mark.unit
def test_save_rejects_dangling_placement(tmp_path):
    """Test a template with a dangling placement is not written."""
    template = build_starter_template("Broken")
    template.main_sections[0].location = Location.custom("gone", "gone")
    path = tmp_path / "broken.yaml"

    with pytest.raises(TemplatePlacementError):
        save_template_definition(template, path)
    assert not path.exists()


@pytest.mark.unit
def test_load_missing_template(tmp_path):
    """Test loading a missing file raises FileNotFoundError."""
    with pytest.raises(FileNotFoundError):
        load_template_definition(tmp_path / "missing.yaml")


@pytest.mark.unit
def test_load_without_root_key(tmp_path):
    """Test YAML without the 'template' key is rejected."""
    path = tmp_path / "bad.yaml"
    OmegaConf.save(OmegaConf.create({"name": "Modern"}), path)

    with pytest.raises(InvalidTemplateFileError, match="missing 'template' key"):
        load_template_definition(path)


@pytest.mark.unit
def test_load_unknown_section_type(tmp_path):
    """Test unrecognized values are reported as invalid template files."""
    path = tmp_path / "bad.yaml"
    OmegaConf.save(
        OmegaConf.create(
            {"template": {"name": "Modern", "main_sections": [{"id": "a", "type": "hobbies"}]}}
        ),
        path,
    )

    with pytest.raises(InvalidTemplateFileError):
        load_template_definition(path)


@pytest.mark.unit
def test_load_unsafe_field_key(tmp_path):
    """Test a stored field key that would break the markup is rejected on load."""
    path = tmp_path / "bad.yaml"
    section = {"id": "a", "type": "custom", "fields": {"x\" onload=\"y": {"label": "X"}}}
    OmegaConf.save(OmegaConf.create({"template": {"name": "Modern", "main_sections": [section]}}), path)

    with pytest.raises(InvalidTemplateFileError):
        load_template_definition(path)


# =============================================================================
# STYLE PRESETS
# =============================================================================


@pytest.mark.unit
def test_load_style_presets_flattens_names():
    """Test presets are keyed by category_name."""
    presets = load_style_presets()

    assert presets["colors_slate"]["primary_color"] == "#334155"
    assert presets["spacing_compact"] == {"spacing": "compact"}
    assert "header_square_photo" in presets


@pytest.mark.unit
def test_apply_style_presets_in_order():
    """Test later presets override earlier ones."""
    template = build_starter_template("Modern")
    apply_style_presets(template, ["spacing_compact", "colors_emerald", "spacing_relaxed"])

    assert template.global_styles.spacing == "relaxed"
    assert template.global_styles.primary_color == "#047857"
    assert template.global_styles.font_family == "Inter"


@pytest.mark.unit
def test_apply_unknown_preset():
    """Test unknown preset names raise ValueError listing the options."""
    with pytest.raises(ValueError, match="not found"):
        apply_style_presets(build_starter_template("Modern"), ["colors_neon"])


@pytest.mark.unit
def test_apply_preset_with_unknown_key(tmp_path):
    """Test presets that set unknown style keys are rejected."""
    config_path = tmp_path / "presets.yaml"
    config_path.write_text("effects:\n  glow:\n    text_shadow: '0 0 4px'\n")

    with pytest.raises(ValueError, match="unknown style keys"):
        apply_style_presets(build_starter_template("Modern"), ["effects_glow"], config_path=config_path)
