"""Unit tests for the Resume data model, draft updates and persistence."""

import pytest
from omegaconf import OmegaConf

from resumebuilder.contexts.intake import (
    InvalidResumeFileError,
    Resume,
    ResumeValidationError,
    add_entry,
    load_resume,
    remove_entry,
    save_resume,
    update_resume_field,
)
from resumebuilder.contexts.intake.resume_data_structure import COLLECTION_TYPES, SCALAR_FIELDS


@pytest.mark.unit
def test_empty_resume_has_empty_collections():
    """Test that missing or None input gives a resume with empty collections."""
    for data in (None, {}, {"skills": None, "education": None}):
        resume = Resume.from_dict(data)
        for name in COLLECTION_TYPES:
            assert resume.collection(name) == []
        assert resume.full_name == ""


@pytest.mark.unit
def test_partial_input_is_accepted():
    """Test that a resume with only a few fields parses without error."""
    resume = Resume.from_dict({"full_name": "Jane Doe", "skills": [{"name": "Python"}]})

    assert resume.full_name == "Jane Doe"
    assert resume.email == ""
    assert len(resume.skills) == 1
    assert resume.skills[0].proficiency == 0
    assert resume.skills[0].id


@pytest.mark.unit
def test_camel_case_and_alias_keys():
    """Test that client-style keys map onto resume fields."""
    resume = Resume.from_dict(
        {
            "fullName": "Jane Doe",
            "mobileNumber": "555-0100",
            "linkedinId": "janedoe",
            "workExperience": [{"company": "Acme", "isCurrent": True, "startDate": "2021"}],
        }
    )

    assert resume.full_name == "Jane Doe"
    assert resume.phone == "555-0100"
    assert resume.linkedin == "janedoe"
    assert resume.work_experience[0].is_current is True
    assert resume.work_experience[0].start_date == "2021"


@pytest.mark.unit
def test_unknown_keys_are_ignored():
    """Test that keys outside the model do not raise."""
    resume = Resume.from_dict({"full_name": "Jane", "favorite_color": "blue"})
    assert not hasattr(resume, "favorite_color")


@pytest.mark.unit
@pytest.mark.parametrize(
    "level,expected",
    [("Beginner", 1), ("intermediate", 3), ("Advanced", 4), ("EXPERT", 5), ("2", 2), (4.6, 5), (None, 0)],
)
def test_skill_proficiency_coercion(level, expected):
    """Test word levels and numbers map onto the 0-5 scale."""
    resume = Resume.from_dict({"skills": [{"name": "Python", "level": level}]})
    assert resume.skills[0].proficiency == expected


@pytest.mark.unit
def test_language_levels():
    """Test language word levels use their own scale."""
    resume = Resume.from_dict(
        {"languages": [{"name": "Portuguese", "level": "Native"}, {"name": "German", "level": "basic"}]}
    )
    assert [lang.proficiency for lang in resume.languages] == [5, 1]


@pytest.mark.unit
def test_validation_errors_are_collected():
    """Test that every invalid value is reported together with its path."""
    with pytest.raises(ResumeValidationError) as exc_info:
        Resume.from_dict(
            {
                "skills": [{"name": "Python", "proficiency": 9}, {"name": "Go", "level": "guru"}],
                "education": "MSc",
            }
        )

    errors = exc_info.value.errors
    assert len(errors) == 3
    assert any(e.startswith("skills[0].proficiency") for e in errors)
    assert any(e.startswith("skills[1].proficiency") for e in errors)
    assert any(e.startswith("education:") for e in errors)


@pytest.mark.unit
@pytest.mark.parametrize("proficiency", ["nan", "inf", "-Infinity", "1e400", float("nan"), float("inf")])
def test_non_finite_proficiency_is_an_error(proficiency):
    """Test that nan and infinite levels are reported as field errors."""
    with pytest.raises(ResumeValidationError) as exc_info:
        Resume.from_dict({"skills": [{"name": "Python", "proficiency": proficiency}]})

    assert len(exc_info.value.errors) == 1
    assert exc_info.value.errors[0].startswith("skills[0].proficiency: expected 0-5")


@pytest.mark.unit
def test_non_mapping_entry_is_an_error():
    """Test that a bare string in a collection is reported."""
    with pytest.raises(ResumeValidationError) as exc_info:
        Resume.from_dict({"certifications": ["AWS Solutions Architect"]})
    assert "certifications[0]" in exc_info.value.errors[0]


@pytest.mark.unit
def test_list_fields_accept_comma_strings():
    """Test that technologies given as one string become a list."""
    resume = Resume.from_dict({"projects": [{"name": "ETL", "technologies": "Python, Spark ,  Airflow"}]})
    assert resume.projects[0].technologies == ["Python", "Spark", "Airflow"]


@pytest.mark.unit
def test_duplicate_entry_ids_are_reminted():
    """Test that entry ids are unique within a collection."""
    resume = Resume.from_dict({"skills": [{"id": "a", "name": "Python"}, {"id": "a", "name": "Go"}]})
    ids = [skill.id for skill in resume.skills]
    assert ids[0] == "a"
    assert len(set(ids)) == 2


@pytest.mark.unit
def test_derived_values(sample_resume):
    """Test date ranges and proficiency stars computed for templates."""
    experience = sample_resume.work_experience[0]
    assert experience.derived_values()["date_range"] == "2021-03 - Present"

    education = sample_resume.education[0]
    assert education.derived_values()["date_range"] == "2014 - 2016"

    python = sample_resume.skills[0]
    assert python.derived_values()["proficiency_stars"] == "★★★★★"
    kafka = sample_resume.skills[1]
    assert kafka.derived_values()["proficiency_stars"] == "★★★★☆"


@pytest.mark.unit
def test_to_dict_round_trip(sample_resume):
    """Test that to_dict output rebuilds an equal resume."""
    assert Resume.from_dict(sample_resume.to_dict()) == sample_resume


@pytest.mark.unit
def test_collection_unknown_name(sample_resume):
    """Test that unknown collection names raise KeyError."""
    with pytest.raises(KeyError):
        sample_resume.collection("hobbies")


@pytest.mark.unit
def test_scalar_fields_exclude_collections():
    """Test the scalar field list used for placeholders."""
    assert "full_name" in SCALAR_FIELDS
    assert "skills" not in SCALAR_FIELDS


# =============================================================================
# DRAFT UPDATES
# =============================================================================


@pytest.mark.unit
def test_update_resume_field_returns_new_resume(sample_resume):
    """Test that updates leave the original draft untouched."""
    updated = update_resume_field(sample_resume, "full_name", "Jane Q. Doe")

    assert updated.full_name == "Jane Q. Doe"
    assert sample_resume.full_name == "Jane Doe"
    assert updated.skills == sample_resume.skills


@pytest.mark.unit
def test_update_resume_field_coerces_collections(sample_resume):
    """Test that collection updates go through the same coercion as parsing."""
    updated = update_resume_field(sample_resume, "skills", [{"name": "Rust", "level": "Beginner"}])
    assert [(s.name, s.proficiency) for s in updated.skills] == [("Rust", 1)]


@pytest.mark.unit
def test_update_resume_field_rejects_unknown_field(sample_resume):
    """Test that unknown fields are validation errors."""
    with pytest.raises(ResumeValidationError):
        update_resume_field(sample_resume, "shoe_size", "42")


@pytest.mark.unit
def test_update_resume_field_rejects_invalid_value(sample_resume):
    """Test that invalid collection values are validation errors."""
    with pytest.raises(ResumeValidationError):
        update_resume_field(sample_resume, "skills", [{"name": "Rust", "proficiency": 11}])


@pytest.mark.unit
def test_add_and_remove_entry(sample_resume):
    """Test appending and removing repeatable entries."""
    added = add_entry(sample_resume, "certifications", name="CKA", issuer="CNCF")
    assert len(added.certifications) == 1
    assert added.certifications[0].name == "CKA"
    assert sample_resume.certifications == []

    removed = remove_entry(added, "certifications", added.certifications[0].id)
    assert removed.certifications == []


@pytest.mark.unit
def test_remove_missing_entry(sample_resume):
    """Test that removing an unknown entry id is a validation error."""
    with pytest.raises(ResumeValidationError):
        remove_entry(sample_resume, "skills", "does-not-exist")


@pytest.mark.unit
def test_add_entry_unknown_collection(sample_resume):
    """Test that adding to an unknown collection is a validation error."""
    with pytest.raises(ResumeValidationError):
        add_entry(sample_resume, "hobbies", name="Chess")


# =============================================================================
# PERSISTENCE
# =============================================================================


@pytest.mark.unit
def test_save_and_load(sample_resume, tmp_path):
    """Test that a saved resume loads back unchanged."""
    path = save_resume(sample_resume, tmp_path / "resumes" / "jane.yaml")

    assert path.exists()
    assert load_resume(path) == sample_resume


@pytest.mark.unit
def test_save_last_write_wins(sample_resume, tmp_path):
    """Test that a second save replaces the first wholesale."""
    path = tmp_path / "jane.yaml"
    save_resume(sample_resume, path)
    save_resume(Resume(full_name="Someone Else"), path)

    loaded = load_resume(path)
    assert loaded.full_name == "Someone Else"
    assert loaded.skills == []
    assert list(tmp_path.iterdir()) == [path]


@pytest.mark.unit
def test_load_missing_file(tmp_path):
    """Test that loading a missing file raises FileNotFoundError."""
    with pytest.raises(FileNotFoundError):
        load_resume(tmp_path / "missing.yaml")


@pytest.mark.unit
def test_load_without_root_key(tmp_path):
    """Test that YAML without the 'resume' key is rejected."""
    path = tmp_path / "bad.yaml"
    OmegaConf.save(OmegaConf.create({"full_name": "Jane"}), path)

    with pytest.raises(InvalidResumeFileError):
        load_resume(path)


@pytest.mark.unit
def test_save_and_load_text_with_dollar_braces(tmp_path):
    """Test that user text that looks like a config interpolation is stored verbatim."""
    resume = Resume.from_dict(
        {
            "summary": "Raised ${2M} seed",
            "work_experience": [{"company": "Acme", "achievements": ["Cut costs by ${x}"]}],
        }
    )

    loaded = load_resume(save_resume(resume, tmp_path / "jane.yaml"))

    assert loaded.summary == "Raised ${2M} seed"
    assert loaded.work_experience[0].achievements == ["Cut costs by ${x}"]


@pytest.mark.unit
def test_failed_save_leaves_no_temp_file(sample_resume, tmp_path, monkeypatch):
    """Test that a save which fails midway leaves the directory clean."""

    def failing_save(config, f, resolve=False):
        raise OSError("disk full")

    monkeypatch.setattr(OmegaConf, "save", failing_save)

    with pytest.raises(OSError):
        save_resume(sample_resume, tmp_path / "jane.yaml")
    assert list(tmp_path.iterdir()) == []
