"""Unit tests for upload text extraction and AI resume parsing."""

import json

import pytest
from docx import Document

from resumebuilder.contexts.intake import (
    EmptyDocumentError,
    ResumeParsingError,
    UnsupportedFileError,
    extract_text,
    parse_resume_file,
    parse_resume_text,
)
from resumebuilder.contexts.intake.resume_parser import MAX_INPUT_CHARS, build_parse_prompt
from resumebuilder.utils import llm
from resumebuilder.utils.llm import LLMProvider, LLMResponse, get_provider, parse_json_object


class FakeProvider(LLMProvider):
    """Provider returning a canned response (or raising) without network access."""

    provider_name = "fake"
    default_model = "test"
    transient_errors = (ConnectionError,)

    def __init__(self, content: str = "", error: Exception = None, dropped_connections: int = 0):
        super().__init__()
        self.content = content
        self.error = error
        self.dropped_connections = dropped_connections
        self.prompts = []

    def _request_json(self, system_prompt: str, user_prompt: str) -> LLMResponse:
        self.prompts.append(user_prompt)
        if self.dropped_connections:
            self.dropped_connections -= 1
            raise ConnectionError("Connection reset by peer")
        if self.error is not None:
            raise self.error
        return LLMResponse(content=self.content, model=self.model, input_tokens=10, output_tokens=20)


@pytest.fixture
def no_retry_delay(monkeypatch):
    monkeypatch.setattr(llm, "LLM_MAX_RETRIES", 3)
    monkeypatch.setattr(llm, "RETRY_BASE_DELAY", 0)


PARSED = {
    "full_name": "Jane Doe",
    "email": "jane.doe@example.com",
    "work_experience": [{"company": "Acme", "position": "Engineer", "is_current": "true"}],
    "skills": [{"name": "Python", "level": "Expert"}, {"name": "SQL", "level": "Intermediate"}],
    "languages": [{"name": "English", "level": "Fluent"}],
}


# =============================================================================
# JSON RECOVERY
# =============================================================================


@pytest.mark.unit
@pytest.mark.parametrize(
    "text",
    [
        '{"a": 1}',
        '```json\n{"a": 1}\n```',
        '```\n{"a": 1}\n```',
        'Here is the data:\n{"a": 1}\nLet me know if you need more.',
    ],
)
def test_parse_json_object_variants(text):
    """Test JSON objects are recovered from common response shapes."""
    assert parse_json_object(text) == {"a": 1}


@pytest.mark.unit
@pytest.mark.parametrize("text", ["", "no json here", "[1, 2, 3]", "{broken"])
def test_parse_json_object_failure(text):
    """Test unparseable responses give an empty dict."""
    assert parse_json_object(text) == {}


# =============================================================================
# PARSING
# =============================================================================


@pytest.mark.unit
def test_parse_resume_text():
    """Test a provider response becomes a coerced Resume."""
    provider = FakeProvider(content="```json\n" + json.dumps(PARSED) + "\n```")

    resume = parse_resume_text("Jane Doe\nEngineer at Acme", provider=provider)

    assert resume.full_name == "Jane Doe"
    assert resume.work_experience[0].is_current is True
    assert [s.proficiency for s in resume.skills] == [5, 3]
    assert resume.languages[0].proficiency == 4
    assert resume.education == []
    assert "Engineer at Acme" in provider.prompts[0]


@pytest.mark.unit
def test_parse_resume_text_empty_input():
    """Test blank text fails before calling the provider."""
    provider = FakeProvider(content=json.dumps(PARSED))

    with pytest.raises(ResumeParsingError):
        parse_resume_text("   \n", provider=provider)
    assert provider.prompts == []


@pytest.mark.unit
def test_parse_resume_text_provider_error():
    """Test provider failures surface as a generic parsing error with the cause chained."""
    cause = RuntimeError("invalid api key")
    provider = FakeProvider(error=cause)

    with pytest.raises(ResumeParsingError) as exc_info:
        parse_resume_text("Jane Doe", provider=provider)

    assert str(exc_info.value) == "Failed to parse resume"
    assert exc_info.value.original_error is cause
    assert exc_info.value.__cause__ is cause


@pytest.mark.unit
def test_parse_resume_text_no_json():
    """Test a response without a JSON object is a parsing error."""
    with pytest.raises(ResumeParsingError):
        parse_resume_text("Jane Doe", provider=FakeProvider(content="I could not read this resume."))


@pytest.mark.unit
def test_parse_resume_text_invalid_values():
    """Test values that cannot be coerced are a parsing error."""
    content = json.dumps({"full_name": "Jane", "skills": [{"name": "Python", "proficiency": 42}]})

    with pytest.raises(ResumeParsingError) as exc_info:
        parse_resume_text("Jane Doe", provider=FakeProvider(content=content))
    assert exc_info.value.original_error.errors


@pytest.mark.unit
def test_parse_resume_text_unknown_provider():
    """Test an unknown provider name is reported as a parsing error."""
    with pytest.raises(ResumeParsingError) as exc_info:
        parse_resume_text("Jane Doe", provider="nonexistent")
    assert isinstance(exc_info.value.original_error, ValueError)


@pytest.mark.unit
@pytest.mark.parametrize(
    "content",
    [
        '{"full_name": "Jane", "skills": [{"name": "Go", "level": NaN}]}',
        '{"full_name": "Jane", "languages": [{"name": "English", "proficiency": Infinity}]}',
        '{"full_name": "Jane", "skills": [{"name": "Go", "level": "nan"}]}',
    ],
)
def test_parse_resume_text_non_finite_level(content):
    """Test NaN and infinite levels in a reply are a parsing error, not a crash."""
    with pytest.raises(ResumeParsingError) as exc_info:
        parse_resume_text("Jane Doe", provider=FakeProvider(content=content))

    assert str(exc_info.value) == "Failed to parse resume"
    assert "proficiency" in exc_info.value.original_error.errors[0]


# =============================================================================
# PROVIDERS
# =============================================================================


@pytest.mark.unit
def test_generate_json_retries_dropped_connections(no_retry_delay):
    """Test transient errors are retried until the provider answers."""
    provider = FakeProvider(content=json.dumps(PARSED), dropped_connections=2)

    resume = parse_resume_text("Jane Doe", provider=provider)

    assert resume.full_name == "Jane Doe"
    assert len(provider.prompts) == 3


@pytest.mark.unit
def test_generate_json_gives_up_after_max_retries(no_retry_delay):
    """Test the last transient error is raised once retries run out."""
    provider = FakeProvider(content=json.dumps(PARSED), dropped_connections=5)

    with pytest.raises(ConnectionError):
        provider.generate_json("system", "user")
    assert len(provider.prompts) == 3


@pytest.mark.unit
def test_generate_json_does_not_retry_other_errors(no_retry_delay):
    """Test non-transient errors fail on the first attempt."""
    provider = FakeProvider(error=PermissionError("invalid api key"))

    with pytest.raises(PermissionError):
        provider.generate_json("system", "user")
    assert len(provider.prompts) == 1


@pytest.mark.unit
def test_provider_model_default_and_override():
    """Test the model falls back to the provider default and sets the display name."""
    assert FakeProvider().name == "fake/test"

    provider = FakeProvider()
    provider.model = "large"
    assert provider.name == "fake/large"


@pytest.mark.unit
def test_get_provider_unknown_name():
    """Test unknown provider names list the supported ones."""
    with pytest.raises(ValueError, match="anthropic"):
        get_provider("mistral")


@pytest.mark.unit
def test_get_provider_requires_api_key(monkeypatch):
    """Test a provider without its API key is rejected before any request."""
    pytest.importorskip("openai")
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)

    with pytest.raises(ValueError, match="OPENAI_API_KEY"):
        get_provider("OpenAI")


@pytest.mark.unit
def test_build_parse_prompt_truncates():
    """Test very long documents are truncated in the prompt."""
    prompt = build_parse_prompt("x" * (MAX_INPUT_CHARS + 500))
    assert "x" * MAX_INPUT_CHARS in prompt
    assert "x" * (MAX_INPUT_CHARS + 1) not in prompt
    assert '"work_experience"' in prompt


# =============================================================================
# TEXT EXTRACTION
# =============================================================================


@pytest.mark.unit
def test_extract_text_plain(tmp_path):
    """Test plain text uploads with runs of blank lines collapsed."""
    path = tmp_path / "resume.txt"
    path.write_text("Jane Doe\n\n\n\nData Engineer\n")

    assert extract_text(path) == "Jane Doe\n\nData Engineer"


@pytest.mark.unit
def test_extract_text_docx(tmp_path):
    """Test DOCX paragraphs and table rows are extracted."""
    document = Document()
    document.add_paragraph("Jane Doe")
    document.add_paragraph("Senior Data Engineer")
    table = document.add_table(rows=1, cols=2)
    table.rows[0].cells[0].text = "Python"
    table.rows[0].cells[1].text = "Kafka"
    path = tmp_path / "resume.docx"
    document.save(str(path))

    text = extract_text(path)

    assert "Jane Doe" in text
    assert "Senior Data Engineer" in text
    assert "Python | Kafka" in text


@pytest.mark.unit
def test_extract_text_unsupported(tmp_path):
    """Test unsupported formats are rejected."""
    path = tmp_path / "resume.odt"
    path.write_bytes(b"binary")

    with pytest.raises(UnsupportedFileError, match=".odt"):
        extract_text(path)


@pytest.mark.unit
def test_extract_text_empty(tmp_path):
    """Test documents with no text are rejected."""
    path = tmp_path / "resume.md"
    path.write_text("\n\n   \n")

    with pytest.raises(EmptyDocumentError):
        extract_text(path)


@pytest.mark.unit
def test_extract_text_missing(tmp_path):
    """Test missing files raise FileNotFoundError."""
    with pytest.raises(FileNotFoundError):
        extract_text(tmp_path / "missing.pdf")


@pytest.mark.unit
def test_parse_resume_file(tmp_path):
    """Test extraction and parsing together."""
    path = tmp_path / "resume.txt"
    path.write_text("Jane Doe\njane.doe@example.com\n")

    resume = parse_resume_file(path, provider=FakeProvider(content=json.dumps(PARSED)))
    assert resume.email == "jane.doe@example.com"
