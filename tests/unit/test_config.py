from __future__ import annotations

import pytest
from pydantic import ValidationError

from videoprompt.config import AppConfig
from videoprompt.generate.generate_models import SubmissionMode
from videoprompt.generate.instructions import InstructionTemplate


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("GEMINI_API_KEY", "VIDEOPROMPT_GEMINI_API_KEY", "VIDEOPROMPT_MODEL_ID"):
        monkeypatch.delenv(name, raising=False)


def test_defaults() -> None:
    config = AppConfig(_env_file=None)

    assert config.gemini_api_key is None
    assert not config.has_api_key
    assert config.model_id == "gemini-2.5-flash"
    assert config.api_version == "v1beta"
    assert config.poll_interval_seconds == 2.0
    assert config.request_timeout_seconds == 300.0
    assert config.max_upload_bytes == 100 * 1024 * 1024
    assert config.submission_mode is SubmissionMode.AUTO


def test_api_key_read_from_plain_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GEMINI_API_KEY", "secret")

    config = AppConfig(_env_file=None)

    assert config.gemini_api_key == "secret"
    assert config.has_api_key


def test_blank_api_key_counts_as_missing(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GEMINI_API_KEY", "   ")

    assert not AppConfig(_env_file=None).has_api_key


def test_prefixed_env_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("VIDEOPROMPT_MODEL_ID", "gemini-2.5-pro")
    monkeypatch.setenv("VIDEOPROMPT_INSTRUCTION_TEMPLATE", "edit_list")
    monkeypatch.setenv("VIDEOPROMPT_SUBMISSION_MODE", "upload")

    profile = AppConfig(_env_file=None).profile()

    assert profile.model_id == "gemini-2.5-pro"
    assert profile.instruction_template == InstructionTemplate.EDIT_LIST.value
    assert profile.submission_mode is SubmissionMode.UPLOAD


def test_unknown_instruction_template_is_rejected() -> None:
    with pytest.raises(ValidationError):
        AppConfig(_env_file=None, instruction_template="haiku")


def test_request_timeout_is_bounded() -> None:
    with pytest.raises(ValidationError):
        AppConfig(_env_file=None, request_timeout_seconds=5)
