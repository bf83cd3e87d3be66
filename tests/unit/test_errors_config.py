"""Tests for error normalization, outcomes and settings."""

import pytest

from eacledger.config import Settings
from eacledger.errors import (
    NotFoundError,
    Outcome,
    PersistenceError,
    StorageError,
    error_message,
)


class _ApiError(Exception):
    def __init__(self) -> None:
        super().__init__("raw text")
        self.message = "duplicate key value violates unique constraint"


def test_error_message_prefers_nested_message() -> None:
    """Attribute and mapping ``message`` win over str()."""
    assert error_message(_ApiError()) == "duplicate key value violates unique constraint"
    assert error_message({"message": "The resource already exists"}) == (
        "The resource already exists"
    )


def test_error_message_falls_back_to_str_or_type() -> None:
    """Values without a message are stringified."""
    assert error_message(ValueError("boom")) == "boom"
    assert error_message(RuntimeError()) == "RuntimeError"
    assert error_message({"code": 1}) == "{'code': 1}"


def test_error_taxonomy() -> None:
    """Not-found is a persistence error; warnings default to empty."""
    err = NotFoundError("missing")

    assert isinstance(err, PersistenceError)
    assert err.warnings == []
    assert StorageError("x", warnings=["w"]).warnings == ["w"]


def test_outcome_ok() -> None:
    """Outcomes are ok only without warnings."""
    assert Outcome(value={}).ok
    assert not Outcome(value={}, warnings=["lookup failed"]).ok


def test_settings_defaults() -> None:
    """Defaults match the documented values."""
    settings = Settings(_env_file=None)

    assert settings.storage_bucket == "documents"
    assert settings.summary_top_n == 3
    assert settings.upload_max_base_length == 200
    assert settings.upload_max_ext_length == 16


def test_settings_read_prefixed_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """EAC_-prefixed variables override defaults."""
    monkeypatch.setenv("EAC_STORAGE_BUCKET", "evidence")
    monkeypatch.setenv("EAC_SUMMARY_TOP_N", "5")

    settings = Settings(_env_file=None)

    assert settings.storage_bucket == "evidence"
    assert settings.summary_top_n == 5
