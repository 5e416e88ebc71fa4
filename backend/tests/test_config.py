"""Configuration — tests for defaults and CLUSTERLINT_* environment overrides."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from clusterlint.config import Settings, get_settings
from clusterlint.core.domain_types import REQUIRED_SYSTEM_COLLECTIONS


def test_defaults():
    settings = Settings()
    assert settings.output_dir == Path(".")
    assert settings.required_system_collections == list(REQUIRED_SYSTEM_COLLECTIONS)
    assert settings.system_collection_prefix == "_"


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("CLUSTERLINT_OUTPUT_DIR", "/var/tmp/artifacts")
    monkeypatch.setenv("CLUSTERLINT_REQUIRED_SYSTEM_COLLECTIONS", '["_apps", "_graphs"]')
    monkeypatch.setenv("CLUSTERLINT_REPAIR_COMMAND", "arangosh --javascript.execute repair.js")
    settings = get_settings()
    assert settings.output_dir == Path("/var/tmp/artifacts")
    assert settings.required_system_collections == ["_apps", "_graphs"]
    assert settings.repair_command.startswith("arangosh")


def test_empty_prefix_rejected():
    with pytest.raises(ValidationError):
        Settings(system_collection_prefix="")


def test_get_settings_cached():
    assert get_settings() is get_settings()
