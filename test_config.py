"""Tests for settings parsing and reference data loading."""

import json

import pytest
from pydantic import ValidationError

from app.rules.loader import load_references
from config import Settings
from schemas import OwnerGender


class TestSettings:

    def test_defaults(self):
        settings = Settings(_env_file=None)
        assert settings.default_owner_gender == OwnerGender.MALE
        assert settings.log_level == "INFO"
        assert "http://localhost:3000" in settings.cors_origins

    @pytest.mark.parametrize("raw, expected", [
        ("http://a.test,http://b.test", ["http://a.test", "http://b.test"]),
        ('["http://a.test", "http://b.test"]', ["http://a.test", "http://b.test"]),
        ("http://a.test; http://b.test", ["http://a.test", "http://b.test"]),
        ("", []),
    ])
    def test_cors_origins_parsing(self, raw, expected):
        assert Settings(_env_file=None, cors_origins=raw).cors_origins == expected

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("FARAID_DEFAULT_OWNER_GENDER", "female")
        monkeypatch.setenv("FARAID_LOG_LEVEL", "debug")
        monkeypatch.setenv("FARAID_CORS_ORIGINS", "https://faraid.example")
        settings = Settings(_env_file=None)
        assert settings.default_owner_gender == OwnerGender.FEMALE
        assert settings.log_level == "DEBUG"
        assert settings.cors_origins == ["https://faraid.example"]

    def test_rejects_unknown_gender(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, default_owner_gender="unknown")


class TestReferences:

    def test_bundled_references_load(self):
        refs = load_references()
        assert any(r.reference == "Surah An-Nisa, verse 11" for r in refs)

    def test_invalid_reference_file_raises(self, tmp_path):
        path = tmp_path / "refs.json"
        path.write_text(json.dumps([{"title": "Missing fields"}]), encoding="utf-8")
        with pytest.raises(ValidationError):
            load_references(path)
