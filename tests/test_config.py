"""Tests for API key resolution and settings."""

from __future__ import annotations

import json

import pytest

from billing.config import DEFAULT_API_URL, get_api_key, load_settings
from billing.errors import ConfigurationMissing


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / ".schematic-mcp" / "config.json"
    path.parent.mkdir()
    return path


class TestGetApiKey:
    def test_environment_wins_and_file_is_not_read(self, config_file):
        config_file.write_text("this is not json")
        assert get_api_key({"SCHEMATIC_API_KEY": "sk_env"}, config_file) == "sk_env"

    def test_falls_back_to_config_file(self, config_file):
        config_file.write_text(json.dumps({"apiKey": "sk_file"}))
        assert get_api_key({}, config_file) == "sk_file"

    def test_empty_environment_value_falls_back(self, config_file):
        config_file.write_text(json.dumps({"apiKey": "sk_file"}))
        assert get_api_key({"SCHEMATIC_API_KEY": ""}, config_file) == "sk_file"

    def test_missing_everything_names_both_sources(self, tmp_path):
        with pytest.raises(ConfigurationMissing) as exc:
            get_api_key({}, tmp_path / "absent.json")
        assert "SCHEMATIC_API_KEY" in str(exc.value)
        assert "~/.schematic-mcp/config.json" in str(exc.value)

    @pytest.mark.parametrize("content", [
        "{not json",
        json.dumps(["sk_list"]),
        json.dumps({"apiKey": 42}),
        json.dumps({"apiKey": ""}),
        json.dumps({"other": "sk"}),
    ])
    def test_unusable_file_is_treated_as_absent(self, config_file, content):
        config_file.write_text(content)
        with pytest.raises(ConfigurationMissing):
            get_api_key({}, config_file)


class TestLoadSettings:
    def test_defaults(self, tmp_path):
        settings = load_settings({"SCHEMATIC_API_KEY": "sk"}, tmp_path / "absent.json")
        assert settings.api_key == "sk"
        assert settings.api_url == DEFAULT_API_URL
        assert settings.timeout_seconds is None

    def test_overrides(self, tmp_path):
        settings = load_settings(
            {
                "SCHEMATIC_API_KEY": "sk",
                "SCHEMATIC_API_URL": "http://localhost:8080/",
                "SCHEMATIC_TIMEOUT_SECONDS": "2.5",
            },
            tmp_path / "absent.json",
        )
        assert settings.api_url == "http://localhost:8080"
        assert settings.timeout_seconds == 2.5

    def test_bad_timeout(self, tmp_path):
        with pytest.raises(ConfigurationMissing, match="SCHEMATIC_TIMEOUT_SECONDS"):
            load_settings(
                {"SCHEMATIC_API_KEY": "sk", "SCHEMATIC_TIMEOUT_SECONDS": "soon"},
                tmp_path / "absent.json",
            )
