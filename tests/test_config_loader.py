"""Tests for parley.providers.registry: TOML configuration loading."""

from pathlib import Path

import pytest

from parley.providers.registry import CONFIG_DIR, load_config
from parley.schemas.config import DEFAULT_FALLBACK_MESSAGE, AssistantConfig


class TestLoadConfig:
    def test_loads_shipped_defaults(self):
        config = load_config()
        assert isinstance(config, AssistantConfig)
        assert config.model.model == "openai/inkeep-context-gpt-4o"
        assert config.model.api_key_env == "INKEEP_API_KEY"
        assert config.model.api_base == "https://api.inkeep.com/v1"
        assert config.model.timeout == 300

    def test_shipped_defaults_path(self):
        assert (CONFIG_DIR / "defaults.toml").is_file()

    def test_assistant_section_optional(self, tmp_path: Path):
        path = tmp_path / "minimal.toml"
        path.write_text('[model]\nmodel = "gpt-4o-mini"\napi_key_env = "OPENAI_API_KEY"\n')

        config = load_config(path)

        assert config.model.api_base == ""
        assert config.model.timeout == 300
        assert config.assistant.fallback_message == DEFAULT_FALLBACK_MESSAGE

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nope.toml")

    def test_missing_model_section(self, tmp_path: Path):
        path = tmp_path / "bad.toml"
        path.write_text('[assistant]\nproduct_name = "X"\n')
        with pytest.raises(ValueError, match=r"No \[model\] section"):
            load_config(path)

    def test_invalid_value(self, tmp_path: Path):
        path = tmp_path / "bad.toml"
        path.write_text('[model]\nmodel = "m"\napi_key_env = "K"\ntimeout = -1\n')
        with pytest.raises(ValueError, match="Invalid configuration"):
            load_config(path)

    def test_custom_assistant_settings(self, tmp_path: Path):
        path = tmp_path / "custom.toml"
        path.write_text(
            '[model]\nmodel = "m"\napi_key_env = "K"\n'
            '[assistant]\nproduct_name = "Acme"\nsupport_url = "https://acme.test/help"\n'
        )
        config = load_config(path)
        assert config.assistant.product_name == "Acme"
        assert config.assistant.support_url == "https://acme.test/help"
