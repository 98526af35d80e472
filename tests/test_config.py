"""Tests for config loading and validation."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from refinery.config import load_config
from refinery.schemas.config import CacheSettings, ProviderSettings, RefineryConfig


class TestRefineryConfig:
    """Test the RefineryConfig Pydantic model directly."""

    def test_defaults(self) -> None:
        cfg = RefineryConfig()
        assert cfg.default_domain == ""
        assert cfg.mode == "normal"
        assert cfg.platform == "generic"
        assert cfg.output_directory == "./output"
        assert cfg.cache == CacheSettings()
        assert cfg.provider.name == "openai"

    def test_domain_is_normalized(self) -> None:
        assert RefineryConfig(default_domain=" Technology ").default_domain == "technology"

    def test_unknown_domain_rejected(self) -> None:
        with pytest.raises(ValidationError, match="Unknown default_domain"):
            RefineryConfig(default_domain="astrology")

    def test_invalid_mode_rejected(self) -> None:
        with pytest.raises(ValidationError):
            RefineryConfig(mode="batch")

    def test_ttls_must_be_positive(self) -> None:
        with pytest.raises(ValidationError, match="TTLs must be positive"):
            CacheSettings(analysis_ttl=0)

    def test_provider_timeout_positive(self) -> None:
        with pytest.raises(ValidationError):
            ProviderSettings(timeout=0)


class TestLoadConfig:
    """Test loading config from YAML files."""

    def test_load_valid(self, tmp_config: Path) -> None:
        cfg = load_config(tmp_config)
        assert cfg.default_domain == "technology"
        assert cfg.platform == "gpt-4o"
        assert cfg.options.use_chain_of_thought is True
        assert cfg.options.use_persona is False

    def test_file_not_found(self) -> None:
        with pytest.raises(FileNotFoundError):
            load_config("/nonexistent/refinery.yml")

    def test_empty_file_is_all_defaults(self, tmp_path: Path) -> None:
        cfg_file = tmp_path / "empty.yml"
        cfg_file.write_text("")
        assert load_config(cfg_file) == RefineryConfig()

    def test_not_a_mapping(self, tmp_path: Path) -> None:
        cfg_file = tmp_path / "list.yml"
        cfg_file.write_text("- one\n- two\n")
        with pytest.raises(ValueError, match="YAML mapping"):
            load_config(cfg_file)

    def test_commented_out_section(self, tmp_path: Path) -> None:
        cfg_file = tmp_path / "sections.yml"
        cfg_file.write_text("mode: system\noptions:\n  # use_react: true\ncache:\n")
        cfg = load_config(cfg_file)
        assert cfg.mode == "system"
        assert cfg.options == RefineryConfig().options

    def test_invalid_yaml_values(self, tmp_path: Path) -> None:
        cfg_file = tmp_path / "bad.yml"
        cfg_file.write_text("cache:\n  optimization_ttl: -5\n")
        with pytest.raises(ValidationError):
            load_config(cfg_file)
