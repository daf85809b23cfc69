"""Unit tests for config.py"""

import pytest
from pydantic import ValidationError

from mdblocks.config import load_config


@pytest.fixture(autouse=True)
def _isolated(tmp_path, monkeypatch):
    """Run each test in an empty directory with no MDBLOCKS_* env vars."""
    monkeypatch.chdir(tmp_path)
    for name in ("PARSER_CONFIG", "OUTPUT_DIR", "OUTPUT_FORMAT", "LOG_LEVEL", "DEFAULT_TITLE"):
        monkeypatch.delenv(f"MDBLOCKS_{name}", raising=False)


def test_load_config_defaults():
    """Settings defaults are used when no config.yaml, env var, or CLI override exists."""
    settings = load_config()
    assert settings.parser_config == "gfm-like"
    assert settings.output_dir == "dist"
    assert settings.output_format == "md"
    assert settings.default_title == "Untitled"


def test_load_config_reads_config_yaml(tmp_path):
    (tmp_path / "config.yaml").write_text("output_dir: site\noutput_format: mdx\n")
    settings = load_config()
    assert settings.output_dir == "site"
    assert settings.output_format == "mdx"


def test_load_config_env_overrides_config_yaml(tmp_path, monkeypatch):
    """MDBLOCKS_OUTPUT_DIR takes precedence over config.yaml output_dir."""
    (tmp_path / "config.yaml").write_text("output_dir: site\n")
    monkeypatch.setenv("MDBLOCKS_OUTPUT_DIR", "env-out")
    settings = load_config()
    assert settings.output_dir == "env-out"


def test_load_config_cli_overrides_env(monkeypatch):
    """A non-None CLI override beats the env var; None overrides are ignored."""
    monkeypatch.setenv("MDBLOCKS_PARSER_CONFIG", "commonmark")
    settings = load_config(overrides={"parser_config": "zero", "output_dir": None})
    assert settings.parser_config == "zero"
    assert settings.output_dir == "dist"


def test_load_config_invalid_yaml(tmp_path):
    """load_config raises ValueError when config.yaml contains invalid YAML."""
    (tmp_path / "config.yaml").write_text("key: [unclosed\n")
    with pytest.raises(ValueError, match="Invalid config.yaml"):
        load_config()


def test_load_config_non_mapping_yaml(tmp_path):
    (tmp_path / "config.yaml").write_text("- just\n- a list\n")
    with pytest.raises(ValueError, match="expected a mapping"):
        load_config()


def test_load_config_rejects_unknown_format(monkeypatch):
    monkeypatch.setenv("MDBLOCKS_OUTPUT_FORMAT", "html")
    with pytest.raises(ValidationError):
        load_config()
