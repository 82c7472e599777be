"""Unit tests for config.py"""

import pytest

from mdpost.config import load_config


@pytest.fixture(autouse=True)
def _isolate(tmp_path, monkeypatch):
    """Run each test in an empty directory with no MDPOST_* variables set."""
    monkeypatch.chdir(tmp_path)
    for name in ("DB_URL", "MAX_VERSIONS", "INCLUDE_DRAFTS", "DUPLICATE_THRESHOLD", "STATIC_DIR"):
        monkeypatch.delenv(f"MDPOST_{name}", raising=False)


def test_load_config_defaults():
    settings = load_config()
    assert settings.db_url == "sqlite:///mdpost.db"
    assert settings.include_drafts is False
    assert settings.static_dir is None
    assert settings.duplicate_threshold == 0.8


def test_load_config_uses_env_db_url(monkeypatch):
    """MDPOST_DB_URL env var is picked up by load_config."""
    monkeypatch.setenv("MDPOST_DB_URL", "sqlite:///env.db")
    assert load_config().db_url == "sqlite:///env.db"


def test_load_config_env_overrides_config_yaml(tmp_path, monkeypatch):
    """MDPOST_DB_URL takes precedence over config.yaml db_url."""
    (tmp_path / "config.yaml").write_text("db_url: 'sqlite:///project.db'\n")
    monkeypatch.setenv("MDPOST_DB_URL", "sqlite:///override.db")
    assert load_config().db_url == "sqlite:///override.db"


def test_load_config_reads_config_yaml(tmp_path):
    (tmp_path / "config.yaml").write_text("static_dir: static\nmax_versions: 3\n")
    settings = load_config()
    assert settings.static_dir == "static"
    assert settings.max_versions == 3


def test_load_config_cli_overrides_env(monkeypatch):
    """A non-None CLI override beats the env var; None overrides are ignored."""
    monkeypatch.setenv("MDPOST_DB_URL", "sqlite:///env.db")
    settings = load_config(overrides={"db_url": "sqlite:///cli.db", "static_dir": None})
    assert settings.db_url == "sqlite:///cli.db"
    assert settings.static_dir is None


def test_load_config_env_coercion(monkeypatch):
    """Env values are strings; pydantic coerces them to the field types."""
    monkeypatch.setenv("MDPOST_INCLUDE_DRAFTS", "true")
    monkeypatch.setenv("MDPOST_DUPLICATE_THRESHOLD", "0.5")
    settings = load_config()
    assert settings.include_drafts is True
    assert settings.duplicate_threshold == 0.5


def test_load_config_invalid_yaml(tmp_path):
    (tmp_path / "config.yaml").write_text("key: [unclosed\n")
    with pytest.raises(ValueError, match="Invalid config.yaml"):
        load_config()


def test_load_config_threshold_out_of_range():
    with pytest.raises(ValueError):
        load_config(overrides={"duplicate_threshold": 1.5})
