"""Tests for configuration module."""

from pathlib import Path

from thinkmem.core.config import Settings


def test_default_settings(monkeypatch):
    """Settings load with defaults."""
    monkeypatch.delenv("THINKMEM_DATA_DIR", raising=False)
    monkeypatch.delenv("THINKMEM_REQUIRE_SECRET", raising=False)
    settings = Settings(
        _env_file=None,  # Don't load .env in tests
    )
    assert settings.data_dir == Path.home() / ".thinkmem"
    assert settings.db_name == "current.db"
    assert settings.require_secret is True
    assert settings.secret_ttl_hours == 1.0
    assert settings.use_file_lock is False
    assert settings.sim_mode == "levenshtein"
    assert settings.guide_file is None


def test_db_path():
    """Database path combines data_dir and db_name."""
    settings = Settings(
        data_dir=Path("/tmp/test"),
        db_name="test.db",
        _env_file=None,
    )
    assert settings.db_path == Path("/tmp/test/test.db")


def test_env_prefix(monkeypatch):
    """THINKMEM_ variables override defaults."""
    monkeypatch.setenv("THINKMEM_DATA_DIR", "/srv/memory")
    monkeypatch.setenv("THINKMEM_REQUIRE_SECRET", "false")
    monkeypatch.setenv("THINKMEM_SECRET_TTL_HOURS", "2.5")
    settings = Settings(_env_file=None)
    assert settings.db_path == Path("/srv/memory/current.db")
    assert settings.require_secret is False
    assert settings.secret_ttl_hours == 2.5
