import logging
from pathlib import Path

from clinancial import config


def test_default_db_path(monkeypatch):
    monkeypatch.delenv("CLINANCIAL_DB", raising=False)
    assert config.get_db_path() == config.DEFAULT_DB_PATH
    assert config.DEFAULT_DB_PATH.parent == Path.home() / ".config" / "clinancial"


def test_environment_overrides_default(monkeypatch, tmp_path):
    monkeypatch.setenv("CLINANCIAL_DB", str(tmp_path / "env.db"))
    assert config.get_db_path() == tmp_path / "env.db"


def test_explicit_override_wins(monkeypatch, tmp_path):
    monkeypatch.setenv("CLINANCIAL_DB", str(tmp_path / "env.db"))
    assert config.get_db_path(str(tmp_path / "cli.db")) == tmp_path / "cli.db"


def test_log_level(monkeypatch):
    monkeypatch.setenv("LOG_LEVEL", "debug")
    assert config.get_log_level() == logging.DEBUG

    monkeypatch.setenv("LOG_LEVEL", "nonsense")
    assert config.get_log_level() == logging.WARNING
