"""Tests for database factory configuration."""

from pathlib import Path

from kasbook.database import factories
from kasbook.database.factories import DB_PATH_ENV, create_sqlite_database


def test_explicit_path_wins(tmp_path, monkeypatch):
    """Test an explicit path overrides the environment."""
    monkeypatch.setenv(DB_PATH_ENV, str(tmp_path / "env.db"))
    db = create_sqlite_database(database_path=str(tmp_path / "explicit.db"))
    assert db.database_url.endswith("explicit.db")


def test_environment_path(tmp_path, monkeypatch):
    """Test KASBOOK_DB_PATH is used when no path is given."""
    monkeypatch.setenv(DB_PATH_ENV, str(tmp_path / "env.db"))
    db = create_sqlite_database()
    assert db.database_url == f"sqlite:///{tmp_path / 'env.db'}"


def test_default_path_is_created(tmp_path, monkeypatch):
    """Test the default location's directory is created on demand."""
    monkeypatch.delenv(DB_PATH_ENV, raising=False)
    target = tmp_path / "home" / ".kasbook" / "kasbook.db"
    monkeypatch.setattr(factories, "default_database_path", lambda: target)

    db = create_sqlite_database()

    assert Path(db.database_url.removeprefix("sqlite:///")) == target
    assert target.parent.is_dir()


def test_databases_share_one_file(tmp_path):
    """Test two handles on one file see each other's accounts, like two devices."""
    path = str(tmp_path / "shared.db")
    first = create_sqlite_database(database_path=path)
    second = create_sqlite_database(database_path=path, busy_timeout=1.0)
    try:
        account_id = first.create_account(label="BRI", account_type="Bank")
        assert second.get_account(account_id).label == "BRI"
    finally:
        first.disconnect()
        second.disconnect()
