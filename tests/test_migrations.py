# tests/test_migrations.py
"""The Alembic history builds the same schema as the ORM models."""

from pathlib import Path

from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect

from forum_core.core.settings import Settings, settings
from forum_core.db.session import Base

PROJECT_ROOT = Path(__file__).resolve().parents[1]


def _alembic_config() -> Config:
    config = Config()
    config.set_main_option("script_location", str(PROJECT_ROOT / "migrations"))
    return config


def _tables(url: str) -> set[str]:
    engine = create_engine(url)
    try:
        return set(inspect(engine).get_table_names()) - {"alembic_version"}
    finally:
        engine.dispose()


def test_upgrade_uses_alembic_url(monkeypatch, tmp_path) -> None:
    url = f"sqlite:///{tmp_path / 'alembic.db'}"
    monkeypatch.setenv("ALEMBIC_URL", url)

    command.upgrade(_alembic_config(), "head")

    assert _tables(url) == set(Base.metadata.tables)


def test_upgrade_falls_back_to_settings(monkeypatch, tmp_path) -> None:
    url = f"sqlite:///{tmp_path / 'settings.db'}"
    monkeypatch.delenv("ALEMBIC_URL", raising=False)
    monkeypatch.setattr(settings, "use_testing_database", False)
    monkeypatch.setattr(settings, "database_url", url)

    command.upgrade(_alembic_config(), "head")

    assert _tables(url) == set(Base.metadata.tables)


def test_effective_database_url_prefers_test_database() -> None:
    configured = Settings(
        DATABASE_URL="postgresql+psycopg://forum@db/forum",
        TEST_DATABASE_URL="sqlite:///./test.db",
        USE_TEST_DATABASE=True,
    )
    assert configured.effective_database_url == "sqlite:///./test.db"

    configured.use_testing_database = False
    assert configured.effective_database_url == "postgresql+psycopg://forum@db/forum"
