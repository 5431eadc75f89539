"""Tests for the alembic migrations, run against a temporary SQLite file."""

from pathlib import Path

import pytest
from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect, text
from sqlalchemy.exc import IntegrityError

ALEMBIC_DIR = Path(__file__).resolve().parents[1] / "alembic"


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "migrations.db"


@pytest.fixture
def alembic_config(db_path: Path) -> Config:
    config = Config()
    config.set_main_option("script_location", str(ALEMBIC_DIR))
    config.set_main_option("sqlalchemy.url", f"sqlite+aiosqlite:///{db_path}")
    return config


@pytest.fixture
def sync_engine(db_path: Path):
    engine = create_engine(f"sqlite:///{db_path}")
    yield engine
    engine.dispose()


class TestUpgrade:
    """alembic upgrade head"""

    def test_creates_tables(self, alembic_config, sync_engine):
        command.upgrade(alembic_config, "head")

        tables = set(inspect(sync_engine).get_table_names())
        assert {"users", "daily_login_progress", "daily_login_claims"} <= tables

    def test_claims_unique_per_user_and_date(self, alembic_config, sync_engine):
        command.upgrade(alembic_config, "head")

        constraints = inspect(sync_engine).get_unique_constraints("daily_login_claims")
        assert {
            "name": "uq_daily_login_user_date",
            "column_names": ["user_id", "claim_date"],
        } in [
            {"name": c["name"], "column_names": c["column_names"]} for c in constraints
        ]

    def test_duplicate_claim_rejected(self, alembic_config, sync_engine):
        command.upgrade(alembic_config, "head")
        claim = {
            "user_id": "user-1",
            "claim_date": "2024-03-01",
            "claimed_at": "2024-03-01 12:00:00",
        }
        insert_claim = text(
            "INSERT INTO daily_login_claims "
            "(user_id, claim_date, day_in_cycle, points_earned, claimed_at) "
            "VALUES (:user_id, :claim_date, 1, 10, :claimed_at)"
        )

        with sync_engine.begin() as conn:
            conn.execute(
                text("INSERT INTO users (id, name, email) VALUES ('user-1', 'Player', 'p@example.com')")
            )
            conn.execute(insert_claim, claim)

        with pytest.raises(IntegrityError):
            with sync_engine.begin() as conn:
                conn.execute(insert_claim, claim)

    def test_claim_day_range_checked(self, alembic_config, sync_engine):
        command.upgrade(alembic_config, "head")

        with sync_engine.begin() as conn:
            conn.execute(
                text("INSERT INTO users (id, name, email) VALUES ('user-1', 'Player', 'p@example.com')")
            )

        with pytest.raises(IntegrityError):
            with sync_engine.begin() as conn:
                conn.execute(
                    text(
                        "INSERT INTO daily_login_progress (user_id, current_day_in_cycle) "
                        "VALUES ('user-1', 8)"
                    )
                )


class TestDowngrade:
    """alembic downgrade base"""

    def test_drops_everything(self, alembic_config, sync_engine):
        command.upgrade(alembic_config, "head")

        command.downgrade(alembic_config, "base")

        assert set(inspect(sync_engine).get_table_names()) == {"alembic_version"}
