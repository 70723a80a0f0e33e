"""Tests for transaction scoping helpers."""

import pytest

from enrol_arlo.database import create_db_engine, step_commit, unit_of_work
from enrol_arlo.models import User


def add_user(db, userid):
    db.add(User(id=userid, username=f"user{userid}"))
    db.flush()


def usernames(db):
    return [u.username for u in db.query(User).order_by(User.id).all()]


class TestUnitOfWork:
    """Tests for the unit of work scope."""

    def test_atomic_block_commits_once(self, sqlite_test_db):
        """An atomic block commits on exit."""
        with unit_of_work(sqlite_test_db, atomic=True):
            add_user(sqlite_test_db, 1)
            add_user(sqlite_test_db, 2)
        sqlite_test_db.rollback()

        assert usernames(sqlite_test_db) == ["user1", "user2"]

    def test_atomic_block_rolls_back_on_error(self, sqlite_test_db):
        """An atomic block rolls back on error."""
        with pytest.raises(ValueError):
            with unit_of_work(sqlite_test_db, atomic=True):
                add_user(sqlite_test_db, 1)
                raise ValueError("stop")

        assert usernames(sqlite_test_db) == []

    def test_non_atomic_block_keeps_committed_steps(self, sqlite_test_db):
        """A non-atomic block keeps committed steps on error."""
        with pytest.raises(ValueError):
            with unit_of_work(sqlite_test_db, atomic=False):
                add_user(sqlite_test_db, 1)
                step_commit(sqlite_test_db, atomic=False)
                add_user(sqlite_test_db, 2)
                raise ValueError("stop")

        assert usernames(sqlite_test_db) == ["user1"]

    def test_non_atomic_block_does_not_commit_on_exit(self, sqlite_test_db):
        """A non-atomic block leaves committing to its steps."""
        with unit_of_work(sqlite_test_db, atomic=False):
            add_user(sqlite_test_db, 1)
        sqlite_test_db.rollback()

        assert usernames(sqlite_test_db) == []


def test_step_commit_is_skipped_when_atomic(sqlite_test_db):
    """step_commit does nothing in atomic mode."""
    add_user(sqlite_test_db, 1)
    step_commit(sqlite_test_db, atomic=True)
    sqlite_test_db.rollback()

    assert usernames(sqlite_test_db) == []


def test_sqlite_engine():
    """SQLite URLs produce a SQLite engine."""
    engine = create_db_engine("sqlite:///:memory:")

    assert engine.dialect.name == "sqlite"
