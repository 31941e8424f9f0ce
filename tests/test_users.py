"""Tests for user upsert and credit balances."""

from __future__ import annotations

import pytest
from sqlalchemy import text

from resume_builder.data.db import get_session
from resume_builder.services.users import (
    consume_ai_credit,
    consume_download_credit,
    ensure_user,
    get_user,
    grant_download_credits,
    set_premium,
)


@pytest.fixture
def user(tmp_db):
    return ensure_user("u-1", {"email": "ada@example.com", "first_name": "Ada"})


class TestEnsureUser:
    def test_new_user_defaults(self, user):
        assert user["id"] == "u-1"
        assert user["email"] == "ada@example.com"
        assert user["is_premium"] is False
        assert user["ai_credits"] == 3
        assert user["download_credits"] == 0

    def test_is_idempotent(self, user):
        again = ensure_user("u-1")

        assert again["email"] == "ada@example.com"
        assert again["ai_credits"] == user["ai_credits"]

    def test_refreshes_profile(self, user):
        updated = ensure_user("u-1", {"last_name": "Lovelace"})

        assert updated["first_name"] == "Ada"
        assert updated["last_name"] == "Lovelace"

    def test_unknown_user(self, tmp_db):
        assert get_user("ghost") is None

    def test_set_premium(self, user):
        assert set_premium("u-1", True)["is_premium"] is True
        assert get_user("u-1")["is_premium"] is True
        assert set_premium("ghost", True) is None


class TestCredits:
    def test_ai_credit_stops_at_zero(self, user):
        taken = []
        for _ in range(4):
            with get_session() as session:
                taken.append(consume_ai_credit(session, "u-1"))

        assert taken == [True, True, True, False]
        assert get_user("u-1")["ai_credits"] == 0

    def test_download_credit_needs_balance(self, user):
        with get_session() as session:
            assert consume_download_credit(session, "u-1") is False

        with get_session() as session:
            grant_download_credits(session, "u-1", 2)
        with get_session() as session:
            assert consume_download_credit(session, "u-1") is True

        assert get_user("u-1")["download_credits"] == 1

    def test_grant_rejects_negative(self, user):
        with pytest.raises(ValueError), get_session() as session:
            grant_download_credits(session, "u-1", -1)

    def test_rolled_back_consumption_keeps_credit(self, user):
        with pytest.raises(RuntimeError), get_session() as session:
            consume_ai_credit(session, "u-1")
            raise RuntimeError("abort")

        assert get_user("u-1")["ai_credits"] == 3


def test_sqlite_connections_enforce_foreign_keys(tmp_db):
    with get_session() as session:
        assert session.execute(text("PRAGMA foreign_keys")).scalar() == 1
