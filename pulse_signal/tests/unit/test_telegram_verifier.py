"""
PULSE SIGNAL — Unit Tests for the Telegram Login Verifier
"""
from datetime import datetime, timezone
from urllib.parse import urlencode

import pytest

from pulse_signal.auth.telegram_verifier import TelegramLoginVerifier
from pulse_signal.errors import (
    MissingAuthDataError, MissingHashError, HashMismatchError, StaleAuthDataError,
)
from pulse_signal.tests.fakes import BOT_TOKEN, AUTH_DATE, sign_payload

GOLDEN_HASH = "eb9331e0b2140b7b5b5bd5d01eaa6c0b29cf52558e95cf6a7305d3799a6d63fc"
GOLDEN_SECRET_HEX = "da447424f43746d32d149ea8a4ac02230a3de7fc5f5412f37c9623dbcc965c9f"


@pytest.fixture
def verifier():
    return TelegramLoginVerifier(BOT_TOKEN, max_age_seconds=86400)


class TestCheckString:
    def test_sorted_and_newline_joined(self, verifier, telegram_fields):
        fields = {**telegram_fields, "hash": "ignored"}
        assert verifier.build_check_string(fields) == (
            "auth_date=1700000000\nfirst_name=Alice\nid=42\nusername=alice"
        )

    def test_secret_key_is_sha256_of_token(self, verifier):
        assert verifier.secret_key().hex() == GOLDEN_SECRET_HEX

    def test_golden_hash(self, verifier, telegram_fields):
        assert verifier.compute_hash(telegram_fields) == GOLDEN_HASH

    def test_parse_decodes_values(self, verifier):
        fields = verifier.parse("first_name=J%C3%BCrgen&last_name=&id=7")
        assert fields == {"first_name": "Jürgen", "last_name": "", "id": "7"}


class TestVerify:
    def test_valid_payload(self, verifier, telegram_fields, auth_now):
        raw = urlencode({**telegram_fields, "hash": GOLDEN_HASH})
        user = verifier.verify(raw, now=auth_now)
        assert user == telegram_fields
        assert "hash" not in user

    def test_field_order_irrelevant(self, verifier, telegram_fields, auth_now):
        raw = f"username=alice&hash={GOLDEN_HASH}&id=42&first_name=Alice&auth_date={AUTH_DATE}"
        assert verifier.verify(raw, now=auth_now)["username"] == "alice"

    def test_tampered_field_rejected(self, verifier, telegram_fields, auth_now):
        raw = urlencode({**telegram_fields, "username": "mallory", "hash": GOLDEN_HASH})
        with pytest.raises(HashMismatchError):
            verifier.verify(raw, now=auth_now)

    def test_wrong_bot_token_rejected(self, telegram_fields, auth_now):
        raw = sign_payload(telegram_fields, bot_token="other:TOKEN")
        with pytest.raises(HashMismatchError):
            TelegramLoginVerifier(BOT_TOKEN).verify(raw, now=auth_now)

    def test_missing_data(self, verifier):
        with pytest.raises(MissingAuthDataError):
            verifier.verify("")
        with pytest.raises(MissingAuthDataError):
            verifier.verify(None)

    def test_missing_hash(self, verifier, telegram_fields):
        with pytest.raises(MissingHashError):
            verifier.verify(urlencode(telegram_fields))

    def test_stale_auth_date(self, verifier, telegram_fields):
        raw = sign_payload(telegram_fields)
        later = datetime.fromtimestamp(AUTH_DATE + 86401, tz=timezone.utc)
        with pytest.raises(StaleAuthDataError):
            verifier.verify(raw, now=later)

    def test_exactly_max_age_accepted(self, verifier, telegram_fields):
        raw = sign_payload(telegram_fields)
        boundary = datetime.fromtimestamp(AUTH_DATE + 86400, tz=timezone.utc)
        assert verifier.verify(raw, now=boundary)["id"] == "42"

    def test_missing_auth_date_rejected(self, verifier, auth_now):
        raw = sign_payload({"id": "42", "username": "alice"})
        with pytest.raises(StaleAuthDataError):
            verifier.verify(raw, now=auth_now)

    def test_messages(self):
        assert HashMismatchError().message == "Data verification failed."
        assert StaleAuthDataError().message == "Authentication data is outdated."
        assert MissingHashError().message == "No hash parameter found."
