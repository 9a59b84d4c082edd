"""Unit tests for JWTService."""

from datetime import datetime, timedelta, timezone
from uuid import uuid4

import jwt
import pytest

from interspace.config import AuthSettings
from interspace.domain.service import JWTService
from interspace.domain.value import AccountId, AccountType
from interspace.util.jwt import JWTError

SETTINGS = AuthSettings(jwt_secret="unit-test-secret")


class TestJWTService:
    """Tests for issuing and verifying caller tokens."""

    def test_round_trip_carries_account(self):
        service = JWTService(SETTINGS)
        account_id = AccountId(uuid4())

        payload = service.verify_token(
            service.create_token(account_id, AccountType.WALLET)
        )

        assert payload.account_id == str(account_id)
        assert payload.account_type == "wallet"
        assert payload.exp > payload.issued_at

    def test_account_id_is_subject_claim(self):
        service = JWTService(SETTINGS)
        account_id = AccountId(uuid4())

        token = service.create_token(account_id, AccountType.EMAIL)
        claims = jwt.decode(token, options={"verify_signature": False})

        assert claims["sub"] == str(account_id)

    def test_token_signed_with_other_secret_rejected(self):
        issuer = JWTService(AuthSettings(jwt_secret="another-secret"))
        token = issuer.create_token(AccountId(uuid4()), AccountType.EMAIL)

        with pytest.raises(JWTError, match="Invalid token"):
            JWTService(SETTINGS).verify_token(token)

    def test_expired_token_rejected(self):
        issued = datetime.now(timezone.utc) - timedelta(days=2)
        token = jwt.encode(
            {
                "sub": str(uuid4()),
                "account_type": "email",
                "iat": issued,
                "exp": issued + timedelta(days=1),
            },
            SETTINGS.jwt_secret,
            algorithm=SETTINGS.jwt_algorithm,
        )

        with pytest.raises(JWTError, match="expired"):
            JWTService(SETTINGS).verify_token(token)

    def test_token_without_subject_rejected(self):
        now = datetime.now(timezone.utc)
        token = jwt.encode(
            {"account_type": "email", "iat": now, "exp": now + timedelta(days=1)},
            SETTINGS.jwt_secret,
            algorithm=SETTINGS.jwt_algorithm,
        )

        with pytest.raises(JWTError):
            JWTService(SETTINGS).verify_token(token)
