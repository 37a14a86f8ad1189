from dataclasses import replace
from datetime import datetime, timedelta, timezone

import jwt
import pytest

from docs_admin.schemas.tokens import TokenError
from docs_admin.services.tokens import (
    mint_session_token,
    peek_session_token,
    verify_session_token,
)


def test_round_trip_matches_account(settings, admin_account):
    token = mint_session_token(admin_account, settings)

    claim = verify_session_token(token, settings)

    assert (claim.id, claim.email, claim.name, claim.role) == (
        admin_account.id,
        admin_account.email,
        admin_account.name,
        admin_account.role,
    )
    assert claim.expires_at - claim.issued_at == timedelta(days=7)


def test_lightweight_path_agrees_on_valid_tokens(settings, admin_account, member_account):
    for account in (admin_account, member_account):
        token = mint_session_token(account, settings)
        assert peek_session_token(token) == verify_session_token(token, settings)


def test_wrong_signature_rejected_by_full_path_only(settings, admin_account):
    token = mint_session_token(admin_account, replace(settings, jwt_secret="other-secret"))

    assert verify_session_token(token, settings) is None
    assert peek_session_token(token) is not None


def test_expired_token_rejected_by_both_paths(settings, admin_account):
    past = datetime.now(timezone.utc) - timedelta(days=8)
    token = jwt.encode(
        {
            "sub": admin_account.id,
            "email": admin_account.email,
            "name": admin_account.name,
            "role": admin_account.role,
            "iat": int(past.timestamp()),
            "exp": int((past + timedelta(days=1)).timestamp()),
        },
        settings.jwt_secret,
        algorithm="HS256",
    )

    assert verify_session_token(token, settings) is None
    assert peek_session_token(token) is None


@pytest.mark.parametrize("token", [None, "", "garbage", "a.b.c", "x.y"])
def test_malformed_tokens_yield_none(settings, token):
    assert verify_session_token(token, settings) is None
    assert peek_session_token(token) is None


def test_token_missing_claims_is_rejected(settings):
    token = jwt.encode({"sub": "1", "exp": 9999999999}, settings.jwt_secret, algorithm="HS256")

    assert verify_session_token(token, settings) is None
    assert peek_session_token(token) is None


def test_minting_requires_secret(settings, admin_account):
    with pytest.raises(TokenError):
        mint_session_token(admin_account, replace(settings, jwt_secret=""))
