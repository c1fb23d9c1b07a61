############################################################
#
# xarwiz-cms - Marketing Site Content Backend
#
# test_tokens.py: Unit tests for bearer token issue and verification
#
############################################################

"""Unit tests for JWT issue/verify."""

from datetime import datetime, timedelta, timezone

import jwt
import pytest

from backend.app.core.access import Principal, Role
from backend.app.core.errors import TokenExpired, TokenInvalid
from backend.app.db.models import Author
from backend.app.security.tokens import decode_token, issue_token
from backend.app.settings import get_settings


def _author_principal() -> Principal:
    author = Author(id=12, email="writer@example.com", password_hash="x", display_name="Writer")
    return Principal.for_author(author)


def _raw(payload: dict) -> str:
    settings = get_settings()
    return jwt.encode(payload, settings.secret_key, algorithm=settings.jwt_algorithm)


def _now_ts() -> int:
    return int(datetime.now(timezone.utc).timestamp())


class TestIssueAndDecode:
    def test_author_claims(self):
        claims = decode_token(issue_token(_author_principal()))
        assert claims.subject == "12"
        assert claims.email == "writer@example.com"
        assert claims.role is Role.AUTHOR
        assert claims.display_name == "Writer"

    def test_admin_claims(self):
        claims = decode_token(issue_token(Principal.for_admin("admin@xarwiz.test")))
        assert claims.subject == "admin"
        assert claims.role is Role.ADMIN
        assert claims.display_name is None

    def test_default_lifetime_is_configured_hours(self):
        now = datetime.now(timezone.utc).replace(microsecond=0)
        claims = decode_token(issue_token(_author_principal(), now=now))
        assert claims.expires_at - claims.issued_at == timedelta(hours=get_settings().jwt_expiration_hours)


class TestRejection:
    def test_expired_token(self):
        issued = datetime.now(timezone.utc) - timedelta(hours=48)
        token = issue_token(_author_principal(), now=issued)
        with pytest.raises(TokenExpired):
            decode_token(token)

    def test_wrong_signature(self):
        token = issue_token(_author_principal(), secret_key="some-other-key")
        with pytest.raises(TokenInvalid):
            decode_token(token)

    def test_garbage(self):
        with pytest.raises(TokenInvalid):
            decode_token("not-a-jwt")

    def test_missing_role_claim(self):
        token = _raw({"sub": "1", "email": "a@b.c", "iat": _now_ts(), "exp": _now_ts() + 60})
        with pytest.raises(TokenInvalid):
            decode_token(token)

    def test_unknown_role(self):
        token = _raw({"sub": "1", "email": "a@b.c", "role": "editor", "iat": _now_ts(), "exp": _now_ts() + 60})
        with pytest.raises(TokenInvalid):
            decode_token(token)

    def test_admin_role_with_author_subject(self):
        token = _raw({"sub": "5", "email": "a@b.c", "role": "admin", "iat": _now_ts(), "exp": _now_ts() + 60})
        with pytest.raises(TokenInvalid):
            decode_token(token)

    def test_author_role_with_non_numeric_subject(self):
        token = _raw({"sub": "admin", "email": "a@b.c", "role": "author", "iat": _now_ts(), "exp": _now_ts() + 60})
        with pytest.raises(TokenInvalid):
            decode_token(token)
