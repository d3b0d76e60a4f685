"""
Unit tests for admin token and password helpers
"""
import pytest
from datetime import timedelta

from jose import jwt

from bizconnect.auction.errors import ForbiddenError, UnauthorizedError
from bizconnect.config import settings
from bizconnect.web.auth import (
    AdminContext,
    bearer_token,
    create_admin_token,
    decode_admin_token,
    get_password_hash,
    verify_password,
)


@pytest.mark.unit
class TestPasswords:
    def test_hash_and_verify(self):
        hashed = get_password_hash('s3cret')
        assert hashed != 's3cret'
        assert verify_password('s3cret', hashed) is True
        assert verify_password('other', hashed) is False


@pytest.mark.unit
class TestTokens:
    def test_round_trip(self):
        token = create_admin_token({'id': 'a1', 'username': 'admin'})
        assert decode_admin_token(token) == AdminContext(id='a1', username='admin')

    def test_expired(self):
        token = create_admin_token({'id': 'a1', 'username': 'admin'}, expires_delta=timedelta(seconds=-1))
        with pytest.raises(UnauthorizedError) as exc:
            decode_admin_token(token)
        assert exc.value.status_code == 401

    def test_wrong_secret(self):
        token = jwt.encode({'sub': 'a1', 'type': 'admin'}, 'another-secret', algorithm='HS256')
        with pytest.raises(UnauthorizedError):
            decode_admin_token(token)

    def test_non_admin_token_forbidden(self):
        """
        GIVEN a correctly signed token that is not an admin token
        WHEN it is decoded
        THEN access is forbidden rather than unauthenticated
        """
        token = jwt.encode({'sub': 'u1', 'type': 'vendor'}, settings.JWT_SECRET_KEY,
                           algorithm=settings.JWT_ALGORITHM)
        with pytest.raises(ForbiddenError) as exc:
            decode_admin_token(token)
        assert exc.value.status_code == 403


@pytest.mark.unit
class TestBearerToken:
    @pytest.mark.parametrize("header,expected", [
        ("Bearer abc", "abc"),
        ("bearer abc", "abc"),
        ("Bearer   abc  ", "abc"),
        ("Basic abc", None),
        ("Bearer", None),
        ("", None),
        (None, None),
    ])
    def test_parse(self, header, expected):
        assert bearer_token(header) == expected
