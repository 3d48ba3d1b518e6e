"""Unit tests for CredentialCodec."""

from uuid import uuid4

import pytest

from federation.domain.error import (
    CredentialError,
    ExpiredTokenError,
    InvalidSignatureError,
    MalformedTokenError,
)
from federation.domain.service import CredentialCodec
from federation.domain.value import TokenRole, UserId
from federation.util.jwt import create_token
from tests.conftest import ACCESS_SECRET


@pytest.fixture
def codec(token_settings, clock) -> CredentialCodec:
    return CredentialCodec(token_settings, clock=clock)


class TestIssueAndVerify:
    """Tests for issuing and verifying tokens."""

    def test_verify_returns_issued_claims(self, codec, clock):
        user_id = UserId(uuid4())

        token = codec.issue(user_id, "alice@example.com", TokenRole.ACCESS)
        claims = codec.verify(token, TokenRole.ACCESS)

        assert claims.user_id == user_id
        assert claims.email == "alice@example.com"
        assert claims.role is TokenRole.ACCESS
        assert claims.issued_at.timestamp() == int(clock.now.timestamp())
        assert (claims.expires_at - claims.issued_at).total_seconds() == 900

    def test_refresh_token_has_refresh_lifetime(self, codec):
        token = codec.issue(UserId(uuid4()), "alice@example.com", TokenRole.REFRESH)

        claims = codec.verify(token, TokenRole.REFRESH)

        assert (claims.expires_at - claims.issued_at).total_seconds() == 7 * 24 * 3600

    def test_pairs_issued_in_the_same_second_differ(self, codec):
        user_id = UserId(uuid4())

        first = codec.issue_pair(user_id, "alice@example.com")
        second = codec.issue_pair(user_id, "alice@example.com")

        assert first.access_token != second.access_token
        assert first.refresh_token != second.refresh_token
        assert first.access_token != first.refresh_token


class TestVerifyFailures:
    """Tests for rejected tokens."""

    def test_expired_access_token(self, codec, clock):
        token = codec.issue(UserId(uuid4()), "alice@example.com")
        clock.advance(900)

        with pytest.raises(ExpiredTokenError):
            codec.verify(token, TokenRole.ACCESS)

    def test_access_token_valid_just_before_expiry(self, codec, clock):
        token = codec.issue(UserId(uuid4()), "alice@example.com")
        clock.advance(899)

        codec.verify(token, TokenRole.ACCESS)

    def test_access_token_does_not_verify_as_refresh(self, codec):
        token = codec.issue(UserId(uuid4()), "alice@example.com", TokenRole.ACCESS)

        with pytest.raises(InvalidSignatureError):
            codec.verify(token, TokenRole.REFRESH)

    def test_refresh_token_does_not_verify_as_access(self, codec):
        token = codec.issue(UserId(uuid4()), "alice@example.com", TokenRole.REFRESH)

        with pytest.raises(InvalidSignatureError):
            codec.verify(token, TokenRole.ACCESS)

    def test_tampered_token(self, codec):
        token = codec.issue(UserId(uuid4()), "alice@example.com")
        header, payload, signature = token.split(".")
        tampered = ".".join([header, payload, signature[::-1]])

        with pytest.raises(CredentialError):
            codec.verify(tampered, TokenRole.ACCESS)

    def test_garbage_token(self, codec):
        with pytest.raises(MalformedTokenError):
            codec.verify("garbage", TokenRole.ACCESS)

    def test_wrong_type_claim_with_valid_signature(self, codec, clock):
        issued_at = int(clock.now.timestamp())
        token = create_token(
            {
                "sub": str(uuid4()),
                "email": "alice@example.com",
                "typ": "refresh",
                "iat": issued_at,
                "exp": issued_at + 60,
                "jti": "x",
            },
            ACCESS_SECRET,
            "HS256",
        )

        with pytest.raises(MalformedTokenError):
            codec.verify(token, TokenRole.ACCESS)

    def test_subject_not_a_uuid(self, codec, clock):
        issued_at = int(clock.now.timestamp())
        token = create_token(
            {
                "sub": "not-a-uuid",
                "email": "alice@example.com",
                "typ": "access",
                "iat": issued_at,
                "exp": issued_at + 60,
                "jti": "x",
            },
            ACCESS_SECRET,
            "HS256",
        )

        with pytest.raises(MalformedTokenError):
            codec.verify(token, TokenRole.ACCESS)


class TestRemainingLifetime:
    """Tests for remaining_lifetime() and inspect()."""

    def test_remaining_lifetime_counts_down(self, codec, clock):
        token = codec.issue(UserId(uuid4()), "alice@example.com")
        clock.advance(100)

        assert codec.remaining_lifetime(token, TokenRole.ACCESS) == 800

    def test_remaining_lifetime_of_expired_token_is_zero(self, codec, clock):
        token = codec.issue(UserId(uuid4()), "alice@example.com")
        clock.advance(5000)

        assert codec.remaining_lifetime(token, TokenRole.ACCESS) == 0

    def test_inspect_reads_expired_token(self, codec, clock):
        user_id = UserId(uuid4())
        token = codec.issue(user_id, "alice@example.com")
        clock.advance(5000)

        assert codec.inspect(token, TokenRole.ACCESS).user_id == user_id
