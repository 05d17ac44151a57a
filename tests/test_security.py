from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from tracker.core.config import Settings
from tracker.core.errors import ConfigurationError, HashError, TokenExpired, TokenInvalid
from tracker.core.security import PasswordHasher, TokenService
from tracker.user.schemas import SessionUser
from restapi.router import create_app


class TestPasswordHasher:
    """Tests for bcrypt password hashing."""

    hasher = PasswordHasher()

    def test_hash_then_verify_succeeds(self):
        hashed = self.hasher.hash("s3cret")
        assert self.hasher.verify("s3cret", hashed)

    def test_verify_other_password_fails(self):
        hashed = self.hasher.hash("s3cret")
        assert not self.hasher.verify("s3cret ", hashed)
        assert not self.hasher.verify("S3cret", hashed)

    def test_same_password_gives_different_hashes(self):
        assert self.hasher.hash("s3cret") != self.hasher.hash("s3cret")

    def test_cost_factor_is_ten(self):
        assert self.hasher.hash("s3cret").startswith("$2b$10$")

    def test_verify_malformed_hash_returns_false(self):
        assert self.hasher.verify("s3cret", "not-a-bcrypt-hash") is False

    def test_verify_dummy_is_always_false(self):
        assert self.hasher.verify_dummy("anything") is False

    @pytest.mark.parametrize("password", ["", None, 12345])
    def test_hash_rejects_malformed_input(self, password):
        with pytest.raises(HashError):
            self.hasher.hash(password)


class TestTokenService:
    """Tests for signed session tokens."""

    user = SessionUser(id=7, username="alice")

    def test_verify_returns_issued_identity(self):
        tokens = TokenService("secret")
        assert tokens.verify(tokens.issue(self.user)) == self.user

    def test_token_expires_after_24_hours(self):
        tokens = TokenService("secret")
        now = datetime.now(timezone.utc)
        claims = jwt.get_unverified_claims(tokens.issue(self.user, now=now))
        assert claims["exp"] - claims["iat"] == 24 * 60 * 60

    def test_token_still_valid_before_expiry(self):
        tokens = TokenService("secret")
        token = tokens.issue(self.user, now=datetime.now(timezone.utc) - timedelta(hours=23))
        assert tokens.verify(token).id == 7

    def test_expired_token_rejected(self):
        tokens = TokenService("secret")
        token = tokens.issue(self.user, now=datetime.now(timezone.utc) - timedelta(hours=25))
        with pytest.raises(TokenExpired):
            tokens.verify(token)

    def test_token_signed_with_other_secret_rejected(self):
        token = TokenService("other-secret").issue(self.user)
        with pytest.raises(TokenInvalid):
            TokenService("secret").verify(token)

    def test_garbage_token_rejected(self):
        with pytest.raises(TokenInvalid):
            TokenService("secret").verify("not.a.token")

    def test_token_without_identity_rejected(self):
        exp = datetime.now(timezone.utc) + timedelta(hours=1)
        token = jwt.encode({"exp": exp}, "secret", algorithm="HS256")
        with pytest.raises(TokenInvalid):
            TokenService("secret").verify(token)

    def test_token_without_expiry_rejected(self):
        token = jwt.encode({"id": 7, "username": "alice"}, "secret", algorithm="HS256")
        with pytest.raises(TokenInvalid):
            TokenService("secret").verify(token)

    @pytest.mark.parametrize("secret", [None, ""])
    def test_missing_secret_is_fatal(self, secret):
        with pytest.raises(ConfigurationError):
            TokenService(secret)

    def test_app_refuses_to_start_without_secret(self, tmp_path):
        settings = Settings(_env_file=None, JWT_SECRET=None, DB_URL=f"sqlite+aiosqlite:///{tmp_path / 'x.db'}")
        with pytest.raises(ConfigurationError):
            create_app(settings=settings)
