"""Tests for password hashing and JWT helpers."""

from datetime import timedelta

from jose import jwt

from cafe_backend.config import settings
from cafe_backend.core.security import (
    create_access_token,
    decode_access_token,
    extract_salt,
    get_password_hash,
    hash_password,
    verify_password,
)


class TestPasswordHashing:
    """Tests for bcrypt password hashing."""

    def test_hash_and_verify(self):
        """A password verifies against its own hash only."""
        hashed = get_password_hash("secret123")

        assert hashed != "secret123"
        assert verify_password("secret123", hashed) is True
        assert verify_password("secret124", hashed) is False

    def test_hash_is_salted(self):
        """Hashing the same password twice gives different salts and hashes."""
        first = hash_password("secret123")
        second = hash_password("secret123")

        assert first.salt != second.salt
        assert first.hash != second.hash
        assert verify_password("secret123", first.hash)
        assert verify_password("secret123", second.hash)

    def test_salt_is_embedded_in_hash(self):
        """The returned salt is the one stored inside the hash."""
        hashed = hash_password("secret123")

        assert len(hashed.salt) == 22
        assert extract_salt(hashed.hash) == hashed.salt
        assert hashed.hash.startswith("$2b$")

    def test_verify_with_explicit_salt(self):
        """A mismatched salt fails verification even with the right password."""
        hashed = hash_password("secret123")
        other = hash_password("secret123")

        assert verify_password("secret123", hashed.hash, salt=hashed.salt) is True
        assert verify_password("secret123", hashed.hash, salt=other.salt) is False

    def test_verify_malformed_hash(self):
        """A malformed stored hash never verifies."""
        assert verify_password("secret123", "not-a-bcrypt-hash") is False

    def test_work_factor_from_settings(self):
        """Hashes use the configured number of rounds."""
        hashed = get_password_hash("secret123")
        assert hashed.split("$")[2] == f"{settings.bcrypt_rounds:02d}"


class TestAccessTokens:
    """Tests for JWT creation and decoding."""

    def test_round_trip_claims(self):
        """Encoded claims are returned together with the standard ones."""
        token = create_access_token({"sub": "abc", "user_type": "staff", "role": "Barista"})
        payload = decode_access_token(token)

        assert payload is not None
        assert payload["sub"] == "abc"
        assert payload["role"] == "Barista"
        assert payload["type"] == "access"
        assert payload["jti"]
        assert payload["exp"] > payload["iat"]

    def test_each_token_has_unique_id(self):
        """Tokens issued for the same subject carry different ids."""
        first = decode_access_token(create_access_token({"sub": "abc"}))
        second = decode_access_token(create_access_token({"sub": "abc"}))

        assert first is not None and second is not None
        assert first["jti"] != second["jti"]

    def test_expired_token_rejected(self):
        """Tokens past their expiry do not decode."""
        token = create_access_token({"sub": "abc"}, expires_delta=timedelta(seconds=-1))
        assert decode_access_token(token) is None

    def test_tampered_token_rejected(self):
        """Tokens signed with another key do not decode."""
        token = jwt.encode(
            {"sub": "abc", "type": "access"}, "another-key", algorithm=settings.jwt_algorithm
        )
        assert decode_access_token(token) is None

    def test_wrong_token_type_rejected(self):
        """Only access tokens are accepted."""
        token = jwt.encode(
            {"sub": "abc", "type": "refresh"},
            settings.jwt_secret_key,
            algorithm=settings.jwt_algorithm,
        )
        assert decode_access_token(token) is None

    def test_garbage_rejected(self):
        """Non-JWT strings do not decode."""
        assert decode_access_token("not.a.token") is None
