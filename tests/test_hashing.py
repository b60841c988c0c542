"""Tests for the verification code hasher."""

from app.core.hashing import SecretHasher


class TestSecretHasher:

    def test_hash_does_not_contain_code(self, hasher):
        hashed = hasher.hash("042917")
        assert "042917" not in hashed
        assert hashed.startswith("$2")

    def test_fresh_salt_per_hash(self, hasher):
        assert hasher.hash("123456") != hasher.hash("123456")

    def test_verify_matching_code(self, hasher):
        hashed = hasher.hash("000123")
        assert hasher.verify("000123", hashed) is True

    def test_verify_rejects_wrong_code(self, hasher):
        hashed = hasher.hash("000123")
        assert hasher.verify("000124", hashed) is False
        assert hasher.verify("123", hashed) is False

    def test_malformed_hash_is_a_plain_mismatch(self, hasher):
        assert hasher.verify("123456", "not-a-bcrypt-hash") is False
        assert hasher.verify("123456", "") is False

    def test_rounds_are_encoded_in_hash(self):
        hashed = SecretHasher(rounds=5).hash("654321")
        assert hashed.split("$")[2] == "05"
