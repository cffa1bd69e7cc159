"""
Tests for password hashing.
"""

from blogcontent.core.security import (
    get_password_hash,
    is_password_hash,
    verify_password,
)


class TestPasswordHashing:

    def test_hash_differs_from_password(self):
        hashed = get_password_hash("password123", rounds=4)

        assert hashed != "password123"
        assert is_password_hash(hashed)

    def test_verify_correct_password(self):
        hashed = get_password_hash("password123", rounds=4)

        assert verify_password("password123", hashed) is True

    def test_verify_wrong_password(self):
        hashed = get_password_hash("password123", rounds=4)

        assert verify_password("password124", hashed) is False

    def test_hashes_are_salted(self):
        assert get_password_hash("same", rounds=4) != get_password_hash("same", rounds=4)

    def test_rounds_are_encoded_in_hash(self):
        assert get_password_hash("pw", rounds=5).startswith("$2b$05$")

    def test_long_password_truncated_to_72_bytes(self):
        long_password = "a" * 100
        hashed = get_password_hash(long_password, rounds=4)

        assert verify_password("a" * 72, hashed) is True

    def test_malformed_hash_does_not_raise(self):
        assert verify_password("password123", "not-a-hash") is False


class TestIsPasswordHash:

    def test_plain_text_is_not_a_hash(self):
        assert is_password_hash("password123") is False

    def test_non_string(self):
        assert is_password_hash(None) is False
