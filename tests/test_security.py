import pytest

from app.core.security import hash_password, verify_password, verify_password_dummy


def test_hash_verifies_and_is_salted():
    first = hash_password("hunter22!")
    second = hash_password("hunter22!")

    assert first != second
    assert first.startswith("$2b$12$")
    assert verify_password("hunter22!", first)
    assert verify_password("hunter22!", second)


def test_wrong_password_is_false():
    hashed = hash_password("hunter22!")
    assert verify_password("hunter23!", hashed) is False


def test_missing_or_malformed_hash_is_false():
    assert verify_password("hunter22!", None) is False
    assert verify_password("hunter22!", "") is False
    assert verify_password("hunter22!", "not-a-hash") is False
    assert verify_password("hunter22!", "$2b$12$truncated") is False


def test_dummy_verification_never_succeeds():
    assert verify_password_dummy("anything") is False
    assert verify_password_dummy("") is False


def test_dummy_verification_tolerates_nul_bytes():
    assert verify_password_dummy("abc\x00def") is False


def test_passwords_bcrypt_cannot_hash_faithfully_are_refused():
    with pytest.raises(ValueError):
        hash_password("abc\x00defgh")
    with pytest.raises(ValueError):
        hash_password("a" * 72 + "x")
    # multi-byte characters count by their UTF-8 length
    with pytest.raises(ValueError):
        hash_password("ñ" * 37)


def test_password_at_byte_limit_is_not_truncated():
    hashed = hash_password("a" * 72)
    assert verify_password("a" * 72, hashed)
    assert verify_password("a" * 71, hashed) is False
