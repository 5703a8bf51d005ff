"""Password Hashing — PBKDF2 digests and constant-time verification."""

from community_rest.infrastructure.passwords import hash_password, verify_password


def test_hash_then_verify():
    stored = hash_password("s3cret", iterations=1000)
    assert stored.startswith("pbkdf2_sha256$1000$")
    assert verify_password("s3cret", stored)
    assert not verify_password("wrong", stored)


def test_salt_differs_per_hash():
    assert hash_password("same", 1000) != hash_password("same", 1000)


def test_malformed_stored_value_is_rejected():
    assert not verify_password("x", "")
    assert not verify_password("x", "md5$abc")
    assert not verify_password("x", "pbkdf2_sha256$many$salt$digest")
    assert not verify_password("x", None)
