import pytest

from api.features.auth.exceptions import InvalidInputError, InvalidSaltError
from api.features.auth.hasher import CredentialHasher
from api.features.auth.models import Credential

# Cheap iteration count for tests that do not depend on the exact cost.
FAST = CredentialHasher(iterations=1_000)


def test_defaults_match_reference_parameters():
    hasher = CredentialHasher()

    assert hasher.iterations == 100_000
    assert hasher.salt_bytes == 16
    assert hasher.hash_bytes == 32
    assert hasher.hash_name == "sha256"


def test_known_answer_vector():
    # RFC 7914 section 11: PBKDF2-HMAC-SHA256("passwd", "salt", c=1), first 32 bytes.
    hasher = CredentialHasher(iterations=1)

    credential = hasher.hash_password("passwd", b"salt".hex())

    assert credential.hash == (
        "55ac046e56e3089fec1691c22544b605f94185216dde0465e68b9d57c20dacbc"
    )
    assert credential.salt == "73616c74"


def test_default_output_format():
    credential = CredentialHasher().hash_password("secret123")

    assert len(credential.salt) == 32
    assert len(credential.hash) == 64
    int(credential.salt, 16)
    int(credential.hash, 16)


def test_same_salt_reproduces_hash():
    salt = "00112233445566778899aabbccddeeff"

    first = FAST.hash_password("secret123", salt)
    second = FAST.hash_password("secret123", salt)

    assert first == second
    assert first.salt == salt


def test_fresh_salts_give_different_credentials():
    first = FAST.hash_password("secret123")
    second = FAST.hash_password("secret123")

    assert first.salt != second.salt
    assert first.hash != second.hash


def test_empty_salt_is_treated_as_omitted():
    credential = FAST.hash_password("secret123", "")

    assert len(credential.salt) == 32


def test_supplied_salt_keeps_its_length():
    credential = FAST.hash_password("secret123", "abcd")

    assert credential.salt == "abcd"
    assert len(credential.hash) == 64


def test_uppercase_hex_salt_is_accepted():
    upper = FAST.hash_password("secret123", "ABCDEF01")
    lower = FAST.hash_password("secret123", "abcdef01")

    assert upper == lower


def test_empty_password_is_hashed():
    credential = FAST.hash_password("", "abcd")

    assert len(credential.hash) == 64


@pytest.mark.parametrize("password", [None, 12345, b"bytes"])
def test_missing_or_non_text_password(password):
    with pytest.raises(InvalidInputError) as excinfo:
        FAST.hash_password(password)

    assert excinfo.value.error_code == "INVALID_INPUT"


@pytest.mark.parametrize("salt", ["xyz0", "abc", "ab cd", "é1", b"abcd"])
def test_malformed_salt(salt):
    with pytest.raises(InvalidSaltError) as excinfo:
        FAST.hash_password("secret123", salt)

    assert excinfo.value.error_code == "INVALID_SALT"


def test_verify_password():
    stored = FAST.hash_password("secret123")

    assert FAST.verify_password("secret123", stored)
    assert not FAST.verify_password("secret124", stored)


def test_verify_against_round_tripped_credential():
    stored = FAST.hash_password("secret123")
    reloaded = Credential.model_validate(stored.model_dump())

    assert FAST.verify_password("secret123", reloaded)


def test_different_iteration_counts_disagree():
    salt = "00112233445566778899aabbccddeeff"

    assert (
        CredentialHasher(iterations=1_000).hash_password("secret123", salt).hash
        != CredentialHasher(iterations=1_001).hash_password("secret123", salt).hash
    )


@pytest.mark.parametrize(
    "kwargs", [{"iterations": 0}, {"salt_bytes": 0}, {"hash_bytes": 0}]
)
def test_rejects_non_positive_configuration(kwargs):
    with pytest.raises(ValueError):
        CredentialHasher(**kwargs)
