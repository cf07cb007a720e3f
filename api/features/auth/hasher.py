"""PBKDF2 password hashing.

``hash_password`` derives a key from a password and a salt with
PBKDF2-HMAC-SHA256. Re-running it with the stored salt reproduces the stored
hash, which is how ``verify_password`` checks an attempt. The plaintext is
never logged, stored or returned.
"""
import binascii
import hashlib
import hmac
import secrets
from typing import Optional

from api.features.auth.exceptions import InvalidInputError, InvalidSaltError
from api.features.auth.models import Credential

DEFAULT_ITERATIONS = 100_000
DEFAULT_SALT_BYTES = 16
DEFAULT_HASH_BYTES = 32


class CredentialHasher:
    """Stateless apart from its configuration; safe to share between tasks."""

    def __init__(
        self,
        *,
        iterations: int = DEFAULT_ITERATIONS,
        salt_bytes: int = DEFAULT_SALT_BYTES,
        hash_bytes: int = DEFAULT_HASH_BYTES,
        hash_name: str = "sha256",
    ):
        if iterations < 1 or salt_bytes < 1 or hash_bytes < 1:
            raise ValueError("iterations, salt_bytes and hash_bytes must be positive")
        self.iterations = iterations
        self.salt_bytes = salt_bytes
        self.hash_bytes = hash_bytes
        self.hash_name = hash_name

    def hash_password(self, password: str, salt: Optional[str] = None) -> Credential:
        """Derive a credential from ``password``.

        Args:
            password: Plaintext password. Empty strings are accepted.
            salt: Hex-encoded salt to reuse. A fresh random salt is generated
                when omitted or empty.

        Raises:
            InvalidInputError: password is missing or not text.
            InvalidSaltError: salt is not valid hex.
        """
        if password is None:
            raise InvalidInputError()
        if not isinstance(password, str):
            raise InvalidInputError("Password must be a string")

        salt_raw = self._decode_salt(salt) if salt else secrets.token_bytes(self.salt_bytes)
        derived = hashlib.pbkdf2_hmac(
            self.hash_name,
            password.encode("utf-8"),
            salt_raw,
            self.iterations,
            dklen=self.hash_bytes,
        )
        return Credential(hash=derived.hex(), salt=salt_raw.hex())

    def verify_password(self, password: str, credential: Credential) -> bool:
        """Check ``password`` against a stored credential."""
        attempt = self.hash_password(password, credential.salt)
        return hmac.compare_digest(attempt.hash, credential.hash.lower())

    @staticmethod
    def _decode_salt(salt: str) -> bytes:
        if not isinstance(salt, str):
            raise InvalidSaltError("salt must be a hex string")
        try:
            return binascii.unhexlify(salt)
        except (binascii.Error, ValueError) as exc:
            raise InvalidSaltError(str(exc)) from None
