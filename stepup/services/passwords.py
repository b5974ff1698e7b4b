"""
Password encryption with method tags.

New credentials always use CURRENT_METHOD (bcrypt). Stored credentials carry the
tag of the method that produced them, so credentials imported or created under a
legacy method keep verifying after the current method changes.
"""

import base64
import binascii
import hashlib
import hmac
from collections.abc import Callable
from enum import Enum
from typing import NamedTuple

import bcrypt

from stepup.core.config import settings

# bcrypt only reads the first 72 bytes. Longer input is refused, never truncated.
BCRYPT_MAX_BYTES = 72
LEGACY_SALT_BYTES = 4


class PasswordEncryptionMethod(str, Enum):
    Bcrypt = "Bcrypt"
    SHA256 = "SHA256"
    SHA1 = "SHA1"
    MD5 = "MD5"


CURRENT_METHOD = PasswordEncryptionMethod.Bcrypt


class EncryptedCredential(NamedTuple):
    """Stored password: method tag plus cipher text."""

    method: PasswordEncryptionMethod
    cipher_text: str


class UnsupportedEncryptionMethodError(ValueError):
    """Raised for a method tag no verifier exists for (bad data, not a wrong password)."""

    def __init__(self, method: object) -> None:
        self.method = method
        super().__init__(f"Unsupported password encryption method: {method!r}")


class PasswordTooLongError(ValueError):
    """Raised when a password does not fit in bcrypt's 72-byte input."""

    def __init__(self, length: int) -> None:
        self.length = length
        super().__init__(f"Password is {length} bytes; at most {BCRYPT_MAX_BYTES} are supported")


def _bcrypt_bytes(plain_password: str) -> bytes:
    encoded = plain_password.encode("utf-8")
    if len(encoded) > BCRYPT_MAX_BYTES:
        raise PasswordTooLongError(len(encoded))
    return encoded


def _legacy_digest(method: PasswordEncryptionMethod, salt: bytes, plain_password: str) -> bytes:
    """Salted digest used by the legacy methods: H(salt + b"-" + password)."""
    return hashlib.new(method.value.lower(), salt + b"-" + plain_password.encode("utf-8")).digest()


def _verify_bcrypt(plain_password: str, cipher_text: str) -> bool:
    # A password over the bcrypt limit can never have been stored; PasswordTooLongError is a ValueError.
    try:
        return bcrypt.checkpw(_bcrypt_bytes(plain_password), cipher_text.encode("utf-8"))
    except (ValueError, TypeError):
        return False


def _legacy_verifier(method: PasswordEncryptionMethod) -> Callable[[str, str], bool]:
    def verify(plain_password: str, cipher_text: str) -> bool:
        try:
            decoded = base64.b64decode(cipher_text, validate=True)
        except (binascii.Error, ValueError):
            return False
        salt, expected = decoded[:LEGACY_SALT_BYTES], decoded[LEGACY_SALT_BYTES:]
        if len(salt) < LEGACY_SALT_BYTES or not expected:
            return False
        return hmac.compare_digest(_legacy_digest(method, salt, plain_password), expected)

    return verify


_VERIFIERS: dict[PasswordEncryptionMethod, Callable[[str, str], bool]] = {
    PasswordEncryptionMethod.Bcrypt: _verify_bcrypt,
    PasswordEncryptionMethod.SHA256: _legacy_verifier(PasswordEncryptionMethod.SHA256),
    PasswordEncryptionMethod.SHA1: _legacy_verifier(PasswordEncryptionMethod.SHA1),
    PasswordEncryptionMethod.MD5: _legacy_verifier(PasswordEncryptionMethod.MD5),
}

# Every method must have a verifier; adding an enum member without one fails at import.
_unverifiable = set(PasswordEncryptionMethod) - set(_VERIFIERS)
if _unverifiable:
    raise RuntimeError(
        f"No verifier registered for encryption methods: {sorted(m.value for m in _unverifiable)}"
    )


def parse_method(method: "PasswordEncryptionMethod | str") -> PasswordEncryptionMethod:
    """Turn a stored method tag into the enum; raises UnsupportedEncryptionMethodError."""
    try:
        return PasswordEncryptionMethod(method)
    except ValueError:
        raise UnsupportedEncryptionMethodError(method) from None


def encrypt_password(plain_password: str, rounds: int | None = None) -> EncryptedCredential:
    """
    Encrypt a plain password with the current method. Output is salted, so it differs per call.

    Raises PasswordTooLongError when the UTF-8 encoding is over BCRYPT_MAX_BYTES.
    """
    salt = bcrypt.gensalt(rounds=rounds or settings.BCRYPT_ROUNDS)
    cipher_text = bcrypt.hashpw(_bcrypt_bytes(plain_password), salt).decode("utf-8")
    return EncryptedCredential(method=CURRENT_METHOD, cipher_text=cipher_text)


def verify_password(credential: EncryptedCredential, plain_password: str) -> bool:
    """
    Check a plain password against a stored credential.

    Returns False for a wrong password or unreadable cipher text. Raises
    UnsupportedEncryptionMethodError only when the method tag is unknown.
    """
    method = parse_method(credential.method)
    return _VERIFIERS[method](plain_password, credential.cipher_text)


def needs_rehash(credential: EncryptedCredential) -> bool:
    """True when the credential was produced by a method other than the current one."""
    return parse_method(credential.method) is not CURRENT_METHOD
