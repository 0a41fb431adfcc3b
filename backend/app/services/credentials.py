"""
Bookstore Backend — Credential Encoding
=========================================

What:  Encodes passwords for storage and checks login attempts against them.
How:   Base64 over the UTF-8 bytes of the password. Login decodes the stored
       value and compares it byte-for-byte with the submitted password.

SECURITY WARNING:
    This is a reversible encoding, NOT a password hash. Anyone who can read
    `user_accounts.password_encoded` can recover every password. Existing
    rows depend on decode-and-compare, so switching to a one-way hash
    (bcrypt/argon2) means changing `passwords_match` to hash-and-compare
    and migrating stored values. That migration is not done here.
"""

import base64
import binascii
import hmac

from app.exceptions import CredentialDecodeError


def encode_password(raw: str) -> str:
    """Return the Base64 text form of `raw` (UTF-8)."""
    return base64.b64encode(raw.encode("utf-8")).decode("ascii")


def decode_password(encoded: str) -> str:
    """
    Recover the plaintext from `encoded`.

    Raises:
        CredentialDecodeError: value is not valid Base64 or not UTF-8.
    """
    try:
        return base64.b64decode(encoded.encode("ascii"), validate=True).decode("utf-8")
    except (binascii.Error, UnicodeError, ValueError) as e:
        raise CredentialDecodeError(context={"error": type(e).__name__}) from e


def passwords_match(encoded: str, candidate: str) -> bool:
    """
    Check a login attempt against a stored credential.

    Exact, case-sensitive comparison of the UTF-8 bytes, done in constant
    time. A stored value that cannot be decoded never matches.
    """
    try:
        stored = decode_password(encoded)
    except CredentialDecodeError:
        return False
    return hmac.compare_digest(stored.encode("utf-8"), candidate.encode("utf-8"))
