"""Salted password hashing and verification."""

import base64
import binascii
import secrets

from passlib.hash import pbkdf2_sha512
from passlib.utils import consteq

# 512 bits of salt, stored alongside the hash
SALT_BYTES = 64
PBKDF2_ROUNDS = 25000

# Password hashing scheme; the salt is supplied per call
pwd_hasher = pbkdf2_sha512.using(rounds=PBKDF2_ROUNDS)


def generate_salt() -> bytes:
    """Generate a random per-user salt."""
    return secrets.token_bytes(SALT_BYTES)


def hash_password(password: str) -> tuple[str, str]:
    """
    Hash a password with a freshly generated salt.

    Args:
        password: Plaintext password

    Returns:
        tuple: (password_hash, password_salt)
            - password_hash: PBKDF2-SHA512 hash string
            - password_salt: The salt, base64 encoded
    """
    salt = generate_salt()
    password_hash = pwd_hasher.using(salt=salt).hash(password)
    return password_hash, base64.b64encode(salt).decode("ascii")


def verify_password(password: str, stored_hash: str, stored_salt: str) -> bool:
    """
    Verify a password against a stored hash and salt.

    An undecodable salt or hash, a hash made with a different salt, or a
    password that cannot be encoded counts as a failed verification.
    """
    try:
        salt = base64.b64decode(stored_salt, validate=True)
        parsed = pbkdf2_sha512.from_string(stored_hash)
    except (binascii.Error, ValueError):
        return False

    if not consteq(parsed.salt, salt):
        return False

    try:
        return pbkdf2_sha512.verify(password, stored_hash)
    except UnicodeEncodeError:
        return False
