"""
Password hashing with Argon2.

Hashes embed their own random salt and parameters, so only the encoded
string needs to be stored.
"""

import logging

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError, VerifyMismatchError

ph = PasswordHasher()

# Checked against when the account does not exist, so a failed login
# costs one Argon2 verification whether or not the email is registered
DUMMY_HASH = ph.hash("not-a-real-password")


def hash_password(plain: str) -> str:
    """
    Hash a clear-text password.

    Args:
        plain (str): The password as typed by the user.

    Returns:
        str: The encoded Argon2id hash, salt included.

    Raises:
        ValueError: If the password is empty.
    """
    if not plain:
        raise ValueError("Password must not be empty")
    return ph.hash(plain)


def verify_password(hash_value: str, plain: str) -> bool:
    """
    Check a clear-text password against a stored hash.

    A mismatch and a malformed stored hash both count as a failed check.
    """
    if not hash_value or not plain:
        return False
    try:
        return ph.verify(hash_value, plain)
    except VerifyMismatchError:
        return False
    except (InvalidHashError, VerificationError):
        logging.warning("[Auth] Stored password hash could not be verified")
        return False
