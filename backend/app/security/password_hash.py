############################################################
#
# xarwiz-cms - Marketing Site Content Backend
#
# password_hash.py: Argon2 password hashing for author accounts
#
############################################################

"""Password hashing for author accounts.

Argon2id with parameters that put a single verification around 100ms on
commodity hardware, which is the point: brute forcing a leaked hash is slow.
"""

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError, VerifyMismatchError

_hasher = PasswordHasher(
    time_cost=3,  # Number of iterations
    memory_cost=65536,  # 64 MB
    parallelism=4,
    hash_len=32,
    salt_len=16,
)

# Verified against when the email is unknown so both failure paths cost the same
_DUMMY_HASH = _hasher.hash("xarwiz-timing-equalizer")


def hash_password(password: str) -> str:
    """
    Hash a password using Argon2id.

    Args:
        password: The plaintext password

    Returns:
        Argon2id hash string (includes salt and parameters)
    """
    if not password:
        raise ValueError("Refusing to hash an empty password")
    return _hasher.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    """
    Verify a password against a stored hash.

    Args:
        password: The plaintext password to verify
        password_hash: The stored Argon2id hash

    Returns:
        True if the password matches
    """
    if not password or not password_hash:
        return False
    try:
        return _hasher.verify(password_hash, password)
    except VerifyMismatchError:
        return False
    except (VerificationError, InvalidHashError):
        return False


def burn_verification(password: str) -> None:
    """Spend one verification's worth of time without a real hash."""
    verify_password(password or "x", _DUMMY_HASH)


def needs_rehash(password_hash: str) -> bool:
    """True when the stored hash was made with outdated parameters."""
    return _hasher.check_needs_rehash(password_hash)
