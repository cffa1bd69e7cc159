"""
Password hashing for stored users.

User passwords are never written to the table in plain text; the User
entity's ``password`` attribute always holds a bcrypt hash.
"""

import bcrypt

# bcrypt only looks at the first 72 bytes
BCRYPT_MAX_BYTES = 72


def _password_bytes(password: str) -> bytes:
    password_bytes = password.encode('utf-8')
    if len(password_bytes) > BCRYPT_MAX_BYTES:
        password_bytes = password_bytes[:BCRYPT_MAX_BYTES]
    return password_bytes


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a plain password against a hashed password.

    Args:
        plain_password: The plain text password to verify
        hashed_password: The hashed password to compare against

    Returns:
        True if password matches, False otherwise (including a malformed hash)
    """
    if isinstance(hashed_password, str):
        hashed_bytes = hashed_password.encode('utf-8')
    else:
        hashed_bytes = hashed_password

    try:
        return bcrypt.checkpw(_password_bytes(plain_password), hashed_bytes)
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


def get_password_hash(password: str, rounds: int = 12) -> str:
    """
    Hash a password using bcrypt.

    Args:
        password: Plain text password to hash
        rounds: bcrypt cost factor

    Returns:
        Hashed password string

    Note:
        Bcrypt has a 72-byte password limit. Passwords are automatically
        truncated if necessary (unlikely for typical passwords).
    """
    salt = bcrypt.gensalt(rounds=rounds)
    hashed = bcrypt.hashpw(_password_bytes(password), salt)
    return hashed.decode('utf-8')


def is_password_hash(value: str) -> bool:
    """Return True when ``value`` looks like a bcrypt hash ($2a$/$2b$/$2y$)."""
    return (
        isinstance(value, str)
        and len(value) == 60
        and value[:4] in ("$2a$", "$2b$", "$2y$")
    )
