"""bcrypt helpers for the opaque ``users.password`` column.

The query service never interprets the stored value; these helpers are used
by ``register_user`` and ``authenticate_user`` only.
"""

import bcrypt

# bcrypt only looks at the first 72 bytes of its input.
MAX_PASSWORD_BYTES = 72


def _encode(password: str) -> bytes:
    encoded = password.encode("utf-8")
    if len(encoded) > MAX_PASSWORD_BYTES:
        raise ValueError(f"password must be at most {MAX_PASSWORD_BYTES} bytes when UTF-8 encoded")
    return encoded


def hash_password(password: str) -> str:
    """Hash a plain-text password with a fresh bcrypt salt.

    Raises:
        ValueError: if the password is longer than 72 bytes.
    """
    return bcrypt.hashpw(_encode(password), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, stored_password: str) -> bool:
    """Check a plain-text password against a stored bcrypt hash.

    A stored value that is not a bcrypt hash never matches.
    """
    try:
        return bcrypt.checkpw(_encode(plain_password), stored_password.encode("utf-8"))
    except ValueError:
        return False
