"""Password hashing for user registration and login."""

from lightbnb.auth.passwords import hash_password, verify_password

__all__ = ["hash_password", "verify_password"]
