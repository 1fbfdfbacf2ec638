"""
Password hashing utilities using bcrypt.
"""

from typing import Optional

import bcrypt

from portfolio_api.config import get_settings


class PasswordHasher:
    """One-way password hashing and comparison."""

    def __init__(self, rounds: Optional[int] = None):
        self.rounds = rounds or get_settings().bcrypt_rounds

    @staticmethod
    def _encode(password: str) -> bytes:
        """
        Encode and truncate to 72 bytes.

        bcrypt only looks at the first 72 bytes, and recent releases refuse
        longer input outright.
        """
        return password.encode("utf-8")[:72]

    def hash(self, password: str) -> str:
        """
        Hash a password using bcrypt.

        Args:
            password: Plain text password

        Returns:
            Hashed password string
        """
        salt = bcrypt.gensalt(rounds=self.rounds)
        return bcrypt.hashpw(self._encode(password), salt).decode("utf-8")

    def verify(self, plain_password: str, hashed_password: str) -> bool:
        """
        Verify a password against its hash.

        A malformed stored hash counts as a mismatch.
        """
        try:
            return bcrypt.checkpw(self._encode(plain_password), hashed_password.encode("utf-8"))
        except ValueError:
            return False


# Convenience functions
def hash_password(password: str) -> str:
    """Hash a password."""
    return PasswordHasher().hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password."""
    return PasswordHasher().verify(plain_password, hashed_password)
