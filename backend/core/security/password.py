"""
Password hashing utilities using bcrypt.
"""

from passlib.context import CryptContext


class PasswordHasher:
    """Password hashing and verification using bcrypt."""

    def __init__(self, rounds: int = 12):
        self._context = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=rounds,
        )
        self._dummy_hash: str | None = None

    def hash(self, password: str) -> str:
        """Hash a password using bcrypt."""
        return self._context.hash(password)

    def verify(self, plain_password: str, hashed_password: str) -> bool:
        """Verify a password against a hash."""
        return self._context.verify(plain_password, hashed_password)

    def verify_dummy(self, plain_password: str) -> bool:
        """
        Burn the same bcrypt work as a real check.

        Used when the email is unknown so login latency does not reveal
        which addresses are registered. Always returns False.
        """
        if self._dummy_hash is None:
            self._dummy_hash = self.hash("dummy-password-for-timing")
        self._context.verify(plain_password, self._dummy_hash)
        return False


# Singleton instance
password_hasher = PasswordHasher()
