"""bcrypt password hashing."""

import asyncio
from typing import Optional

import bcrypt

# bcrypt ignores (or, in recent releases, rejects) anything past 72 bytes.
_BCRYPT_MAX_BYTES = 72


class PasswordHasher:
    """Salted one-way hashing with a configurable work factor."""

    def __init__(self, rounds: int = 10):
        self.rounds = rounds
        self._dummy_hash: Optional[bytes] = None

    def hash(self, password: str) -> str:
        """
        Hash a plaintext password.

        Args:
            password: Plain text password

        Returns:
            bcrypt hash as a UTF-8 string
        """
        return bcrypt.hashpw(_encode(password), bcrypt.gensalt(rounds=self.rounds)).decode("utf-8")

    def verify(self, password: str, password_hash: Optional[str]) -> bool:
        """
        Compare a plaintext password with a stored hash.

        A missing hash is checked against a throwaway hash so that unknown
        accounts take as long to reject as wrong passwords.
        """
        if password_hash is None:
            bcrypt.checkpw(_encode(password), self._get_dummy_hash())
            return False
        try:
            return bcrypt.checkpw(_encode(password), password_hash.encode("utf-8"))
        except ValueError:
            return False

    async def hash_async(self, password: str) -> str:
        return await asyncio.to_thread(self.hash, password)

    async def verify_async(self, password: str, password_hash: Optional[str]) -> bool:
        return await asyncio.to_thread(self.verify, password, password_hash)

    def _get_dummy_hash(self) -> bytes:
        if self._dummy_hash is None:
            self._dummy_hash = bcrypt.hashpw(b"dummy-password", bcrypt.gensalt(rounds=self.rounds))
        return self._dummy_hash


def _encode(password: str) -> bytes:
    return password.encode("utf-8")[:_BCRYPT_MAX_BYTES]
