"""
Encoded user ids.

Internal integer primary keys never leave the API as-is; responses carry a
reversible Sqids token instead (minimum length 8, URL-safe alphabet).
"""

import sys
from typing import Optional

from sqids import Sqids

from jobapp.core.settings import settings

MAX_ENCODABLE_ID = sys.maxsize


class IdObfuscator:
    """Reversible mapping between internal ids and external tokens."""

    def __init__(self, alphabet: Optional[str] = None, min_length: int = 8):
        options = {"min_length": min_length}
        if alphabet:
            options["alphabet"] = alphabet
        self._sqids = Sqids(**options)
        self.min_length = min_length

    def encode(self, internal_id: int) -> str:
        """
        Encode a non-negative integer id.

        Raises:
            ValueError: if the id is negative, too large or not an int
        """
        if isinstance(internal_id, bool) or not isinstance(internal_id, int):
            raise ValueError(f"Cannot encode non-integer id: {internal_id!r}")
        if internal_id < 0 or internal_id > MAX_ENCODABLE_ID:
            raise ValueError(f"Id out of encodable range: {internal_id}")
        return self._sqids.encode([internal_id])

    def decode(self, token: str) -> Optional[int]:
        """
        Decode a token back to its id.

        Returns None for empty, malformed or non-canonical tokens (a token is
        only accepted if encoding its decoded id gives the same token back).
        """
        if not isinstance(token, str) or not token:
            return None
        try:
            numbers = self._sqids.decode(token)
        except ValueError:
            return None
        if len(numbers) != 1:
            return None
        internal_id = numbers[0]
        if self._sqids.encode([internal_id]) != token:
            return None
        return internal_id

    def verify(self, internal_id: int, token: str) -> bool:
        try:
            return self.encode(internal_id) == token
        except ValueError:
            return False


_default = IdObfuscator(
    alphabet=settings.sqids_alphabet,
    min_length=settings.sqids_min_length,
)


def encode_user_id(user_id: int) -> str:
    return _default.encode(user_id)


def decode_user_id(token: str) -> Optional[int]:
    return _default.decode(token)


def verify_user_id(user_id: int, token: str) -> bool:
    return _default.verify(user_id, token)
