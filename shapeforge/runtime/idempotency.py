# shapeforge/runtime/idempotency.py
"""
Idempotency tokens.

Generated clients fill ``@idempotencyToken`` members with a UUID v4 built
from 128 random bits. The formatting is done by hand so that a fixed seed
produces a known token in tests.
"""

from __future__ import annotations

import secrets
from typing import Optional

_HEX = "0123456789abcdef"
_DASHES = frozenset({8, 13, 18, 23})
_MAX_U128 = (1 << 128) - 1


def uuid_v4(value: int) -> str:
    """
    Format 128 bits as a version-4 UUID string.

    Nibbles are taken from the low end of ``value``; the version nibble is
    forced to ``4`` and the variant nibble gets its high bit set.

    Examples:
        >>> uuid_v4(0)
        '00000000-0000-4000-8000-000000000000'
        >>> uuid_v4(12341234)
        '2ff4cb00-0000-4000-8000-000000000000'
    """
    if value < 0 or value > _MAX_U128:
        raise ValueError("value must fit in 128 unsigned bits")

    out = []
    nibble_index = 0
    for position in range(36):
        if position in _DASHES:
            out.append("-")
        elif position == 14:
            out.append("4")
        else:
            nibble = (value >> (nibble_index * 4)) & 0xF
            if position == 19:
                nibble |= 0x8
            out.append(_HEX[nibble])
            nibble_index += 1
    return "".join(out)


class IdempotencyTokenProvider:
    """
    Source of idempotency tokens.

    Examples:
        >>> IdempotencyTokenProvider.fixed("00000000-0000-4000-8000-000000000000").make_idempotency_token()
        '00000000-0000-4000-8000-000000000000'
    """

    def __init__(self, fixed_token: Optional[str] = None):
        self._fixed = fixed_token

    @classmethod
    def random(cls) -> "IdempotencyTokenProvider":
        return cls()

    @classmethod
    def fixed(cls, token: str) -> "IdempotencyTokenProvider":
        return cls(fixed_token=token)

    def make_idempotency_token(self) -> str:
        if self._fixed is not None:
            return self._fixed
        return uuid_v4(secrets.randbits(128))


def default_provider() -> IdempotencyTokenProvider:
    return IdempotencyTokenProvider.random()


__all__ = ["uuid_v4", "IdempotencyTokenProvider", "default_provider"]
