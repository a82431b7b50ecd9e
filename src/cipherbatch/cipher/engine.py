"""Caesar transform for CipherBatch Toolkit.

Rotates ASCII letters within their own case and leaves every other byte
alone, so any input (including non-UTF-8 bytes) round-trips exactly.
This is a toy substitution, not encryption in any meaningful sense.
"""

from __future__ import annotations

import string
from functools import lru_cache

ALPHABET_SIZE = 26


@lru_cache(maxsize=ALPHABET_SIZE)
def _table(offset: int) -> bytes:
    lower = string.ascii_lowercase
    upper = string.ascii_uppercase
    rotated = lower[offset:] + lower[:offset] + upper[offset:] + upper[:offset]
    return bytes.maketrans((lower + upper).encode('ascii'), rotated.encode('ascii'))


def effective_shift(shift: int, decrypt: bool = False) -> int:
    """Normalize ``shift`` into ``[0, 26)``, negating it for decryption."""
    return (-shift if decrypt else shift) % ALPHABET_SIZE


def apply(data: bytes, shift: int, decrypt: bool = False) -> bytes:
    """Rotate the letters of ``data`` by ``shift`` positions.

    ``apply(apply(data, s), s, decrypt=True) == data`` holds for every
    ``data`` and ``s``.
    """
    return data.translate(_table(effective_shift(shift, decrypt)))


def encrypt(data: bytes, shift: int) -> bytes:
    return apply(data, shift)


def decrypt(data: bytes, shift: int) -> bytes:
    return apply(data, shift, decrypt=True)
