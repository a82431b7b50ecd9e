"""Verification module for CipherBatch Toolkit.

Checks that a generated output really is the source transformed with the
given shift: the output is reversed in memory and compared with the
source, either byte for byte or through a checksum.
"""

from __future__ import annotations

import hashlib
from pathlib import Path
from typing import Optional

import xxhash

from ..batch.models import Direction
from ..cipher.engine import apply


def _hasher(algo: str):
    if algo.lower() == 'md5':
        return hashlib.md5()
    if algo.lower() == 'sha1':
        return hashlib.sha1()
    if algo.lower() == 'xxh128':
        return xxhash.xxh3_128()
    raise ValueError(f'Unsupported checksum algorithm: {algo}')


def checksum_bytes(data: bytes, algo: str) -> str:
    h = _hasher(algo)
    h.update(data)
    return h.hexdigest()


def compute_checksum(path: Path, algo: str) -> str:
    """Compute a checksum of a file using the given algorithm.

    Supported algorithms: ``md5``, ``sha1``, ``xxh128``.
    """
    h = _hasher(algo)
    with path.open('rb') as f:
        for chunk in iter(lambda: f.read(8192), b''):
            h.update(chunk)
    return h.hexdigest()


def verify_roundtrip(
    source: Path,
    output: Path,
    shift: int,
    direction: Direction = Direction.ENCRYPT,
    checksum_algo: Optional[str] = None,
) -> bool:
    """Return ``True`` if undoing ``direction`` on ``output`` gives ``source``.

    Missing files verify as ``False``.
    """
    try:
        original = source.read_bytes()
        restored = apply(output.read_bytes(), shift, decrypt=direction.reverse.decrypt)
    except FileNotFoundError:
        return False
    if len(original) != len(restored):
        return False
    if checksum_algo:
        return checksum_bytes(original, checksum_algo) == checksum_bytes(restored, checksum_algo)
    return original == restored
