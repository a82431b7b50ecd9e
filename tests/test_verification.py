"""Tests for verification.engine."""

from __future__ import annotations

import pytest

from cipherbatch.batch.models import Direction
from cipherbatch.cipher.engine import encrypt
from cipherbatch.verification.engine import checksum_bytes, compute_checksum, verify_roundtrip


@pytest.mark.parametrize('algo', ['md5', 'sha1', 'xxh128'])
def test_file_and_bytes_checksums_agree(tmp_path, algo):
    path = tmp_path / 'data.bin'
    path.write_bytes(b'x' * 20000)
    assert compute_checksum(path, algo) == checksum_bytes(b'x' * 20000, algo)


def test_unsupported_algorithm(tmp_path):
    with pytest.raises(ValueError):
        checksum_bytes(b'', 'crc7')


@pytest.mark.parametrize('algo', [None, 'xxh128'])
def test_verify_encrypted_output(tmp_path, algo):
    src = tmp_path / 'plain.txt'
    out = tmp_path / 'enc.txt'
    src.write_bytes(b'Attack at dawn')
    out.write_bytes(encrypt(b'Attack at dawn', 9))
    assert verify_roundtrip(src, out, 9, Direction.ENCRYPT, algo)
    assert not verify_roundtrip(src, out, 8, Direction.ENCRYPT, algo)


def test_verify_decrypted_output(tmp_path):
    src = tmp_path / 'cipher.txt'
    out = tmp_path / 'plain.txt'
    src.write_bytes(b'Khoor')
    out.write_bytes(b'Hello')
    assert verify_roundtrip(src, out, 3, Direction.DECRYPT)


def test_missing_file(tmp_path):
    assert not verify_roundtrip(tmp_path / 'a', tmp_path / 'b', 3)
