"""Shard worker for CipherBatch Toolkit.

A worker walks its shard in submission order: read the source, apply the
transform, write the output under a freshly generated name.  A failure on
one file is recorded and the worker moves on to the next job.  Workers
share nothing with each other; output names are unique by construction
(millisecond timestamp plus a random token), so no locking is needed.
"""

from __future__ import annotations

import logging
import secrets
import string
import time
from pathlib import Path, PurePath
from typing import Optional

from ..batch.models import Direction, ErrorKind, Failure, FileJob, FileResult, Shard, ShardReport
from ..cipher.engine import apply

logger = logging.getLogger(__name__)

TOKEN_ALPHABET = string.digits + string.ascii_lowercase
TOKEN_LENGTH = 9


def unique_token() -> str:
    return ''.join(secrets.choice(TOKEN_ALPHABET) for _ in range(TOKEN_LENGTH))


def output_name(direction: Direction, original_name: str, now_ms: Optional[int] = None) -> str:
    """Build ``{direction}_{epochMillis}_{token}_{originalName}``.

    Only the final component of ``original_name`` is kept so a job can
    never write outside the output directory.
    """
    if now_ms is None:
        now_ms = time.time_ns() // 1_000_000
    base = PurePath(original_name.replace('\\', '/')).name or 'unnamed'
    return f'{direction.value}_{now_ms}_{unique_token()}_{base}'


def process_job(job: FileJob, output_dir: Path) -> FileResult | Failure:
    """Transform a single file, returning its result or its failure."""
    try:
        content = job.source.read_bytes()
    except OSError as exc:
        return Failure(job.original_name, ErrorKind.SOURCE_UNREADABLE, str(exc))
    try:
        processed = apply(content, job.shift, decrypt=job.direction.decrypt)
    except (TypeError, ValueError) as exc:
        return Failure(job.original_name, ErrorKind.TRANSFORM_FAILURE, str(exc))
    name = output_name(job.direction, job.original_name)
    try:
        # 'x' mode: an output is written once and never replaced
        with (output_dir / name).open('xb') as f:
            f.write(processed)
    except OSError as exc:
        return Failure(job.original_name, ErrorKind.DESTINATION_WRITE_FAILURE, str(exc))
    return FileResult(
        original_name=job.original_name,
        output_ref=name,
        byte_size=len(content),
        direction=job.direction,
    )


def run_shard(shard: Shard, output_dir: Path) -> ShardReport:
    """Process every job of ``shard`` in order and collect the outcome."""
    report = ShardReport()
    for job in shard:
        outcome = process_job(job, output_dir)
        if isinstance(outcome, Failure):
            logger.warning('%s failed (%s): %s', job.original_name, outcome.error_kind.value, outcome.message)
            report.failures.append(outcome)
        else:
            logger.debug('%s -> %s', job.original_name, outcome.output_ref)
            report.results.append(outcome)
    return report
