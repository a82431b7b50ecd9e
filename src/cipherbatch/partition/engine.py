"""Shard partitioning for CipherBatch Toolkit.

Jobs are cut into contiguous slices of ``ceil(len(jobs) / workers)``.
Front shards therefore absorb the remainder, and when the ceiling
overshoots, the trailing slices come out empty and are dropped.  This is
a fixed policy: jobs are never redistributed round-robin.
"""

from __future__ import annotations

import math
import os
from typing import List, Optional, Sequence

from ..batch.models import FileJob, Shard


def available_parallelism() -> int:
    return os.cpu_count() or 1


def worker_count(job_count: int, parallelism: Optional[int] = None) -> int:
    """Number of workers to request for ``job_count`` jobs.

    ``parallelism`` caps the pool; ``None`` means the host CPU count.
    """
    limit = parallelism if parallelism else available_parallelism()
    return max(1, min(limit, job_count))


def partition(jobs: Sequence[FileJob], workers: int) -> List[Shard]:
    """Split ``jobs`` into at most ``workers`` contiguous, non-empty shards.

    Concatenating the returned shards in order gives back ``jobs``.
    """
    if workers < 1:
        raise ValueError(f'worker count must be positive, got {workers}')
    if not jobs:
        return []
    size = math.ceil(len(jobs) / workers)
    shards = [tuple(jobs[i * size:(i + 1) * size]) for i in range(workers)]
    return [shard for shard in shards if shard]
