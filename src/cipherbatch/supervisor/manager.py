"""Execution strategies for CipherBatch Toolkit.

Three interchangeable executors share one contract, ``execute(jobs)``,
and differ only in where shards run:

* ``SequentialExecutor`` runs the whole batch as one shard in the
  caller's thread.
* ``ThreadedExecutor`` starts one thread per shard and joins them all.
* ``SubprocessExecutor`` starts one child interpreter per shard.  The
  shard goes to the child over stdin and the child's report comes back
  as one JSON message on stdout.

Every join is bounded by ``RunConfig.join_timeout``.  A shard whose
worker crashed or did not finish in time is reported wholesale as failed,
so the caller always receives a complete ``BatchOutcome``.
"""

from __future__ import annotations

import json
import logging
import os
import subprocess
import sys
import threading
import time
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Sequence, TextIO, Type

from ..batch.models import BatchOutcome, ErrorKind, FileJob, Shard, ShardReport, Strategy
from ..config_loader import RunConfig
from ..errors import EmptyBatch
from ..partition.engine import partition, worker_count
from ..worker.child import build_payload
from ..worker.engine import run_shard

logger = logging.getLogger(__name__)

# src/ directory holding the cipherbatch package, made importable for children
_PACKAGE_ROOT = Path(__file__).resolve().parents[2]


def _feed(stdin: TextIO, payload: str) -> None:
    """Write a shard payload to a child's stdin and close it."""
    try:
        stdin.write(payload)
        stdin.close()
    except (OSError, ValueError):
        # child exited or was killed before reading; its exit status tells the rest
        logger.debug('Child stdin closed before the shard was delivered')


class BatchExecutor:
    """Base class: partition, dispatch, join, merge, time."""

    strategy: Strategy

    def __init__(self, config: RunConfig):
        self.config = config

    def plan(self, jobs: Sequence[FileJob]) -> List[Shard]:
        return partition(jobs, worker_count(len(jobs), self.config.max_workers))

    def run_shards(self, shards: List[Shard]) -> List[ShardReport]:
        raise NotImplementedError

    def execute(self, jobs: Sequence[FileJob]) -> BatchOutcome:
        """Process ``jobs`` and return the merged, timed outcome."""
        if not jobs:
            raise EmptyBatch()
        try:
            self.config.output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            # workers record the resulting write failures per file
            logger.warning('Cannot create output directory %s: %s', self.config.output_dir, exc)
        start = time.perf_counter()
        shards = self.plan(jobs)
        logger.debug('%s: dispatching %d jobs in shards of %s', self.strategy.label, len(jobs), [len(s) for s in shards])
        reports = self.run_shards(shards)
        elapsed_ms = int((time.perf_counter() - start) * 1000)
        outcome = BatchOutcome(
            strategy=self.strategy,
            elapsed_ms=elapsed_ms,
            results=tuple(r for report in reports for r in report.results),
            failures=tuple(f for report in reports for f in report.failures),
            worker_count=len(shards),
            shard_sizes=tuple(len(s) for s in shards),
        )
        logger.info(
            '%s finished in %d ms: %d ok, %d failed',
            self.strategy.label, elapsed_ms, outcome.succeeded, outcome.failed,
        )
        return outcome


class SequentialExecutor(BatchExecutor):
    strategy = Strategy.SEQUENTIAL

    def plan(self, jobs: Sequence[FileJob]) -> List[Shard]:
        return [tuple(jobs)]

    def run_shards(self, shards: List[Shard]) -> List[ShardReport]:
        return [run_shard(shard, self.config.output_dir) for shard in shards]


class ThreadedExecutor(BatchExecutor):
    strategy = Strategy.THREADPOOL

    def run_shards(self, shards: List[Shard]) -> List[ShardReport]:
        reports: List[Optional[ShardReport]] = [None] * len(shards)
        errors: Dict[int, Exception] = {}

        def work(index: int, shard: Shard) -> None:
            try:
                reports[index] = run_shard(shard, self.config.output_dir)
            except Exception as exc:
                logger.exception('Worker %d crashed', index)
                errors[index] = exc

        threads = [
            threading.Thread(target=work, args=(i, shard), name=f'cipherbatch-worker-{i}', daemon=True)
            for i, shard in enumerate(shards)
        ]
        for t in threads:
            t.start()
        deadline = time.monotonic() + self.config.join_timeout
        for t in threads:
            t.join(max(0.0, deadline - time.monotonic()))

        merged: List[ShardReport] = []
        for i, (t, shard) in enumerate(zip(threads, shards)):
            if t.is_alive():
                logger.warning('Worker %d did not finish within %.1fs', i, self.config.join_timeout)
                merged.append(ShardReport.failed(
                    shard, ErrorKind.WORKER_TIMED_OUT, f'worker exceeded {self.config.join_timeout}s'))
            elif i in errors:
                merged.append(ShardReport.failed(
                    shard, ErrorKind.WORKER_CRASHED, f'Worker error: {errors[i]}'))
            elif reports[i] is None:
                merged.append(ShardReport.failed(
                    shard, ErrorKind.WORKER_CRASHED, 'worker terminated without a report'))
            else:
                merged.append(reports[i])
        return merged


class SubprocessExecutor(BatchExecutor):
    strategy = Strategy.PROCESSPOOL

    def command(self) -> List[str]:
        return [sys.executable, '-m', 'cipherbatch.worker.child']

    def child_env(self) -> Dict[str, str]:
        env = dict(os.environ)
        paths = [str(_PACKAGE_ROOT)]
        if env.get('PYTHONPATH'):
            paths.append(env['PYTHONPATH'])
        env['PYTHONPATH'] = os.pathsep.join(paths)
        return env

    def spawn(self, shard: Shard) -> subprocess.Popen:
        proc = subprocess.Popen(
            self.command(),
            stdin=subprocess.PIPE,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            encoding='utf-8',
            env=self.child_env(),
        )
        # communicate() only drains stdout/stderr; the writer owns stdin
        stdin, proc.stdin = proc.stdin, None
        writer = threading.Thread(
            target=_feed,
            args=(stdin, build_payload(shard, self.config.output_dir)),
            name=f'cipherbatch-feed-{proc.pid}',
            daemon=True,
        )
        writer.start()
        return proc

    def collect(self, proc: subprocess.Popen, shard: Shard, deadline: float) -> ShardReport:
        try:
            out, err = proc.communicate(timeout=max(0.0, deadline - time.monotonic()))
        except subprocess.TimeoutExpired:
            proc.kill()
            proc.communicate()
            logger.warning('Child %d did not finish within %.1fs', proc.pid, self.config.join_timeout)
            return ShardReport.failed(shard, ErrorKind.WORKER_TIMED_OUT, f'worker exceeded {self.config.join_timeout}s')
        if proc.returncode != 0:
            logger.warning('Child %d exited with code %d: %s', proc.pid, proc.returncode, err.strip())
            return ShardReport.failed(shard, ErrorKind.WORKER_CRASHED, f'Process exited with code {proc.returncode}')
        try:
            return ShardReport.from_dict(json.loads(out))
        except (ValueError, KeyError, TypeError) as exc:
            logger.warning('Child %d sent an unreadable report: %s', proc.pid, exc)
            return ShardReport.failed(shard, ErrorKind.WORKER_CRASHED, f'unreadable worker report: {exc}')

    def run_shards(self, shards: List[Shard]) -> List[ShardReport]:
        deadline = time.monotonic() + self.config.join_timeout
        procs: List[Optional[subprocess.Popen]] = []
        for shard in shards:
            try:
                procs.append(self.spawn(shard))
            except OSError as exc:
                logger.error('Cannot start worker process: %s', exc)
                procs.append(None)
        reports: List[ShardReport] = []
        for proc, shard in zip(procs, shards):
            if proc is None:
                reports.append(ShardReport.failed(shard, ErrorKind.WORKER_CRASHED, 'worker process could not start'))
            else:
                reports.append(self.collect(proc, shard, deadline))
        return reports


EXECUTORS: Dict[Strategy, Type[BatchExecutor]] = {
    Strategy.SEQUENTIAL: SequentialExecutor,
    Strategy.THREADPOOL: ThreadedExecutor,
    Strategy.PROCESSPOOL: SubprocessExecutor,
}


def create_executor(strategy: 'Strategy | str', config: RunConfig) -> BatchExecutor:
    return EXECUTORS[Strategy.parse(strategy)](config)


def process_batch(jobs: Iterable[FileJob], strategy: 'Strategy | str', config: RunConfig) -> BatchOutcome:
    """Validate a submission and run it with the chosen strategy.

    Raises ``EmptyBatch`` or ``InvalidStrategy`` before any shard is
    created; otherwise always returns a ``BatchOutcome``.
    """
    jobs = list(jobs)
    if not jobs:
        raise EmptyBatch()
    return create_executor(strategy, config).execute(jobs)
