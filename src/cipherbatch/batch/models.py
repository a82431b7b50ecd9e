"""Data model shared by the partitioner, workers and executors.

Everything that crosses the process boundary (``FileJob`` in,
``ShardReport`` out) converts to and from plain dictionaries so it can be
sent as a single JSON message.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Tuple

from ..errors import InvalidStrategy


class Direction(Enum):
    ENCRYPT = 'encrypt'
    DECRYPT = 'decrypt'

    @property
    def decrypt(self) -> bool:
        return self is Direction.DECRYPT

    @property
    def reverse(self) -> 'Direction':
        return Direction.ENCRYPT if self.decrypt else Direction.DECRYPT


class Strategy(Enum):
    SEQUENTIAL = 'sequential'
    THREADPOOL = 'threadpool'
    PROCESSPOOL = 'processpool'

    @classmethod
    def parse(cls, name: 'str | Strategy') -> 'Strategy':
        """Resolve a strategy name, accepting the legacy method names too."""
        if isinstance(name, Strategy):
            return name
        key = str(name).strip().lower()
        key = _LEGACY_NAMES.get(key, key)
        try:
            return cls(key)
        except ValueError:
            raise InvalidStrategy(str(name)) from None

    @property
    def label(self) -> str:
        return _LABELS[self]


_LEGACY_NAMES = {
    'multithreading': 'threadpool',
    'multiprocessing': 'processpool',
}

_LABELS = {
    Strategy.SEQUENTIAL: 'Sequential',
    Strategy.THREADPOOL: 'Worker Threads',
    Strategy.PROCESSPOOL: 'Child Processes',
}


class ErrorKind(Enum):
    SOURCE_UNREADABLE = 'SourceUnreadable'
    TRANSFORM_FAILURE = 'TransformFailure'
    DESTINATION_WRITE_FAILURE = 'DestinationWriteFailure'
    WORKER_CRASHED = 'WorkerCrashed'
    WORKER_TIMED_OUT = 'WorkerTimedOut'


@dataclass(frozen=True)
class FileJob:
    source: Path
    original_name: str
    direction: Direction
    shift: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            'source': str(self.source),
            'original_name': self.original_name,
            'direction': self.direction.value,
            'shift': self.shift,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'FileJob':
        return cls(
            source=Path(d['source']),
            original_name=d['original_name'],
            direction=Direction(d['direction']),
            shift=int(d['shift']),
        )


Shard = Tuple[FileJob, ...]


@dataclass(frozen=True)
class FileResult:
    original_name: str
    output_ref: str
    byte_size: int
    direction: Direction

    def to_dict(self) -> Dict[str, Any]:
        return {
            'original_name': self.original_name,
            'output_ref': self.output_ref,
            'byte_size': self.byte_size,
            'direction': self.direction.value,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'FileResult':
        return cls(
            original_name=d['original_name'],
            output_ref=d['output_ref'],
            byte_size=int(d['byte_size']),
            direction=Direction(d['direction']),
        )


@dataclass(frozen=True)
class Failure:
    original_name: str
    error_kind: ErrorKind
    message: str = ''

    def to_dict(self) -> Dict[str, Any]:
        return {
            'original_name': self.original_name,
            'error_kind': self.error_kind.value,
            'message': self.message,
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'Failure':
        return cls(
            original_name=d['original_name'],
            error_kind=ErrorKind(d['error_kind']),
            message=d.get('message', ''),
        )


@dataclass
class ShardReport:
    """Everything one worker produced for its shard."""

    results: List[FileResult] = field(default_factory=list)
    failures: List[Failure] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'results': [r.to_dict() for r in self.results],
            'failures': [f.to_dict() for f in self.failures],
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'ShardReport':
        return cls(
            results=[FileResult.from_dict(r) for r in d['results']],
            failures=[Failure.from_dict(f) for f in d['failures']],
        )

    @classmethod
    def failed(cls, shard: Shard, kind: ErrorKind, message: str) -> 'ShardReport':
        """Report every job of ``shard`` as failed with the same cause."""
        return cls(failures=[Failure(job.original_name, kind, message) for job in shard])


@dataclass(frozen=True)
class BatchOutcome:
    strategy: Strategy
    elapsed_ms: int
    results: Tuple[FileResult, ...]
    failures: Tuple[Failure, ...]
    worker_count: int = 1
    shard_sizes: Tuple[int, ...] = ()

    @property
    def succeeded(self) -> int:
        return len(self.results)

    @property
    def failed(self) -> int:
        return len(self.failures)

    @property
    def total(self) -> int:
        return self.succeeded + self.failed

    def to_dict(self) -> Dict[str, Any]:
        return {
            'strategy': self.strategy.value,
            'method': self.strategy.label,
            'elapsed_ms': self.elapsed_ms,
            'worker_count': self.worker_count,
            'shard_sizes': list(self.shard_sizes),
            'results': [r.to_dict() for r in self.results],
            'failures': [f.to_dict() for f in self.failures],
        }
