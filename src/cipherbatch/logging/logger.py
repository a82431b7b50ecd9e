"""Run logs for CipherBatch Toolkit.

Provides simple helpers to write CSV and JSON logs of processed batches.
The ``CSVLogger`` writes each record immediately, while ``JSONLogger``
stores outcomes in a list and writes them to disk when flushed.
"""

from __future__ import annotations

import csv
import json
import logging
import uuid
from pathlib import Path
from typing import Any, List, Optional

from rich.logging import RichHandler

from ..batch.models import BatchOutcome

FIELDNAMES = [
    'run_id',
    'method',
    'elapsed_ms',
    'original_name',
    'status',
    'output_ref',
    'size_bytes',
    'error_kind',
    'error_msg',
]


def configure_logging(verbose: bool = False) -> None:
    """Route the ``cipherbatch`` loggers to a rich console handler."""
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format='%(message)s',
        datefmt='[%X]',
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
        force=True,
    )


def new_run_id() -> str:
    return uuid.uuid4().hex[:12]


class CSVLogger:
    def __init__(self, path: Path):
        self.path = path
        self.file = path.open('w', newline='', encoding='utf-8')
        self.writer = csv.DictWriter(self.file, fieldnames=FIELDNAMES)
        self.writer.writeheader()

    def log_outcome(self, outcome: BatchOutcome, run_id: Optional[str] = None) -> None:
        run_id = run_id or new_run_id()
        common = {
            'run_id': run_id,
            'method': outcome.strategy.value,
            'elapsed_ms': outcome.elapsed_ms,
        }
        for result in outcome.results:
            self.writer.writerow({
                **common,
                'original_name': result.original_name,
                'status': 'ok',
                'output_ref': result.output_ref,
                'size_bytes': result.byte_size,
                'error_kind': '',
                'error_msg': '',
            })
        for failure in outcome.failures:
            self.writer.writerow({
                **common,
                'original_name': failure.original_name,
                'status': 'failed',
                'output_ref': '',
                'size_bytes': '',
                'error_kind': failure.error_kind.value,
                'error_msg': failure.message,
            })
        self.file.flush()

    def close(self) -> None:
        self.file.close()


class JSONLogger:
    def __init__(self, path: Path):
        self.path = path
        self.records: List[Any] = []

    def add_outcome(self, outcome: BatchOutcome, run_id: Optional[str] = None) -> None:
        record = outcome.to_dict()
        record['run_id'] = run_id or new_run_id()
        self.records.append(record)

    def flush(self) -> None:
        with self.path.open('w', encoding='utf-8') as f:
            json.dump(self.records, f, indent=2)
