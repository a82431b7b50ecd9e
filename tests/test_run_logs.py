"""Tests for logging.logger run logs."""

from __future__ import annotations

import csv
import json

from cipherbatch.batch.models import BatchOutcome, Direction, ErrorKind, Failure, FileResult, Strategy
from cipherbatch.logging.logger import CSVLogger, JSONLogger


def _outcome():
    return BatchOutcome(
        strategy=Strategy.PROCESSPOOL,
        elapsed_ms=12,
        results=(FileResult('a.txt', 'encrypt_1_abcdefghi_a.txt', 5, Direction.ENCRYPT),),
        failures=(Failure('b.txt', ErrorKind.WORKER_CRASHED, 'Process exited with code 1'),),
    )


def test_csv_log(tmp_path):
    path = tmp_path / 'run.csv'
    logger = CSVLogger(path)
    logger.log_outcome(_outcome(), run_id='r1')
    logger.close()
    with path.open(newline='', encoding='utf-8') as f:
        rows = list(csv.DictReader(f))
    assert [(r['original_name'], r['status']) for r in rows] == [('a.txt', 'ok'), ('b.txt', 'failed')]
    assert rows[1]['error_kind'] == 'WorkerCrashed'
    assert {r['run_id'] for r in rows} == {'r1'}
    assert rows[0]['method'] == 'processpool'


def test_json_log(tmp_path):
    path = tmp_path / 'run.json'
    logger = JSONLogger(path)
    logger.add_outcome(_outcome(), run_id='r2')
    logger.flush()
    data = json.loads(path.read_text(encoding='utf-8'))
    assert data[0]['run_id'] == 'r2'
    assert data[0]['elapsed_ms'] == 12
    assert data[0]['results'][0]['output_ref'] == 'encrypt_1_abcdefghi_a.txt'
