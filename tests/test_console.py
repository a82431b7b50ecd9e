"""Tests for the click CLI."""

from __future__ import annotations

import json

import pytest
from click.testing import CliRunner
from rich.console import Console

from cipherbatch.batch.models import FileJob
from cipherbatch.console import main
from cipherbatch.console.main import cli


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def inputs(input_dir):
    for i in range(3):
        (input_dir / f'doc{i}.txt').write_text('Hello', encoding='utf-8')
    return input_dir


def _base(tmp_path):
    return ['--config', str(tmp_path / 'none.yml'), '--output-dir', str(tmp_path / 'out')]


@pytest.mark.parametrize('strategy', ['sequential', 'threadpool', 'processpool'])
def test_process_writes_outputs(runner, tmp_path, inputs, strategy):
    result = runner.invoke(cli, ['process', str(inputs), '--strategy', strategy, *_base(tmp_path)])
    assert result.exit_code == 0, result.output
    outputs = sorted((tmp_path / 'out').iterdir())
    assert len(outputs) == 3
    assert all(p.name.startswith('encrypt_') for p in outputs)
    assert all(p.read_text() == 'Khoor' for p in outputs)


def test_process_writes_run_logs(runner, tmp_path, inputs):
    csv_path = tmp_path / 'run.csv'
    json_path = tmp_path / 'run.json'
    result = runner.invoke(cli, [
        'process', str(inputs), '--csv-log', str(csv_path), '--json-log', str(json_path), *_base(tmp_path),
    ])
    assert result.exit_code == 0, result.output
    assert len(csv_path.read_text().splitlines()) == 4
    assert json.loads(json_path.read_text())[0]['strategy'] == 'sequential'


def test_process_with_failed_file_exits_partial(runner, tmp_path, inputs, monkeypatch):
    real_build_jobs = main.build_jobs

    def with_missing(paths, direction, shift, extensions):
        jobs = real_build_jobs(paths, direction, shift, extensions)
        return jobs + [FileJob(tmp_path / 'missing.txt', 'missing.txt', direction, shift)]

    monkeypatch.setattr(main, 'build_jobs', with_missing)
    monkeypatch.setattr(main, 'console', Console(width=250))
    result = runner.invoke(cli, ['process', str(inputs), *_base(tmp_path)])
    assert result.exit_code == 2
    assert 'missing.txt' in result.output
    assert 'SourceUnreadable' in result.output
    assert len(list((tmp_path / 'out').iterdir())) == 3


def test_process_invalid_strategy(runner, tmp_path, inputs):
    result = runner.invoke(cli, ['process', str(inputs), '--strategy', 'gpu', *_base(tmp_path)])
    assert result.exit_code == 1
    assert 'Invalid processing method' in result.output


def test_process_empty_batch(runner, tmp_path):
    empty = tmp_path / 'empty'
    empty.mkdir()
    result = runner.invoke(cli, ['process', str(empty), *_base(tmp_path)])
    assert result.exit_code == 1
    assert 'No files provided' in result.output


def test_compare_runs_every_strategy(runner, tmp_path, inputs):
    result = runner.invoke(cli, ['compare', str(inputs), *_base(tmp_path)])
    assert result.exit_code == 0, result.output
    assert len(list((tmp_path / 'out').iterdir())) == 9


def test_fetch(runner, tmp_path):
    out = tmp_path / 'processed'
    out.mkdir()
    (out / 'encrypt_1_abcdefghi_a.txt').write_text('Khoor')
    config = tmp_path / 'config.yml'
    config.write_text(f'output_dir: {out}\n', encoding='utf-8')
    found = runner.invoke(cli, ['fetch', 'encrypt_1_abcdefghi_a.txt', '--config', str(config)])
    assert found.exit_code == 0
    assert found.output.strip().endswith('encrypt_1_abcdefghi_a.txt')
    missing = runner.invoke(cli, ['fetch', 'nope.txt', '--config', str(config)])
    assert missing.exit_code == 1
    assert 'File not found' in missing.output


def test_verify(runner, tmp_path):
    src = tmp_path / 'a.txt'
    out = tmp_path / 'b.txt'
    src.write_text('Hello')
    out.write_text('Khoor')
    config = ['--config', str(tmp_path / 'none.yml')]
    assert runner.invoke(cli, ['verify', str(src), str(out), '--shift', '3', *config]).exit_code == 0
    assert runner.invoke(cli, ['verify', str(src), str(out), '--shift', '4', *config]).exit_code == 1


def test_show_config(runner, tmp_path):
    result = runner.invoke(cli, ['show-config', '--config', str(tmp_path / 'none.yml')])
    assert result.exit_code == 0
    assert '"join_timeout"' in result.output
