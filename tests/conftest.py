"""Shared fixtures: isolated input files and run settings under tmp_path."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, List

import pytest

from cipherbatch.batch.models import Direction, FileJob
from cipherbatch.config_loader import RunConfig


@pytest.fixture
def input_dir(tmp_path: Path) -> Path:
    path = tmp_path / 'uploads'
    path.mkdir()
    return path


@pytest.fixture
def run_config(tmp_path: Path) -> RunConfig:
    return RunConfig(output_dir=tmp_path / 'processed', max_workers=4, join_timeout=30.0)


@pytest.fixture
def make_jobs(input_dir: Path) -> Callable[..., List[FileJob]]:
    """Write ``count`` files holding ``content`` and return jobs for them."""

    def _make(count: int, content: str = 'Hello', direction: Direction = Direction.ENCRYPT, shift: int = 3) -> List[FileJob]:
        jobs = []
        for i in range(count):
            path = input_dir / f'file{i}.txt'
            path.write_text(content, encoding='utf-8')
            jobs.append(FileJob(source=path, original_name=path.name, direction=direction, shift=shift))
        return jobs

    return _make
