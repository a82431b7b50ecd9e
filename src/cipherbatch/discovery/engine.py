"""Discovery engine for CipherBatch Toolkit.

Turns the paths a user names on the command line into ``FileJob``s.
Plain files are taken as given; directories are walked recursively for
files whose suffix matches the configured extensions.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, Iterator, List, Sequence

from ..batch.models import Direction, FileJob


def discover_files(sources: Sequence[str], extensions: Sequence[str]) -> Iterator[Path]:
    """Yield paths of files under ``sources`` whose suffix matches ``extensions``.

    Args:
        sources: Iterable of directory paths to search.
        extensions: File suffixes (without leading dot) to include, case-insensitive.

    Yields:
        ``pathlib.Path`` objects in a stable (sorted) order per directory.
    """
    normalized_exts = {ext.lower().lstrip('.') for ext in extensions}
    for src in sources:
        for root, dirs, files in os.walk(src):
            dirs.sort()
            for name in sorted(files):
                if name.lower().split('.')[-1] in normalized_exts:
                    yield Path(root) / name


def build_jobs(
    paths: Iterable[str],
    direction: Direction,
    shift: int,
    extensions: Sequence[str] = ('txt',),
) -> List[FileJob]:
    """Create one job per file, keeping the order in which paths were given."""
    jobs: List[FileJob] = []
    for raw in paths:
        path = Path(raw)
        found = discover_files([str(path)], extensions) if path.is_dir() else [path]
        for file_path in found:
            jobs.append(FileJob(source=file_path, original_name=file_path.name, direction=direction, shift=shift))
    return jobs
