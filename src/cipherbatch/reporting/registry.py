"""Lookup of generated outputs.

``OutputRegistry`` remembers which output each original file produced in
the batches it has seen, and resolves generated names back to files in
the output directory.
"""

from __future__ import annotations

from pathlib import Path
from typing import Dict

from ..batch.models import BatchOutcome
from ..errors import OutputNotFound


class OutputRegistry:
    def __init__(self, output_dir: Path):
        self.output_dir = output_dir
        self._by_name: Dict[str, str] = {}

    def record(self, outcome: BatchOutcome) -> None:
        for result in outcome.results:
            self._by_name[result.original_name] = result.output_ref

    def lookup(self, original_name: str) -> str:
        """Return the output name last produced for ``original_name``."""
        try:
            return self._by_name[original_name]
        except KeyError:
            raise OutputNotFound(original_name) from None

    def fetch(self, output_ref: str) -> Path:
        """Resolve ``output_ref`` to an existing file inside the output directory."""
        root = self.output_dir.resolve()
        path = (root / output_ref).resolve()
        if path.parent != root or not path.is_file():
            raise OutputNotFound(output_ref)
        return path
