"""Child-process entry point used by the process-pool strategy.

Reads one JSON document from stdin::

    {"output_dir": "...", "jobs": [{"source": ..., "original_name": ..., ...}]}

runs the shard and writes exactly one JSON ``ShardReport`` to stdout, so
the parent never sees partial output.  Malformed input exits with a
non-zero status, which the parent records as a crashed worker.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Optional, Sequence, TextIO

from ..batch.models import FileJob
from .engine import run_shard

EXIT_BAD_INPUT = 3


def main(stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None) -> int:
    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout
    try:
        payload = json.load(stdin)
        output_dir = Path(payload['output_dir'])
        shard = tuple(FileJob.from_dict(d) for d in payload['jobs'])
    except (ValueError, KeyError, TypeError) as exc:
        print(f'Process error: {exc}', file=sys.stderr)
        return EXIT_BAD_INPUT
    report = run_shard(shard, output_dir)
    stdout.write(json.dumps(report.to_dict()))
    stdout.flush()
    return 0


def build_payload(shard: Sequence[FileJob], output_dir: Path) -> str:
    return json.dumps({'output_dir': str(output_dir), 'jobs': [job.to_dict() for job in shard]})


if __name__ == '__main__':  # pragma: no cover
    sys.exit(main())
