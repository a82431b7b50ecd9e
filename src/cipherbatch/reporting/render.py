"""Rich tables for batch outcomes."""

from __future__ import annotations

from typing import Iterable

from rich.table import Table

from ..batch.models import BatchOutcome


def outcome_table(outcome: BatchOutcome) -> Table:
    table = Table(title=f'{outcome.strategy.label}: {outcome.elapsed_ms} ms')
    table.add_column('File')
    table.add_column('Status')
    table.add_column('Output')
    table.add_column('Size (bytes)', justify='right')
    for result in outcome.results:
        table.add_row(result.original_name, 'ok', result.output_ref, str(result.byte_size))
    for failure in outcome.failures:
        table.add_row(failure.original_name, f'[red]{failure.error_kind.value}[/red]', failure.message, '')
    return table


def comparison_table(outcomes: Iterable[BatchOutcome]) -> Table:
    """One row per strategy, sorted fastest first."""
    table = Table(title='Strategy comparison')
    table.add_column('Method')
    table.add_column('Workers', justify='right')
    table.add_column('Shards')
    table.add_column('OK', justify='right')
    table.add_column('Failed', justify='right')
    table.add_column('Time (ms)', justify='right')
    for outcome in sorted(outcomes, key=lambda o: o.elapsed_ms):
        table.add_row(
            outcome.strategy.label,
            str(outcome.worker_count),
            ' '.join(str(n) for n in outcome.shard_sizes),
            str(outcome.succeeded),
            str(outcome.failed),
            str(outcome.elapsed_ms),
        )
    return table
