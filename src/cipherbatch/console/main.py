"""Command-line interface for CipherBatch Toolkit.

``process`` runs one batch with a chosen strategy, ``compare`` runs the
same inputs through every strategy and prints their timings side by
side.  ``fetch``, ``verify`` and ``show-config`` cover retrieval and
inspection of results.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import List, Optional, Tuple

import click
from rich.console import Console

from ..batch.models import BatchOutcome, Direction, Strategy
from ..config_loader import DEFAULT_CONFIG_PATH, RunConfig, load_config
from ..discovery.engine import build_jobs
from ..errors import CipherBatchError
from ..logging.logger import CSVLogger, JSONLogger, configure_logging, new_run_id
from ..reporting.registry import OutputRegistry
from ..reporting.render import comparison_table, outcome_table
from ..supervisor.manager import process_batch
from ..verification.engine import verify_roundtrip

console = Console()

EXIT_PARTIAL = 2

config_option = click.option(
    '--config', 'config_path', type=click.Path(dir_okay=False, path_type=Path),
    default=str(DEFAULT_CONFIG_PATH), help='Path to configuration file.',
)
direction_option = click.option(
    '--direction', type=click.Choice([d.value for d in Direction]), default=Direction.ENCRYPT.value,
    show_default=True, help='Encrypt or decrypt the inputs.',
)
shift_option = click.option('--shift', type=int, default=None, help='Caesar shift (defaults to the configured shift).')


def _settings(config_path: Path, **overrides) -> Tuple[dict, RunConfig]:
    try:
        cfg = load_config(config_path)
        return cfg, RunConfig.from_mapping(cfg, **overrides)
    except CipherBatchError as exc:
        raise click.ClickException(str(exc)) from exc


def _run(paths: Tuple[str, ...], direction: str, settings: RunConfig, extensions: List[str], strategy: Strategy) -> BatchOutcome:
    jobs = build_jobs(paths, Direction(direction), settings.shift, extensions)
    try:
        return process_batch(jobs, strategy, settings)
    except CipherBatchError as exc:
        raise click.ClickException(str(exc)) from exc


@click.group()
@click.option('-v', '--verbose', is_flag=True, help='Log progress information.')
def cli(verbose: bool) -> None:
    """CipherBatch Toolkit CLI."""
    configure_logging(verbose)


@cli.command()
@click.argument('paths', nargs=-1, type=click.Path(exists=True))
@direction_option
@shift_option
@click.option('--strategy', default=None, help='sequential, threadpool or processpool.')
@click.option('--output-dir', type=click.Path(file_okay=False), default=None, help='Directory for generated files.')
@click.option('--max-workers', type=int, default=None, help='Upper bound on parallel workers.')
@click.option('--csv-log', type=click.Path(dir_okay=False, path_type=Path), default=None, help='Write a CSV run log.')
@click.option('--json-log', type=click.Path(dir_okay=False, path_type=Path), default=None, help='Write a JSON run log.')
@config_option
def process(
    paths: Tuple[str, ...],
    direction: str,
    shift: Optional[int],
    strategy: Optional[str],
    output_dir: Optional[str],
    max_workers: Optional[int],
    csv_log: Optional[Path],
    json_log: Optional[Path],
    config_path: Path,
) -> None:
    """Encrypt or decrypt PATHS with one strategy."""
    cfg, settings = _settings(
        config_path, shift=shift, strategy=strategy, output_dir=output_dir, max_workers=max_workers,
    )
    outcome = _run(paths, direction, settings, cfg['extensions'], settings.strategy)
    console.print(outcome_table(outcome))

    run_id = new_run_id()
    if csv_log:
        csv_logger = CSVLogger(csv_log)
        try:
            csv_logger.log_outcome(outcome, run_id)
        finally:
            csv_logger.close()
    if json_log:
        json_logger = JSONLogger(json_log)
        json_logger.add_outcome(outcome, run_id)
        json_logger.flush()

    if outcome.failures:
        sys.exit(EXIT_PARTIAL)


@cli.command()
@click.argument('paths', nargs=-1, type=click.Path(exists=True))
@direction_option
@shift_option
@click.option('--output-dir', type=click.Path(file_okay=False), default=None, help='Directory for generated files.')
@config_option
def compare(paths: Tuple[str, ...], direction: str, shift: Optional[int], output_dir: Optional[str], config_path: Path) -> None:
    """Run PATHS through every strategy and compare timings."""
    cfg, settings = _settings(config_path, shift=shift, output_dir=output_dir)
    outcomes = [_run(paths, direction, settings, cfg['extensions'], strategy) for strategy in Strategy]
    console.print(comparison_table(outcomes))


@cli.command()
@click.argument('output_ref')
@config_option
def fetch(output_ref: str, config_path: Path) -> None:
    """Print the path of a generated output file."""
    _, settings = _settings(config_path)
    try:
        path = OutputRegistry(settings.output_dir).fetch(output_ref)
    except CipherBatchError as exc:
        raise click.ClickException(str(exc)) from exc
    click.echo(str(path))


@cli.command()
@click.argument('source', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument('output', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@direction_option
@shift_option
@config_option
def verify(source: Path, output: Path, direction: str, shift: Optional[int], config_path: Path) -> None:
    """Check that OUTPUT is SOURCE transformed with the given shift."""
    _, settings = _settings(config_path, shift=shift)
    if verify_roundtrip(source, output, settings.shift, Direction(direction), settings.checksum_algo):
        console.print('[green]verified[/green]')
    else:
        console.print('[red]mismatch[/red]')
        sys.exit(1)


@cli.command()
@config_option
def show_config(config_path: Path) -> None:
    """Print the current configuration."""
    cfg, _ = _settings(config_path)
    console.print_json(json.dumps(cfg, indent=2))


if __name__ == '__main__':  # pragma: no cover
    cli()
