"""Configuration loading for CipherBatch Toolkit.

Configuration lives in a YAML file (``config/config.yml`` by default).
Values found there are merged over ``DEFAULTS``; a missing file simply
yields the defaults.  ``RunConfig`` is the validated, typed view handed to
executors and workers.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from .batch.models import Strategy
from .errors import ConfigError

DEFAULT_CONFIG_PATH = Path('config/config.yml')

DEFAULTS: Dict[str, Any] = {
    'output_dir': 'processed',
    'max_workers': None,
    'join_timeout': 300.0,
    'shift': 3,
    'strategy': 'sequential',
    'extensions': ['txt'],
    'checksum_algo': 'xxh128',
}


def load_config(path: Optional[Path] = None) -> Dict[str, Any]:
    """Read the YAML configuration at ``path`` merged over the defaults."""
    path = path or DEFAULT_CONFIG_PATH
    cfg = dict(DEFAULTS)
    if not path.exists():
        return cfg
    with path.open('r', encoding='utf-8') as f:
        try:
            data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f'Cannot parse {path}: {exc}') from exc
    if not isinstance(data, dict):
        raise ConfigError(f'{path} must contain a mapping at the top level')
    unknown = set(data) - set(DEFAULTS)
    if unknown:
        raise ConfigError(f'Unknown configuration keys: {", ".join(sorted(unknown))}')
    cfg.update(data)
    return cfg


@dataclass(frozen=True)
class RunConfig:
    output_dir: Path
    max_workers: Optional[int] = None
    join_timeout: float = 300.0
    shift: int = 3
    strategy: Strategy = Strategy.SEQUENTIAL
    checksum_algo: Optional[str] = 'xxh128'

    @classmethod
    def from_mapping(cls, cfg: Mapping[str, Any], **overrides: Any) -> 'RunConfig':
        """Validate ``cfg`` (plus any non-``None`` overrides) into a ``RunConfig``."""
        merged = dict(DEFAULTS)
        merged.update(cfg)
        merged.update({k: v for k, v in overrides.items() if v is not None})
        try:
            max_workers = merged['max_workers']
            if max_workers is not None:
                max_workers = int(max_workers)
                if max_workers < 1:
                    raise ConfigError('max_workers must be at least 1')
            join_timeout = float(merged['join_timeout'])
            if join_timeout <= 0:
                raise ConfigError('join_timeout must be positive')
            return cls(
                output_dir=Path(merged['output_dir']),
                max_workers=max_workers,
                join_timeout=join_timeout,
                shift=int(merged['shift']),
                strategy=Strategy.parse(merged['strategy']),
                checksum_algo=merged['checksum_algo'] or None,
            )
        except (TypeError, ValueError) as exc:
            raise ConfigError(f'Invalid configuration: {exc}') from exc

    def as_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d['output_dir'] = str(self.output_dir)
        d['strategy'] = self.strategy.value
        return d
