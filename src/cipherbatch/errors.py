"""Exceptions raised by CipherBatch Toolkit.

Per-file problems never surface as exceptions; workers record them as
``Failure`` entries instead.  The classes here cover the conditions that
reject a whole request.
"""

from __future__ import annotations


class CipherBatchError(Exception):
    """Base class for all toolkit errors."""


class InvalidStrategy(CipherBatchError):
    def __init__(self, name: str):
        super().__init__(f'Invalid processing method: {name!r}')
        self.name = name


class EmptyBatch(CipherBatchError):
    def __init__(self) -> None:
        super().__init__('No files provided')


class OutputNotFound(CipherBatchError):
    def __init__(self, name: str):
        super().__init__(f'File not found: {name}')
        self.name = name


class ConfigError(CipherBatchError):
    """Raised when a configuration value is missing or malformed."""
