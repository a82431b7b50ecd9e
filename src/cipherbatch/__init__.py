"""CipherBatch Toolkit: batch Caesar encryption with pluggable concurrency."""

__version__ = '0.1.0'
