"""Categorized todo tracker backed by a key-value table store."""

__version__ = "0.1.0"
