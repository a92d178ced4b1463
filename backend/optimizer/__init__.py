"""Batch image optimizer: re-encode uploads under a size budget and return one file or a zip."""

__version__ = "1.0.0"
