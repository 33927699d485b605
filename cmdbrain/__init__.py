"""Command interpreter and pseudocode brain."""

__version__ = "0.3.0"
