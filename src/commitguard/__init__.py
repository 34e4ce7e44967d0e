"""Result collection, reporting and ignore suggestions for pre-commit secret scanning."""

__version__ = "0.1.0"
