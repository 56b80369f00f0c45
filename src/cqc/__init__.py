"""cqc: structural code quality checker."""

__version__ = "0.3.0"
