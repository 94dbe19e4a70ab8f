# context_dumper/__init__.py
"""Dump a codebase as one marker-delimited text blob, optionally in chunks."""

__version__ = "0.2.0"
