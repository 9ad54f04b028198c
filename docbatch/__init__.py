"""Batch document filler: placeholders on a template, one PDF per data row."""

__version__ = "1.0.0"
