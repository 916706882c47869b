"""Terminal editor for JSON and YAML tabular datasets."""

__version__ = "0.1.0"
