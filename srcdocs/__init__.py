"""Extract documentation from source comments into markdown files."""

__version__ = "0.2.1"
