"""eCTD 4.0 submission package generator."""

__version__ = "0.1.0"
