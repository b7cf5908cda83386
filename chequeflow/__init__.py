"""Cheque legal-process deadline tracking."""

__version__ = "0.1.0"
