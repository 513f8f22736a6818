"""Folio - document lifecycle manager for site content."""

__version__ = "0.1.0"
