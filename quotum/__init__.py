"""Quotum Admin: desktop post management for the Quotum research dashboard."""

__version__ = "1.0.0"
