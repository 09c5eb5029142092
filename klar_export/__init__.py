"""Klar order export: line-item discount, tax and weight breakdowns."""

__version__ = "0.1.0"
