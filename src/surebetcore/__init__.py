"""Surebet core - multi-currency consolidation and OCR bet-slip normalization."""

__version__ = "0.1.0"
