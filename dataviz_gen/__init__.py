"""Synthetic dataset generation and chart rendering with live refresh."""

__version__ = "0.1.0"
