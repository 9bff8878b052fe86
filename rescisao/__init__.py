"""Rescisão - Brazilian employment-termination settlement calculator."""

__version__ = "0.3.0"
