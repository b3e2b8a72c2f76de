"""Installment contract calculation, validation and assembly."""

__version__ = "0.1.0"
