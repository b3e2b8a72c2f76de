"""Sample data generators."""

from installments.generators.profile import CustomerProfileGenerator

__all__ = ["CustomerProfileGenerator"]
