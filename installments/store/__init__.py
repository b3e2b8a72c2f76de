"""Contract stores."""

from installments.store.contracts import InMemoryContractStore

__all__ = ["InMemoryContractStore"]
