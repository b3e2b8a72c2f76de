"""Collaborator ports for persisting contracts and notifying users."""

from abc import ABC, abstractmethod

from installments.models import InstallmentContract


class ContractRepository(ABC):
    """Persistence collaborator.

    ``save`` either stores the whole contract or raises; no partial writes.
    """

    @abstractmethod
    def save(self, contract: InstallmentContract) -> InstallmentContract:
        """Persist a contract and return the stored version.

        Raises
        ------
        SubmissionError
            When the contract could not be stored.
        """


class Notifier(ABC):
    """User-facing notification collaborator."""

    @abstractmethod
    def success(self, contract_number: str) -> None:
        """Report a created contract."""

    @abstractmethod
    def error(self, message: str) -> None:
        """Report a failure with a user-facing message."""
