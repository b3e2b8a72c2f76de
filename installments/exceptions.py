"""Custom exception hierarchy for installments."""


class InstallmentError(Exception):
    """Base exception for all installment errors."""


class InvalidPlanError(InstallmentError):
    """Raised when a plan violates its own invariants."""


class PlanNotFoundError(InstallmentError):
    """Raised when a referenced plan does not exist."""


class CatalogUnavailableError(InstallmentError):
    """Raised when the plan catalog cannot be read."""


class InvalidWizardStateError(InstallmentError):
    """Raised when a wizard operation is not allowed in the current step."""


class SubmissionError(InstallmentError):
    """Raised when a contract cannot be persisted."""


class DuplicateContractError(SubmissionError):
    """Raised when a contract number is already taken."""


class ConfigurationError(InstallmentError):
    """Raised when configuration is invalid or missing."""
