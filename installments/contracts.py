"""Contract assembly and submission to the persistence collaborator."""

from __future__ import annotations

import logging
import threading
import time
import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Callable

from installments.config import DEFAULT_POLICY, PolicyConfig
from installments.exceptions import InvalidPlanError
from installments.models import (
    ContractStatus,
    CustomerProfile,
    GuarantorProfile,
    InstallmentCalculation,
    InstallmentContract,
    InstallmentPlan,
)
from installments.sinks.base import ContractRepository, Notifier

logger = logging.getLogger(__name__)

SUBMISSION_FAILED_MESSAGE = "Unable to create the installment contract. Please try again."
SUBMISSION_IN_PROGRESS_MESSAGE = "A submission for this contract is already in progress."


def generate_contract_number(prefix: str = "CT") -> str:
    """Time-based contract number with a random suffix.

    Uniqueness across processes is enforced by the persistence collaborator.
    """
    return f"{prefix}{int(time.time() * 1000)}{uuid.uuid4().hex[:8].upper()}"


def assemble_contract(
    customer: CustomerProfile,
    plan: InstallmentPlan,
    principal: Decimal,
    calculation: InstallmentCalculation,
    guarantor: GuarantorProfile | None = None,
    notes: str = "",
    start_date: datetime | None = None,
    policy: PolicyConfig = DEFAULT_POLICY,
) -> InstallmentContract:
    """Build an immutable contract from validated inputs.

    Parameters
    ----------
    customer : CustomerProfile
        Validated applicant.
    plan : InstallmentPlan
        Selected plan.
    principal : Decimal
        Contract amount before down payment.
    calculation : InstallmentCalculation
        Figures from :func:`installments.calculator.calculate` for
        ``principal`` and ``plan``.
    guarantor : GuarantorProfile | None
        Guarantor, only when the guarantor step was taken.
    notes : str
        Free text attached to the contract.
    start_date : datetime | None
        Contract start, now by default.
    policy : PolicyConfig
        Supplies the contract number prefix and the days-per-month used for
        the end date.

    Returns
    -------
    InstallmentContract
        Active contract with an empty payment history.
    """
    if plan.months <= 0:
        raise InvalidPlanError(f"Plan {plan.plan_id} must have a positive tenor")

    now = datetime.now()
    start_date = start_date or now

    return InstallmentContract(
        contract_id=str(uuid.uuid4()),
        contract_number=generate_contract_number(policy.contract_prefix),
        customer_id=customer.customer_id,
        plan_id=plan.plan_id,
        total_amount=principal,
        down_payment=calculation.down_payment,
        financed_amount=calculation.financed_amount,
        monthly_payment=calculation.monthly_payment,
        remaining_balance=calculation.financed_amount,
        interest_rate=plan.interest_rate,
        number_of_installments=plan.months,
        status=ContractStatus.ACTIVE,
        start_date=start_date,
        end_date=start_date + timedelta(days=plan.months * policy.days_per_month),
        created_at=now,
        payments=(),
        guarantor_id=guarantor.guarantor_id if guarantor is not None else None,
        notes=notes,
    )


@dataclass(frozen=True)
class SubmissionResult:
    """Outcome of a contract submission."""

    success: bool
    contract: InstallmentContract | None = None
    message: str = ""


class ContractSubmitter:
    """Send assembled contracts to the repository, one at a time.

    A submission that fails is reported through the notifier and is not
    retried; the caller resubmits.
    """

    def __init__(self, repository: ContractRepository, notifier: Notifier) -> None:
        self.repository = repository
        self.notifier = notifier
        self._lock = threading.Lock()

    @property
    def in_flight(self) -> bool:
        """Whether a submission is currently running."""
        return self._lock.locked()

    def submit(self, contract: InstallmentContract) -> SubmissionResult:
        """Persist ``contract`` and notify the user of the outcome.

        Returns
        -------
        SubmissionResult
            Failed without touching the repository when another submission
            is still in flight.
        """
        if not self._lock.acquire(blocking=False):
            logger.warning(
                "Rejected duplicate submission of %s", contract.contract_number
            )
            return SubmissionResult(success=False, message=SUBMISSION_IN_PROGRESS_MESSAGE)

        try:
            saved = self.repository.save(contract)
        except Exception:
            # Any collaborator failure becomes a single user-facing error.
            logger.exception(
                "Failed to persist contract %s",
                contract.contract_number,
                extra={"contract_number": contract.contract_number},
            )
            self._notify(self.notifier.error, SUBMISSION_FAILED_MESSAGE)
            return SubmissionResult(success=False, message=SUBMISSION_FAILED_MESSAGE)
        finally:
            self._lock.release()

        # Stored from here on; a failing notifier is logged only.
        result = SubmissionResult(
            success=True,
            contract=saved,
            message=f"Contract {saved.contract_number} created",
        )
        logger.info(
            "Created contract %s for customer %s",
            saved.contract_number,
            saved.customer_id,
            extra={"contract_number": saved.contract_number, "plan_id": saved.plan_id},
        )
        self._notify(self.notifier.success, saved.contract_number)
        return result

    def _notify(self, send: Callable[[str], None], text: str) -> None:
        try:
            send(text)
        except Exception:
            logger.exception("Notifier %s failed", type(self.notifier).__name__)
