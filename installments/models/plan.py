"""Installment plan model."""

from dataclasses import dataclass
from decimal import Decimal

from installments.exceptions import InvalidPlanError


@dataclass(frozen=True)
class InstallmentPlan:
    """Installment plan offered from the catalog.

    ``interest_rate`` is the annual nominal rate in percent (``18`` for 18%),
    ``down_payment_percent`` is a percentage of the principal.
    """

    plan_id: str
    name: str
    plan_number: str
    months: int
    interest_rate: Decimal
    down_payment_percent: Decimal
    processing_fee: Decimal
    min_amount: Decimal
    max_amount: Decimal
    requires_guarantor: bool = False
    is_active: bool = True

    def __post_init__(self) -> None:
        if self.months <= 0:
            raise InvalidPlanError(f"Plan {self.plan_id} must have a positive tenor")
        if self.interest_rate < 0:
            raise InvalidPlanError(f"Plan {self.plan_id} has a negative interest rate")
        if not Decimal("0") <= self.down_payment_percent <= Decimal("100"):
            raise InvalidPlanError(f"Plan {self.plan_id} down payment must be within 0-100%")
        if self.processing_fee < 0:
            raise InvalidPlanError(f"Plan {self.plan_id} has a negative processing fee")
        if self.min_amount > self.max_amount:
            raise InvalidPlanError(f"Plan {self.plan_id} min_amount exceeds max_amount")
