"""Calculation, schedule and contract models."""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal

from installments.models.enums import ContractStatus


@dataclass(frozen=True)
class InstallmentCalculation:
    """Derived figures for a principal under a plan, in whole currency units."""

    down_payment: Decimal
    financed_amount: Decimal
    monthly_payment: Decimal
    total_payable: Decimal
    total_interest: Decimal


@dataclass(frozen=True)
class ScheduledPayment:
    """One line of an amortization schedule."""

    installment_number: int  # 1, 2, 3, ...
    due_date: date
    principal_amount: Decimal
    interest_amount: Decimal
    total_amount: Decimal
    balance_after: Decimal


@dataclass(frozen=True)
class InstallmentContract:
    """Contract handed to the persistence collaborator. Never mutated here."""

    contract_id: str
    contract_number: str
    customer_id: str
    plan_id: str
    total_amount: Decimal  # principal
    down_payment: Decimal
    financed_amount: Decimal
    monthly_payment: Decimal
    remaining_balance: Decimal
    interest_rate: Decimal
    number_of_installments: int
    status: ContractStatus
    start_date: datetime
    end_date: datetime
    created_at: datetime
    payments: tuple[ScheduledPayment, ...] = ()
    guarantor_id: str | None = None
    notes: str = ""
