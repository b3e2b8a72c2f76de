"""Domain models for installment contracts."""

from installments.models.base import Event
from installments.models.contract import (
    InstallmentCalculation,
    InstallmentContract,
    ScheduledPayment,
)
from installments.models.customer import CustomerProfile, GuarantorProfile
from installments.models.enums import ContractStatus, PaymentStatus, RiskLevel
from installments.models.plan import InstallmentPlan

__all__ = [
    "ContractStatus",
    "CustomerProfile",
    "Event",
    "GuarantorProfile",
    "InstallmentCalculation",
    "InstallmentContract",
    "InstallmentPlan",
    "PaymentStatus",
    "RiskLevel",
    "ScheduledPayment",
]
