"""Pytest configuration and fixtures."""

from decimal import Decimal

import pytest

from installments.catalog import FALLBACK_PLANS
from installments.contracts import ContractSubmitter
from installments.models import CustomerProfile, GuarantorProfile, InstallmentPlan
from installments.sinks.console import ConsoleNotifier
from installments.store import InMemoryContractStore


@pytest.fixture
def seed() -> int:
    """Fixed seed for reproducible tests."""
    return 42


@pytest.fixture
def customer() -> CustomerProfile:
    """Applicant that passes every customer rule."""
    return CustomerProfile(
        customer_id="cust-001",
        name="Somchai Jaidee",
        phone="081-234-5678",
        email="somchai@example.com",
        id_card="1-1037-00123-45-6",
        address="99/1 Sukhumvit Road, Khlong Toei, Bangkok 10110",
        occupation="Engineer",
        monthly_income=Decimal("50000"),
    )


@pytest.fixture
def guarantor() -> GuarantorProfile:
    """Guarantor that passes every guarantor rule."""
    return GuarantorProfile(
        guarantor_id="guar-001",
        name="Malee Srisuk",
        phone="0898765432",
        id_card="3100600123456",
        address="12 Rama IV Road, Pathum Wan, Bangkok 10330",
        occupation="Teacher",
        monthly_income=Decimal("30000"),
    )


@pytest.fixture
def plan_6() -> InstallmentPlan:
    """6-month fallback plan (no guarantor)."""
    return FALLBACK_PLANS[1]


@pytest.fixture
def plan_12() -> InstallmentPlan:
    """12-month fallback plan (guarantor required)."""
    return FALLBACK_PLANS[2]


@pytest.fixture
def zero_rate_plan() -> InstallmentPlan:
    """Interest-free plan with no down payment or fee."""
    return InstallmentPlan(
        plan_id="plan-zero",
        name="Interest-free 10 months",
        plan_number="Z010",
        months=10,
        interest_rate=Decimal("0"),
        down_payment_percent=Decimal("0"),
        processing_fee=Decimal("0"),
        min_amount=Decimal("1000"),
        max_amount=Decimal("1000000"),
    )


@pytest.fixture
def store() -> InMemoryContractStore:
    """Fresh contract store for each test."""
    return InMemoryContractStore()


@pytest.fixture
def notifier() -> ConsoleNotifier:
    """Notifier that records without printing."""
    return ConsoleNotifier(quiet=True)


@pytest.fixture
def submitter(store: InMemoryContractStore, notifier: ConsoleNotifier) -> ContractSubmitter:
    """Submitter wired to the in-memory store."""
    return ContractSubmitter(store, notifier)
