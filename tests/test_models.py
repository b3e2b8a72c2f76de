"""Tests for domain models."""

from datetime import datetime
from decimal import Decimal

import pytest

from installments.exceptions import InvalidPlanError
from installments.models import (
    ContractStatus,
    CustomerProfile,
    Event,
    GuarantorProfile,
    InstallmentPlan,
)


def plan_kwargs(**overrides) -> dict:
    kwargs = {
        "plan_id": "plan-x",
        "name": "Test plan",
        "plan_number": "PX",
        "months": 6,
        "interest_rate": Decimal("10"),
        "down_payment_percent": Decimal("20"),
        "processing_fee": Decimal("500"),
        "min_amount": Decimal("1000"),
        "max_amount": Decimal("50000"),
    }
    kwargs.update(overrides)
    return kwargs


class TestInstallmentPlan:
    """Tests for InstallmentPlan invariants."""

    def test_defaults(self) -> None:
        plan = InstallmentPlan(**plan_kwargs())

        assert plan.requires_guarantor is False
        assert plan.is_active is True

    @pytest.mark.parametrize(
        "overrides",
        [
            {"months": 0},
            {"months": -3},
            {"interest_rate": Decimal("-1")},
            {"down_payment_percent": Decimal("101")},
            {"down_payment_percent": Decimal("-5")},
            {"processing_fee": Decimal("-1")},
            {"min_amount": Decimal("60000")},
        ],
    )
    def test_invalid_plans_rejected(self, overrides: dict) -> None:
        with pytest.raises(InvalidPlanError):
            InstallmentPlan(**plan_kwargs(**overrides))

    def test_zero_rate_allowed(self) -> None:
        assert InstallmentPlan(**plan_kwargs(interest_rate=Decimal("0"))).interest_rate == 0


class TestProfiles:
    """Tests for customer and guarantor profiles."""

    def test_customer_gets_an_id(self) -> None:
        first, second = CustomerProfile(), CustomerProfile()

        assert first.customer_id
        assert first.customer_id != second.customer_id
        assert first.email is None
        assert first.monthly_income is None

    def test_guarantor_gets_an_id(self) -> None:
        assert GuarantorProfile().guarantor_id


class TestEnums:
    """Tests for enum values."""

    def test_contract_status_values(self) -> None:
        assert [s.value for s in ContractStatus] == ["active", "completed", "cancelled", "defaulted"]

    def test_str_enum(self) -> None:
        assert ContractStatus.ACTIVE == "active"


class TestEvent:
    """Tests for Event model."""

    def test_event_creation(self) -> None:
        now = datetime.now()
        event = Event(
            event_id="evt-001",
            event_type="contract.created",
            event_time=now,
            source="installments",
            subject="CT1",
            data={"contract_number": "CT1"},
        )

        assert event.event_type == "contract.created"
        assert event.metadata == {}
