"""Tests for contract assembly and submission."""

from dataclasses import FrozenInstanceError
from datetime import datetime, timedelta
from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from installments.calculator import calculate
from installments.config import PolicyConfig
from installments.contracts import (
    SUBMISSION_FAILED_MESSAGE,
    SUBMISSION_IN_PROGRESS_MESSAGE,
    ContractSubmitter,
    assemble_contract,
    generate_contract_number,
)
from installments.exceptions import DuplicateContractError
from installments.models import (
    ContractStatus,
    CustomerProfile,
    GuarantorProfile,
    InstallmentContract,
    InstallmentPlan,
)
from installments.sinks.base import ContractRepository, Notifier
from installments.sinks.console import ConsoleNotifier
from installments.store import InMemoryContractStore


@pytest.fixture
def contract(customer: CustomerProfile, plan_12: InstallmentPlan, guarantor: GuarantorProfile) -> InstallmentContract:
    """Assembled 40,000 contract on the 12-month plan."""
    principal = Decimal("40000")
    return assemble_contract(
        customer,
        plan_12,
        principal,
        calculate(principal, plan_12),
        guarantor=guarantor,
        start_date=datetime(2026, 1, 1, 10, 0),
    )


class TestGenerateContractNumber:
    """Tests for contract numbers."""

    def test_prefix(self) -> None:
        assert generate_contract_number().startswith("CT")
        assert generate_contract_number("INV").startswith("INV")

    def test_fresh_per_call(self) -> None:
        numbers = {generate_contract_number() for _ in range(100)}
        assert len(numbers) == 100


class TestAssembleContract:
    """Tests for assemble_contract()."""

    def test_financial_fields(self, contract: InstallmentContract) -> None:
        assert contract.total_amount == Decimal("40000")
        assert contract.down_payment == Decimal("8000")
        assert contract.financed_amount == Decimal("32000")
        assert contract.monthly_payment == Decimal("2934")
        assert contract.remaining_balance == contract.financed_amount
        assert contract.interest_rate == Decimal("18")
        assert contract.number_of_installments == 12

    def test_initial_state(self, contract: InstallmentContract) -> None:
        assert contract.status == ContractStatus.ACTIVE
        assert contract.payments == ()
        assert contract.customer_id == "cust-001"
        assert contract.plan_id == "plan-12"
        assert contract.guarantor_id == "guar-001"

    def test_end_date_uses_thirty_day_months(self, contract: InstallmentContract) -> None:
        assert contract.end_date == datetime(2026, 1, 1, 10, 0) + timedelta(days=360)
        assert contract.end_date == datetime(2026, 12, 27, 10, 0)

    def test_days_per_month_policy(self, customer: CustomerProfile, plan_6: InstallmentPlan) -> None:
        principal = Decimal("20000")
        start = datetime(2026, 1, 1)
        contract = assemble_contract(
            customer,
            plan_6,
            principal,
            calculate(principal, plan_6),
            start_date=start,
            policy=PolicyConfig(days_per_month=31, contract_prefix="FN"),
        )

        assert contract.end_date == start + timedelta(days=186)
        assert contract.contract_number.startswith("FN")

    def test_no_guarantor(self, customer: CustomerProfile, plan_6: InstallmentPlan) -> None:
        principal = Decimal("20000")
        contract = assemble_contract(customer, plan_6, principal, calculate(principal, plan_6))

        assert contract.guarantor_id is None

    def test_immutable(self, contract: InstallmentContract) -> None:
        with pytest.raises(FrozenInstanceError):
            contract.remaining_balance = Decimal("0")

    def test_identical_inputs_give_fresh_numbers_and_same_figures(
        self, customer: CustomerProfile, plan_12: InstallmentPlan
    ) -> None:
        principal = Decimal("40000")
        first = assemble_contract(customer, plan_12, principal, calculate(principal, plan_12))
        second = assemble_contract(customer, plan_12, principal, calculate(principal, plan_12))

        assert first.contract_number != second.contract_number
        assert first.contract_id != second.contract_id
        for name in ("total_amount", "down_payment", "financed_amount", "monthly_payment", "remaining_balance"):
            assert getattr(first, name) == getattr(second, name)


class TestContractSubmitter:
    """Tests for ContractSubmitter."""

    def test_success(
        self,
        submitter: ContractSubmitter,
        store: InMemoryContractStore,
        notifier: ConsoleNotifier,
        contract: InstallmentContract,
    ) -> None:
        result = submitter.submit(contract)

        assert result.success is True
        assert result.contract is contract
        assert store.get(contract.contract_number) is contract
        assert notifier.messages == [("success", f"Contract {contract.contract_number} created successfully")]
        assert submitter.in_flight is False

    def test_repository_failure_is_reported_once(
        self, notifier: ConsoleNotifier, contract: InstallmentContract
    ) -> None:
        repository = MagicMock(spec=ContractRepository)
        repository.save.side_effect = ConnectionError("connection reset")
        submitter = ContractSubmitter(repository, notifier)

        result = submitter.submit(contract)

        assert result.success is False
        assert result.message == SUBMISSION_FAILED_MESSAGE
        assert notifier.messages == [("error", SUBMISSION_FAILED_MESSAGE)]
        assert repository.save.call_count == 1
        assert submitter.in_flight is False

    def test_duplicate_number_fails(
        self,
        submitter: ContractSubmitter,
        store: InMemoryContractStore,
        contract: InstallmentContract,
    ) -> None:
        submitter.submit(contract)
        result = submitter.submit(contract)

        assert result.success is False
        assert len(store) == 1

    def test_concurrent_submission_is_rejected(
        self, notifier: ConsoleNotifier, contract: InstallmentContract
    ) -> None:
        nested_results = []

        class ReentrantRepository(ContractRepository):
            def save(self, saved: InstallmentContract) -> InstallmentContract:
                nested_results.append(submitter.submit(saved))
                return saved

        submitter = ContractSubmitter(ReentrantRepository(), notifier)
        result = submitter.submit(contract)

        assert result.success is True
        assert nested_results[0].success is False
        assert nested_results[0].message == SUBMISSION_IN_PROGRESS_MESSAGE
        assert [level for level, _ in notifier.messages] == ["success"]


class TestInMemoryContractStore:
    """Tests for InMemoryContractStore."""

    def test_indexes(self, store: InMemoryContractStore, contract: InstallmentContract) -> None:
        store.save(contract)

        assert store.get_customer_contracts("cust-001") == [contract]
        assert store.get_guaranteed_contracts("guar-001") == [contract]
        assert store.get_customer_contracts("nobody") == []

    def test_duplicate_raises(self, store: InMemoryContractStore, contract: InstallmentContract) -> None:
        store.save(contract)

        with pytest.raises(DuplicateContractError):
            store.save(contract)


class RaisingNotifier(Notifier):
    """Notifier whose transport is down."""

    def __init__(self) -> None:
        self.calls = 0

    def success(self, contract_number: str) -> None:
        self.calls += 1
        raise BufferError("Local: Queue full")

    def error(self, message: str) -> None:
        self.calls += 1
        raise BufferError("Local: Queue full")


class TestNotifierFailures:
    """A broken notifier never masks the outcome of the save."""

    def test_success_stands_when_notifier_raises(
        self, store: InMemoryContractStore, contract: InstallmentContract
    ) -> None:
        notifier = RaisingNotifier()
        submitter = ContractSubmitter(store, notifier)

        result = submitter.submit(contract)

        assert result.success is True
        assert result.contract is contract
        assert len(store) == 1
        assert notifier.calls == 1
        assert submitter.in_flight is False

    def test_failure_reported_when_notifier_raises(self, contract: InstallmentContract) -> None:
        repository = MagicMock(spec=ContractRepository)
        repository.save.side_effect = ConnectionError("connection reset")
        submitter = ContractSubmitter(repository, RaisingNotifier())

        result = submitter.submit(contract)

        assert result.success is False
        assert result.message == SUBMISSION_FAILED_MESSAGE
        assert submitter.in_flight is False
