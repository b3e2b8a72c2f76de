"""Tests for sample profile generators."""

from decimal import Decimal

from installments.generators import CustomerProfileGenerator
from installments.validation import validate_customer, validate_guarantor


class TestCustomerProfileGenerator:
    """Tests for CustomerProfileGenerator."""

    def test_generate_customer(self, seed: int) -> None:
        """Test applicant generation."""
        customer = CustomerProfileGenerator(seed=seed).generate()

        assert customer.customer_id
        assert len(customer.phone) == 10
        assert customer.phone[:2] in ("06", "08", "09")
        assert len(customer.id_card) == 13
        assert customer.id_card[0] != "0"
        assert customer.monthly_income % 500 == 0

    def test_generated_customers_pass_validation(self, seed: int) -> None:
        gen = CustomerProfileGenerator(seed=seed)

        for customer in gen.generate_batch(25):
            assert validate_customer(customer) == {}

    def test_generated_guarantor_passes_validation(self, seed: int) -> None:
        gen = CustomerProfileGenerator(seed=seed)
        customer = gen.generate()

        guarantor = gen.generate_guarantor(exclude_id_card=customer.id_card)

        assert guarantor.id_card != customer.id_card
        assert guarantor.monthly_income >= Decimal("10000")
        assert validate_guarantor(guarantor, customer) == {}

    def test_income_range(self, seed: int) -> None:
        gen = CustomerProfileGenerator(seed=seed, income_range=(20000, 30000))

        for customer in gen.generate_batch(20):
            assert Decimal("20000") <= customer.monthly_income <= Decimal("30000")

    def test_batch_size(self, seed: int) -> None:
        assert len(list(CustomerProfileGenerator(seed=seed).generate_batch(7))) == 7

    def test_reproducible_with_seed(self) -> None:
        """Same seed produces the same profiles."""
        first = CustomerProfileGenerator(seed=7).generate()
        second = CustomerProfileGenerator(seed=7).generate()

        assert first.id_card == second.id_card
        assert first.phone == second.phone
        assert first.monthly_income == second.monthly_income
