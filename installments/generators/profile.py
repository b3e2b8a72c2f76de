"""Customer and guarantor profile generators for demos and fixtures."""

from __future__ import annotations

from decimal import Decimal
from typing import Iterator

from installments.generators.base import BaseGenerator
from installments.models import CustomerProfile, GuarantorProfile

OCCUPATIONS = [
    "Teacher",
    "Nurse",
    "Engineer",
    "Shop owner",
    "Civil servant",
    "Accountant",
    "Driver",
    "Farmer",
    "Office worker",
]

MOBILE_PREFIXES = ["06", "08", "09"]


class CustomerProfileGenerator(BaseGenerator):
    """Generate well-formed applicant and guarantor profiles.

    Profiles pass the validators by default: 10-digit mobile numbers,
    13-digit national IDs and incomes above the policy floors.
    """

    def __init__(
        self,
        seed: int | None = None,
        income_range: tuple[int, int] = (12000, 80000),
    ) -> None:
        super().__init__(seed)
        self.income_range = income_range

    def generate(self) -> CustomerProfile:
        """Generate a single applicant.

        Returns
        -------
        CustomerProfile
            Generated applicant.
        """
        return CustomerProfile(
            customer_id=str(self.fake.uuid4()),
            name=self.fake.name(),
            phone=self._phone(),
            email=self.fake.email(),
            id_card=self._id_card(),
            address=self._address(),
            occupation=self.random.choice(OCCUPATIONS),
            monthly_income=self._income(),
        )

    def generate_guarantor(self, exclude_id_card: str | None = None) -> GuarantorProfile:
        """Generate a guarantor whose national ID differs from ``exclude_id_card``."""
        id_card = self._id_card()
        while id_card == exclude_id_card:
            id_card = self._id_card()

        return GuarantorProfile(
            guarantor_id=str(self.fake.uuid4()),
            name=self.fake.name(),
            phone=self._phone(),
            id_card=id_card,
            address=self._address(),
            occupation=self.random.choice(OCCUPATIONS),
            monthly_income=max(self._income(), Decimal("10000")),
        )

    def generate_batch(self, count: int) -> Iterator[CustomerProfile]:
        """Generate multiple applicants.

        Parameters
        ----------
        count : int
            Number of applicants to generate.

        Yields
        ------
        CustomerProfile
            Generated applicants.
        """
        for _ in range(count):
            yield self.generate()

    def _phone(self) -> str:
        digits = "".join(str(self.random.randint(0, 9)) for _ in range(8))
        return f"{self.random.choice(MOBILE_PREFIXES)}{digits}"

    def _id_card(self) -> str:
        # Leading digit is never 0 on issued cards
        first = str(self.random.randint(1, 8))
        return first + "".join(str(self.random.randint(0, 9)) for _ in range(12))

    def _address(self) -> str:
        address = " ".join(self.fake.address().split())
        if len(address) < 10:
            address = f"{address} Bangkok 10110"
        return address

    def _income(self) -> Decimal:
        low, high = self.income_range
        # Round to the nearest 500
        return Decimal(self.random.randint(low // 500, high // 500) * 500)
