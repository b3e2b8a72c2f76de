"""Installment plan catalog with an offline fallback."""

import logging
from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Iterable

from installments.exceptions import CatalogUnavailableError, PlanNotFoundError
from installments.models import InstallmentPlan

logger = logging.getLogger(__name__)


# Shipped with the point-of-sale so contracts can be drafted while the
# catalog backend is unreachable.
FALLBACK_PLANS: tuple[InstallmentPlan, ...] = (
    InstallmentPlan(
        plan_id="plan-3",
        name="3-month plan",
        plan_number="P003",
        months=3,
        interest_rate=Decimal("12"),
        down_payment_percent=Decimal("30"),
        processing_fee=Decimal("500"),
        min_amount=Decimal("5000"),
        max_amount=Decimal("50000"),
        requires_guarantor=False,
    ),
    InstallmentPlan(
        plan_id="plan-6",
        name="6-month plan",
        plan_number="P006",
        months=6,
        interest_rate=Decimal("15"),
        down_payment_percent=Decimal("25"),
        processing_fee=Decimal("800"),
        min_amount=Decimal("10000"),
        max_amount=Decimal("100000"),
        requires_guarantor=False,
    ),
    InstallmentPlan(
        plan_id="plan-12",
        name="12-month plan",
        plan_number="P012",
        months=12,
        interest_rate=Decimal("18"),
        down_payment_percent=Decimal("20"),
        processing_fee=Decimal("1200"),
        min_amount=Decimal("20000"),
        max_amount=Decimal("200000"),
        requires_guarantor=True,
    ),
    InstallmentPlan(
        plan_id="plan-24",
        name="24-month plan",
        plan_number="P024",
        months=24,
        interest_rate=Decimal("22"),
        down_payment_percent=Decimal("15"),
        processing_fee=Decimal("2000"),
        min_amount=Decimal("50000"),
        max_amount=Decimal("500000"),
        requires_guarantor=True,
    ),
)


class PlanSource(ABC):
    """Read side of the plan catalog collaborator."""

    @abstractmethod
    def list_active_plans(self) -> list[InstallmentPlan]:
        """Return active plans.

        Raises
        ------
        CatalogUnavailableError
            When the backing store cannot be read.
        """


class StaticPlanSource(PlanSource):
    """Plan source backed by an in-memory list."""

    def __init__(self, plans: Iterable[InstallmentPlan]) -> None:
        self._plans = list(plans)

    def list_active_plans(self) -> list[InstallmentPlan]:
        return [plan for plan in self._plans if plan.is_active]


def load_active_plans(
    source: PlanSource | None,
    fallback: Iterable[InstallmentPlan] = FALLBACK_PLANS,
) -> list[InstallmentPlan]:
    """Load selectable plans ordered by ascending tenor.

    Falls back to ``fallback`` when the source is missing, unavailable, or
    returns no plans.

    Parameters
    ----------
    source : PlanSource | None
        Catalog collaborator.
    fallback : Iterable[InstallmentPlan]
        Plans used when the catalog cannot supply any.

    Returns
    -------
    list[InstallmentPlan]
        Active plans sorted by months.
    """
    plans: list[InstallmentPlan] = []

    if source is not None:
        try:
            plans = source.list_active_plans()
        except CatalogUnavailableError as e:
            logger.warning("Plan catalog unavailable, using offline plans: %s", e)

    if not plans:
        logger.info("Using %d fallback installment plans", len(tuple(fallback)))
        plans = list(fallback)

    return sorted((p for p in plans if p.is_active), key=lambda p: p.months)


def find_plan(plans: Iterable[InstallmentPlan], plan_id: str) -> InstallmentPlan:
    """Look up a plan by ID.

    Raises
    ------
    PlanNotFoundError
        If no plan has the given ID.
    """
    for plan in plans:
        if plan.plan_id == plan_id:
            return plan
    raise PlanNotFoundError(f"Plan {plan_id} not found")
