"""Amortization calculator for installment plans.

Every money figure is rounded to whole currency units with
``ROUND_HALF_UP`` as soon as it is produced, so intermediate rounding
compounds the same way as the point-of-sale that issues the contracts.
"""

from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal

from installments.exceptions import InvalidPlanError
from installments.models import (
    InstallmentCalculation,
    InstallmentPlan,
    PaymentStatus,
    ScheduledPayment,
)

MONEY_QUANTUM = Decimal("1")
ZERO = Decimal("0")
HUNDRED = Decimal("100")
MONTHS_PER_YEAR = Decimal("12")

LATE_FEE_DAILY_RATE = Decimal("0.01")
LATE_FEE_CAP = Decimal("0.10")  # fraction of the amount due


def round_money(value: Decimal | int | str) -> Decimal:
    """Round to whole currency units, halves away from zero."""
    return Decimal(value).quantize(MONEY_QUANTUM, rounding=ROUND_HALF_UP)


def monthly_rate(plan: InstallmentPlan) -> Decimal:
    """Monthly rate as a fraction (18% annual -> 0.015)."""
    return Decimal(plan.interest_rate) / HUNDRED / MONTHS_PER_YEAR


def annuity_payment(financed_amount: Decimal, rate: Decimal, months: int) -> Decimal:
    """Fixed monthly payment amortizing ``financed_amount`` over ``months``.

    Zero-rate plans divide evenly instead of using the annuity formula,
    which is 0/0 at ``rate == 0``. Nothing financed means no payment.
    """
    if months <= 0:
        raise InvalidPlanError("Tenor must be positive")
    if financed_amount <= 0:
        return ZERO
    if rate == 0:
        return round_money(financed_amount / months)

    growth = (1 + rate) ** months
    return round_money(financed_amount * rate * growth / (growth - 1))


def calculate(
    principal: Decimal | int | None,
    plan: InstallmentPlan | None,
) -> InstallmentCalculation | None:
    """Compute down payment, financed amount and totals for a plan.

    Parameters
    ----------
    principal : Decimal | int | None
        Contract amount before the down payment.
    plan : InstallmentPlan | None
        Selected plan; ``None`` while nothing is selected.

    Returns
    -------
    InstallmentCalculation | None
        ``None`` when there is nothing to calculate yet (no plan, or a
        non-positive principal). When the down payment covers the whole
        principal nothing is financed and ``monthly_payment`` is 0, which
        the debt-to-income check treats as 0%.

    Raises
    ------
    InvalidPlanError
        If the plan has a non-positive tenor.
    """
    if plan is None or principal is None:
        return None
    if plan.months <= 0:
        raise InvalidPlanError(f"Plan {plan.plan_id} must have a positive tenor")

    principal = Decimal(principal)
    if principal <= 0:
        return None

    down_payment = round_money(principal * plan.down_payment_percent / HUNDRED)
    financed_amount = principal - down_payment
    monthly_payment = annuity_payment(financed_amount, monthly_rate(plan), plan.months)

    total_payable = monthly_payment * plan.months + down_payment + plan.processing_fee
    total_interest = total_payable - principal - plan.processing_fee

    return InstallmentCalculation(
        down_payment=down_payment,
        financed_amount=financed_amount,
        monthly_payment=monthly_payment,
        total_payable=total_payable,
        total_interest=total_interest,
    )


def build_schedule(
    calculation: InstallmentCalculation,
    plan: InstallmentPlan,
    start_date: date,
    days_per_month: int = 30,
) -> list[ScheduledPayment]:
    """Build the amortization table for a calculated contract.

    Due dates fall every ``days_per_month`` days after ``start_date``. The
    last line takes whatever principal is left so the balance closes at zero.
    """
    rate = monthly_rate(plan)
    balance = calculation.financed_amount
    payment = calculation.monthly_payment
    schedule: list[ScheduledPayment] = []

    for number in range(1, plan.months + 1):
        interest = round_money(balance * rate)
        if number == plan.months:
            principal_part = balance
            total = principal_part + interest
        else:
            principal_part = min(payment - interest, balance)
            total = payment
        balance -= principal_part

        schedule.append(
            ScheduledPayment(
                installment_number=number,
                due_date=start_date + timedelta(days=days_per_month * number),
                principal_amount=principal_part,
                interest_amount=interest,
                total_amount=total,
                balance_after=balance,
            )
        )

    return schedule


def remaining_balance(
    financed_amount: Decimal,
    monthly_payment: Decimal,
    annual_rate: Decimal,
    payments_made: int,
) -> Decimal:
    """Outstanding principal after ``payments_made`` fixed payments, floored at 0."""
    if payments_made <= 0:
        return round_money(financed_amount)

    rate = Decimal(annual_rate) / HUNDRED / MONTHS_PER_YEAR
    if rate == 0:
        remaining = financed_amount - monthly_payment * payments_made
    else:
        growth = (1 + rate) ** payments_made
        remaining = financed_amount * growth - monthly_payment * (growth - 1) / rate

    return max(ZERO, round_money(remaining))


def late_fee(
    amount_due: Decimal,
    days_late: int,
    daily_rate: Decimal = LATE_FEE_DAILY_RATE,
) -> Decimal:
    """Late fee for an overdue installment, capped at 10% of the amount due."""
    if days_late <= 0:
        return ZERO
    fee = amount_due * daily_rate * days_late
    return round_money(min(fee, amount_due * LATE_FEE_CAP))


def payment_status(
    due_date: date,
    amount_due: Decimal,
    paid_amount: Decimal | None = None,
    today: date | None = None,
) -> PaymentStatus:
    """Classify an installment as paid, partial, overdue or pending."""
    if paid_amount:
        if paid_amount >= amount_due:
            return PaymentStatus.PAID
        if paid_amount > 0:
            return PaymentStatus.PARTIAL

    today = today or date.today()
    if today > due_date:
        return PaymentStatus.OVERDUE
    return PaymentStatus.PENDING
