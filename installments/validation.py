"""Eligibility validation for installment contracts.

Validators are pure: they take profiles and figures and return a mapping
of field name to a human-readable message. An empty mapping means valid.
Nothing here raises for bad input.
"""

import re
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from installments.calculator import calculate
from installments.config import DEFAULT_POLICY, PolicyConfig
from installments.models import (
    CustomerProfile,
    GuarantorProfile,
    InstallmentCalculation,
    InstallmentPlan,
    RiskLevel,
)

PHONE_PATTERN = re.compile(r"^[0-9]{9,10}$")
ID_CARD_PATTERN = re.compile(r"^[0-9]{13}$")
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
SEPARATORS = re.compile(r"[-\s]")

MIN_NAME_LENGTH = 2
MIN_ADDRESS_LENGTH = 10

ValidationErrors = dict[str, str]


def strip_separators(value: str | None) -> str:
    """Remove hyphens and whitespace from phone numbers and ID cards."""
    return SEPARATORS.sub("", value or "")


def format_amount(amount: Decimal) -> str:
    """Format a money amount with thousands separators (``50,000``)."""
    amount = Decimal(amount)
    if amount == amount.to_integral_value():
        return f"{int(amount):,}"
    return f"{amount:,.2f}"


def debt_to_income_ratio(monthly_payment: Decimal, monthly_income: Decimal) -> Decimal:
    """Monthly installment as a percentage of monthly income."""
    return Decimal(monthly_payment) / Decimal(monthly_income) * 100


def _check_phone(phone: str | None) -> str | None:
    if not (phone or "").strip():
        return "Phone number is required"
    if not PHONE_PATTERN.match(strip_separators(phone)):
        return "Phone number must be 9-10 digits"
    return None


def _check_id_card(id_card: str | None) -> str | None:
    if not (id_card or "").strip():
        return "National ID number is required"
    if not ID_CARD_PATTERN.match(strip_separators(id_card)):
        return "National ID number must be 13 digits"
    return None


def validate_customer(
    customer: CustomerProfile,
    policy: PolicyConfig = DEFAULT_POLICY,
) -> ValidationErrors:
    """Check that the applicant's profile is complete and well-formed.

    Parameters
    ----------
    customer : CustomerProfile
        Applicant as entered in the form.
    policy : PolicyConfig
        Thresholds (minimum monthly income).

    Returns
    -------
    dict[str, str]
        Errors keyed by ``name``, ``phone``, ``email``, ``id_card``,
        ``address``, ``occupation`` and ``monthly_income``.
    """
    errors: ValidationErrors = {}

    name = (customer.name or "").strip()
    if not name:
        errors["name"] = "Customer name is required"
    elif len(name) < MIN_NAME_LENGTH:
        errors["name"] = f"Name must be at least {MIN_NAME_LENGTH} characters"

    phone_error = _check_phone(customer.phone)
    if phone_error:
        errors["phone"] = phone_error

    email = (customer.email or "").strip()
    if email and not EMAIL_PATTERN.match(email):
        errors["email"] = "Email address is not valid"

    id_card_error = _check_id_card(customer.id_card)
    if id_card_error:
        errors["id_card"] = id_card_error

    address = (customer.address or "").strip()
    if not address:
        errors["address"] = "Address is required"
    elif len(address) < MIN_ADDRESS_LENGTH:
        errors["address"] = f"Address must be at least {MIN_ADDRESS_LENGTH} characters"

    if not (customer.occupation or "").strip():
        errors["occupation"] = "Occupation is required"

    income = customer.monthly_income
    if not income or income <= 0:
        errors["monthly_income"] = "Monthly income is required"
    elif income < policy.min_customer_income:
        errors["monthly_income"] = (
            f"Monthly income must be at least {format_amount(policy.min_customer_income)}"
        )

    return errors


def validate_plan(
    customer: CustomerProfile,
    plan: InstallmentPlan | None,
    principal: Decimal | None,
    calculation: InstallmentCalculation | None,
    policy: PolicyConfig = DEFAULT_POLICY,
) -> ValidationErrors:
    """Check plan selection, principal bounds and affordability.

    Only the first problem with the amount is reported under ``amount``:
    floor, then plan bounds, then the debt-to-income ceiling. The ceiling
    is inclusive, so a ratio of exactly the limit passes.

    Returns
    -------
    dict[str, str]
        Errors keyed by ``plan`` and ``amount``.
    """
    errors: ValidationErrors = {}

    if plan is None:
        errors["plan"] = "Please select an installment plan"

    if principal is None or principal <= 0:
        errors["amount"] = "Please enter a valid contract amount"
    elif principal < policy.min_principal:
        errors["amount"] = f"Contract amount must be at least {format_amount(policy.min_principal)}"
    elif plan is not None:
        if principal < plan.min_amount:
            errors["amount"] = (
                f"Contract amount must be at least {format_amount(plan.min_amount)} "
                f"for this plan ({format_amount(plan.min_amount)} - {format_amount(plan.max_amount)})"
            )
        elif principal > plan.max_amount:
            errors["amount"] = (
                f"Contract amount must not exceed {format_amount(plan.max_amount)} "
                f"for this plan ({format_amount(plan.min_amount)} - {format_amount(plan.max_amount)})"
            )

    income = customer.monthly_income
    if "amount" not in errors and plan is not None and calculation is not None and income and income > 0:
        ratio = debt_to_income_ratio(calculation.monthly_payment, income)
        if ratio > policy.max_debt_to_income:
            shown = ratio.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
            errors["amount"] = (
                f"Monthly installment exceeds {format_amount(policy.max_debt_to_income)}% "
                f"of income ({shown}%). Reduce the amount or choose a longer plan"
            )

    return errors


def validate_guarantor(
    guarantor: GuarantorProfile | None,
    customer: CustomerProfile,
    policy: PolicyConfig = DEFAULT_POLICY,
) -> ValidationErrors:
    """Check the guarantor's profile against the applicant's.

    A missing guarantor is validated as an empty profile. The guarantor's
    income floor is higher than the applicant's, and the guarantor's
    national ID must differ from the applicant's.

    Returns
    -------
    dict[str, str]
        Errors keyed by ``guarantor_name``, ``guarantor_phone``,
        ``guarantor_id_card``, ``guarantor_address``,
        ``guarantor_occupation`` and ``guarantor_income``.
    """
    guarantor = guarantor or GuarantorProfile()
    errors: ValidationErrors = {}

    name = (guarantor.name or "").strip()
    if not name:
        errors["guarantor_name"] = "Guarantor name is required"
    elif len(name) < MIN_NAME_LENGTH:
        errors["guarantor_name"] = f"Guarantor name must be at least {MIN_NAME_LENGTH} characters"

    phone_error = _check_phone(guarantor.phone)
    if phone_error:
        errors["guarantor_phone"] = f"Guarantor: {phone_error[0].lower()}{phone_error[1:]}"

    id_card_error = _check_id_card(guarantor.id_card)
    if id_card_error:
        errors["guarantor_id_card"] = f"Guarantor: {id_card_error[0].lower()}{id_card_error[1:]}"
    customer_id_card = strip_separators(customer.id_card)
    if customer_id_card and strip_separators(guarantor.id_card) == customer_id_card:
        errors["guarantor_id_card"] = "Guarantor national ID must differ from the customer's"

    if not (guarantor.address or "").strip():
        errors["guarantor_address"] = "Guarantor address is required"

    if not (guarantor.occupation or "").strip():
        errors["guarantor_occupation"] = "Guarantor occupation is required"

    income = guarantor.monthly_income
    if not income or income <= 0:
        errors["guarantor_income"] = "Guarantor monthly income is required"
    elif income < policy.min_guarantor_income:
        errors["guarantor_income"] = (
            f"Guarantor monthly income must be at least {format_amount(policy.min_guarantor_income)}"
        )

    return errors


# Triggers that force a guarantor regardless of the plan's own flag
GUARANTOR_REQUIRED_ABOVE = Decimal("100000")
GUARANTOR_REQUIRED_BEYOND_MONTHS = 24
MIN_INCOME_TO_PAYMENT_MULTIPLE = 3


def requires_guarantor(
    plan: InstallmentPlan | None,
    customer: CustomerProfile,
    principal: Decimal | None,
) -> bool:
    """Whether a contract for ``principal`` on ``plan`` needs a guarantor.

    True when the plan says so, when the amount is above 100,000, when the
    tenor is longer than 24 months, or when the applicant's income is less
    than three monthly payments.
    """
    if plan is None:
        return False
    if plan.requires_guarantor:
        return True
    if principal is not None and principal > GUARANTOR_REQUIRED_ABOVE:
        return True
    if plan.months > GUARANTOR_REQUIRED_BEYOND_MONTHS:
        return True

    income = customer.monthly_income
    if income and income > 0:
        calculation = calculate(principal, plan)
        if calculation is not None and income < calculation.monthly_payment * MIN_INCOME_TO_PAYMENT_MULTIPLE:
            return True
    return False


@dataclass(frozen=True)
class EligibilityAssessment:
    """Advisory risk assessment shown alongside the form."""

    eligible: bool
    risk_level: RiskLevel
    max_loan_amount: Decimal
    guarantor_recommended: bool
    reasons: tuple[str, ...] = ()
    recommended_plans: tuple[str, ...] = ()


# Income bands and multipliers for the advisory assessment
HIGH_RISK_INCOME = Decimal("15000")
MEDIUM_RISK_INCOME = Decimal("25000")
MAX_LOAN_INCOME_MULTIPLE = 20
# Rough monthly payment used before a plan is chosen
ESTIMATED_PAYMENT_SHARE = Decimal("0.05")
HIGH_ESTIMATED_DTI = Decimal("0.4")
MEDIUM_ESTIMATED_DTI = Decimal("0.3")

# Plan numbers suggested per risk level, from the offline catalog
SHORT_TERM_PLANS = ("P003", "P006")
LOW_RISK_PLANS = SHORT_TERM_PLANS + ("P012",)
LONG_TERM_PLAN = "P024"
LONG_TERM_SUGGESTED_ABOVE = Decimal("50000")


def assess_eligibility(
    customer: CustomerProfile,
    principal: Decimal,
    policy: PolicyConfig = DEFAULT_POLICY,
) -> EligibilityAssessment:
    """Grade the applicant before a plan is chosen.

    Missing profile fields, an estimated payment above 40% of income and an
    amount outside the floor or the income multiple make the applicant
    ineligible. Low income raises the risk level without blocking. The
    result is advisory: it never changes which steps the wizard takes.

    Returns
    -------
    EligibilityAssessment
        Verdict, risk level, loan ceiling, reasons and suggested plans.
    """
    reasons: list[str] = []
    for value, message in (
        (customer.name, "Customer name is required"),
        (customer.id_card, "National ID number is required"),
        (customer.phone, "Phone number is required"),
        (customer.address, "Address is required"),
        (customer.occupation, "Occupation is required"),
    ):
        if not (value or "").strip():
            reasons.append(message)

    income = customer.monthly_income or Decimal("0")
    if income <= 0:
        reasons.append("Monthly income is required")
        risk = RiskLevel.HIGH
        max_loan_amount = Decimal("0")
    else:
        max_loan_amount = income * MAX_LOAN_INCOME_MULTIPLE
        if income < HIGH_RISK_INCOME:
            risk = RiskLevel.HIGH
        elif income < MEDIUM_RISK_INCOME:
            risk = RiskLevel.MEDIUM
        else:
            risk = RiskLevel.LOW

        estimated_ratio = principal * ESTIMATED_PAYMENT_SHARE / income
        if estimated_ratio > HIGH_ESTIMATED_DTI:
            reasons.append("Debt-to-income ratio is too high (must not exceed 40%)")
            risk = RiskLevel.HIGH
        elif estimated_ratio > MEDIUM_ESTIMATED_DTI and risk == RiskLevel.LOW:
            risk = RiskLevel.MEDIUM

    if principal < policy.min_principal:
        reasons.append(f"Contract amount must be at least {format_amount(policy.min_principal)}")
    if principal > max_loan_amount:
        reasons.append(f"Amount is too high (maximum {format_amount(max_loan_amount)})")

    guarantor_recommended = principal > GUARANTOR_REQUIRED_ABOVE or risk == RiskLevel.HIGH

    if risk == RiskLevel.LOW:
        plans = LOW_RISK_PLANS
        if principal > LONG_TERM_SUGGESTED_ABOVE:
            plans += (LONG_TERM_PLAN,)
    elif risk == RiskLevel.MEDIUM:
        plans = SHORT_TERM_PLANS + ((LONG_TERM_PLAN,) if guarantor_recommended else ())
    else:
        plans = (LONG_TERM_PLAN,) if guarantor_recommended else ()

    return EligibilityAssessment(
        eligible=not reasons,
        risk_level=risk,
        max_loan_amount=max_loan_amount,
        guarantor_recommended=guarantor_recommended,
        reasons=tuple(reasons),
        recommended_plans=plans,
    )
