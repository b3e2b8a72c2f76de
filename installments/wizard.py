"""Step-gated contract wizard: customer -> plan -> [guarantor] -> review."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Iterable

from installments.calculator import calculate
from installments.config import DEFAULT_POLICY, PolicyConfig
from installments.contracts import ContractSubmitter, SubmissionResult, assemble_contract
from installments.exceptions import InvalidWizardStateError
from installments.models import (
    CustomerProfile,
    GuarantorProfile,
    InstallmentCalculation,
    InstallmentPlan,
)
from installments.validation import (
    ValidationErrors,
    requires_guarantor,
    validate_customer,
    validate_guarantor,
    validate_plan,
)

logger = logging.getLogger(__name__)


class WizardStep(str, Enum):
    CUSTOMER = "customer"
    PLAN = "plan"
    GUARANTOR = "guarantor"
    REVIEW = "review"


# (current step, plan requires guarantor) -> next step after a passing validation
FORWARD_TRANSITIONS: dict[tuple[WizardStep, bool], WizardStep] = {
    (WizardStep.CUSTOMER, False): WizardStep.PLAN,
    (WizardStep.CUSTOMER, True): WizardStep.PLAN,
    (WizardStep.PLAN, False): WizardStep.REVIEW,
    (WizardStep.PLAN, True): WizardStep.GUARANTOR,
    (WizardStep.GUARANTOR, True): WizardStep.REVIEW,
}

BACKWARD_TRANSITIONS: dict[tuple[WizardStep, bool], WizardStep] = {
    (WizardStep.PLAN, False): WizardStep.CUSTOMER,
    (WizardStep.PLAN, True): WizardStep.CUSTOMER,
    (WizardStep.GUARANTOR, True): WizardStep.PLAN,
    (WizardStep.GUARANTOR, False): WizardStep.PLAN,
    (WizardStep.REVIEW, True): WizardStep.GUARANTOR,
    (WizardStep.REVIEW, False): WizardStep.PLAN,
}

STEP_PROGRESS = {
    WizardStep.CUSTOMER: 25,
    WizardStep.PLAN: 50,
    WizardStep.GUARANTOR: 75,
    WizardStep.REVIEW: 100,
}


def next_step(step: WizardStep, valid: bool, requires_guarantor: bool) -> WizardStep:
    """Forward transition; a failed validation keeps the current step.

    Raises
    ------
    InvalidWizardStateError
        If ``step`` has no forward transition (review is terminal).
    """
    if not valid:
        return step
    try:
        return FORWARD_TRANSITIONS[(step, requires_guarantor)]
    except KeyError:
        raise InvalidWizardStateError(f"No forward transition from {step.value}") from None


def previous_step(step: WizardStep, requires_guarantor: bool) -> WizardStep:
    """Backward transition. The first step stays where it is."""
    return BACKWARD_TRANSITIONS.get((step, requires_guarantor), step)


@dataclass
class ContractDraft:
    """Mutable form state behind the wizard."""

    customer: CustomerProfile
    principal: Decimal
    plan: InstallmentPlan | None = None
    guarantor: GuarantorProfile | None = None
    notes: str = ""

    @property
    def requires_guarantor(self) -> bool:
        """See :func:`installments.validation.requires_guarantor`."""
        return requires_guarantor(self.plan, self.customer, self.principal)


@dataclass
class ContractWizard:
    """Drive a contract draft through validation steps to submission.

    Validators are pure; this class applies their results to ``errors``
    and decides the step.
    """

    draft: ContractDraft
    plans: list[InstallmentPlan]
    submitter: ContractSubmitter
    policy: PolicyConfig = DEFAULT_POLICY
    step: WizardStep = WizardStep.CUSTOMER
    errors: ValidationErrors = field(default_factory=dict)
    closed: bool = False

    @classmethod
    def start(
        cls,
        customer: CustomerProfile,
        principal: Decimal,
        plans: Iterable[InstallmentPlan],
        submitter: ContractSubmitter,
        policy: PolicyConfig = DEFAULT_POLICY,
    ) -> ContractWizard:
        """Open a wizard for a customer and sale amount."""
        return cls(
            draft=ContractDraft(customer=customer, principal=Decimal(principal)),
            plans=list(plans),
            submitter=submitter,
            policy=policy,
        )

    @property
    def progress(self) -> int:
        """Completion percentage of the current step."""
        return STEP_PROGRESS[self.step]

    @property
    def calculation(self) -> InstallmentCalculation | None:
        """Figures for the current principal and plan, or ``None``."""
        return calculate(self.draft.principal, self.draft.plan)

    def set_principal(self, principal: Decimal) -> None:
        self._ensure_editable()
        self.draft.principal = Decimal(principal)

    def set_guarantor(self, guarantor: GuarantorProfile | None) -> None:
        self._ensure_open()
        self.draft.guarantor = guarantor

    def set_notes(self, notes: str) -> None:
        self._ensure_open()
        self.draft.notes = notes

    def select_plan(self, plan_id: str | None) -> bool:
        """Select a plan by ID; ``None`` clears the selection.

        Unknown or inactive plans leave the selection empty and record a
        ``plan`` error.
        """
        self._ensure_editable()
        if plan_id is None:
            self.draft.plan = None
            return True

        plan = next((p for p in self.plans if p.plan_id == plan_id), None)
        if plan is None or not plan.is_active:
            self.draft.plan = None
            self.errors = {"plan": "Selected installment plan is not available"}
            return False

        self.draft.plan = plan
        self.errors.pop("plan", None)
        return True

    def validate_current_step(self) -> ValidationErrors:
        """Run the validator for the current step without changing state."""
        draft = self.draft
        if self.step == WizardStep.CUSTOMER:
            return validate_customer(draft.customer, self.policy)
        if self.step == WizardStep.PLAN:
            return validate_plan(
                draft.customer, draft.plan, draft.principal, self.calculation, self.policy
            )
        if self.step == WizardStep.GUARANTOR:
            return validate_guarantor(draft.guarantor, draft.customer, self.policy)
        return {}

    def advance(self) -> bool:
        """Validate the current step and move forward when it passes.

        Returns
        -------
        bool
            Whether the step changed.
        """
        self._ensure_open()
        if self.step == WizardStep.REVIEW:
            raise InvalidWizardStateError("Review is the last step; submit or dismiss")

        self.errors = self.validate_current_step()
        valid = not self.errors
        target = next_step(self.step, valid, self.draft.requires_guarantor)

        moved = target != self.step
        if moved:
            logger.debug("Wizard %s -> %s", self.step.value, target.value)
        self.step = target
        return moved

    def back(self) -> WizardStep:
        """Move one step back without validating."""
        self._ensure_open()
        self.step = previous_step(self.step, self.draft.requires_guarantor)
        self.errors = {}
        return self.step

    def submit(self) -> SubmissionResult:
        """Assemble the contract and hand it to the submitter.

        On failure the wizard stays on review so the user can resubmit.

        Raises
        ------
        InvalidWizardStateError
            Outside the review step, or after the wizard was closed.
        """
        self._ensure_open()
        if self.step != WizardStep.REVIEW:
            raise InvalidWizardStateError(f"Cannot submit from step {self.step.value}")

        draft = self.draft
        calculation = self.calculation
        if draft.plan is None or calculation is None:
            raise InvalidWizardStateError("Review reached without a calculated plan")

        contract = assemble_contract(
            customer=draft.customer,
            plan=draft.plan,
            principal=draft.principal,
            calculation=calculation,
            guarantor=draft.guarantor if draft.requires_guarantor else None,
            notes=draft.notes,
            policy=self.policy,
        )

        result = self.submitter.submit(contract)
        if result.success:
            self.closed = True
        return result

    def dismiss(self) -> None:
        """Abandon the draft. Nothing is persisted."""
        logger.debug("Wizard dismissed at step %s", self.step.value)
        self.closed = True

    def _ensure_open(self) -> None:
        if self.closed:
            raise InvalidWizardStateError("Wizard is closed")

    def _ensure_editable(self) -> None:
        # Plan and amount are fixed once the plan step has been passed.
        self._ensure_open()
        if self.step not in (WizardStep.CUSTOMER, WizardStep.PLAN):
            raise InvalidWizardStateError(
                f"Plan and amount cannot change at step {self.step.value}; go back first"
            )
