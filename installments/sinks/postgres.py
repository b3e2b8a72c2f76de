"""PostgreSQL adapters for the plan catalog and contract persistence."""

import logging
from decimal import Decimal

from installments.catalog import PlanSource
from installments.config import PostgresConfig
from installments.exceptions import (
    CatalogUnavailableError,
    DuplicateContractError,
    SubmissionError,
)
from installments.models import InstallmentContract, InstallmentPlan
from installments.sinks.base import ContractRepository

logger = logging.getLogger(__name__)

PLAN_QUERY = """
    SELECT id, name, plan_number, number_of_installments, interest_rate,
           down_payment_percent, processing_fee, min_amount, max_amount,
           requires_guarantor, is_active
    FROM installment_plans
    WHERE is_active = true
    ORDER BY number_of_installments
"""

INSERT_CONTRACT = """
    INSERT INTO installment_contracts (
        id, contract_number, customer_id, plan_id, total_amount, down_payment,
        financed_amount, monthly_payment, remaining_balance, interest_rate,
        number_of_installments, status, start_date, end_date, guarantor_id,
        notes, created_at
    ) VALUES (
        %(contract_id)s, %(contract_number)s, %(customer_id)s, %(plan_id)s,
        %(total_amount)s, %(down_payment)s, %(financed_amount)s,
        %(monthly_payment)s, %(remaining_balance)s, %(interest_rate)s,
        %(number_of_installments)s, %(status)s, %(start_date)s, %(end_date)s,
        %(guarantor_id)s, %(notes)s, %(created_at)s
    )
"""


def _row_to_plan(row: tuple) -> InstallmentPlan:
    (plan_id, name, plan_number, months, rate, down, fee, min_amount, max_amount,
     requires_guarantor, is_active) = row
    return InstallmentPlan(
        plan_id=str(plan_id),
        name=name,
        plan_number=plan_number,
        months=int(months),
        interest_rate=Decimal(str(rate)),
        down_payment_percent=Decimal(str(down)),
        processing_fee=Decimal(str(fee)),
        min_amount=Decimal(str(min_amount)),
        max_amount=Decimal(str(max_amount)),
        requires_guarantor=bool(requires_guarantor),
        is_active=bool(is_active),
    )


class PostgresPlanSource(PlanSource):
    """Read active plans from the ``installment_plans`` table."""

    def __init__(self, config: PostgresConfig | str) -> None:
        self.dsn = config.connection_string if isinstance(config, PostgresConfig) else config

    def list_active_plans(self) -> list[InstallmentPlan]:
        import psycopg

        try:
            with psycopg.connect(self.dsn) as conn:
                with conn.cursor() as cur:
                    cur.execute(PLAN_QUERY)
                    rows = cur.fetchall()
        except psycopg.Error as e:
            raise CatalogUnavailableError(f"Could not read installment plans: {e}") from e

        plans = [_row_to_plan(row) for row in rows]
        logger.info("Loaded %d installment plans from PostgreSQL", len(plans))
        return plans


class PostgresContractRepository(ContractRepository):
    """Insert contracts into ``installment_contracts`` in one transaction."""

    def __init__(self, config: PostgresConfig | str) -> None:
        self.dsn = config.connection_string if isinstance(config, PostgresConfig) else config

    def save(self, contract: InstallmentContract) -> InstallmentContract:
        import psycopg

        params = {
            "contract_id": contract.contract_id,
            "contract_number": contract.contract_number,
            "customer_id": contract.customer_id,
            "plan_id": contract.plan_id,
            "total_amount": contract.total_amount,
            "down_payment": contract.down_payment,
            "financed_amount": contract.financed_amount,
            "monthly_payment": contract.monthly_payment,
            "remaining_balance": contract.remaining_balance,
            "interest_rate": contract.interest_rate,
            "number_of_installments": contract.number_of_installments,
            "status": contract.status.value,
            "start_date": contract.start_date,
            "end_date": contract.end_date,
            "guarantor_id": contract.guarantor_id,
            "notes": contract.notes,
            "created_at": contract.created_at,
        }

        try:
            # The connection context commits on success and rolls back on error.
            with psycopg.connect(self.dsn) as conn:
                with conn.cursor() as cur:
                    cur.execute(INSERT_CONTRACT, params)
        except psycopg.errors.UniqueViolation as e:
            raise DuplicateContractError(
                f"Contract {contract.contract_number} already exists"
            ) from e
        except psycopg.Error as e:
            raise SubmissionError(f"Could not store contract {contract.contract_number}: {e}") from e

        logger.info("Stored contract %s in PostgreSQL", contract.contract_number)
        return contract
