#!/usr/bin/env python3
"""Run generated customers through the contract wizard.

Each customer is offered a random sale amount and the first plan whose
bounds fit it. Contracts that pass validation are submitted to the chosen
repository; rejected drafts are reported with their validation errors.

Usage:
    python scripts/simulate_contracts.py --customers 20
    python scripts/simulate_contracts.py --customers 50 --output json --output-dir output
    python scripts/simulate_contracts.py --output postgres --notify kafka
"""

import argparse
import logging
import random
import sys
from decimal import Decimal
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from installments.catalog import StaticPlanSource, load_active_plans
from installments.config import EngineConfig
from installments.contracts import ContractSubmitter
from installments.generators import CustomerProfileGenerator
from installments.logging import setup_logging
from installments.models import InstallmentContract
from installments.sinks import (
    ConsoleNotifier,
    ContractRepository,
    JsonFileContractRepository,
    KafkaNotifier,
    Notifier,
    PostgresContractRepository,
    PostgresPlanSource,
)
from installments.store import InMemoryContractStore
from installments.wizard import ContractWizard, WizardStep

logger = logging.getLogger(__name__)


def build_repository(kind: str, config: EngineConfig, output_dir: Path) -> ContractRepository:
    """Create the contract repository selected on the command line."""
    if kind == "json":
        return JsonFileContractRepository(output_dir)
    if kind == "postgres":
        return PostgresContractRepository(config.postgres)
    return InMemoryContractStore()


def build_notifier(kind: str, config: EngineConfig) -> Notifier:
    """Create the notifier selected on the command line."""
    if kind == "kafka":
        return KafkaNotifier(config.kafka)
    return ConsoleNotifier()


def run(args: argparse.Namespace, config: EngineConfig) -> int:
    """Simulate contract drafting and return the number of contracts created."""
    rng = random.Random(args.seed)

    source = PostgresPlanSource(config.postgres) if args.plans == "postgres" else StaticPlanSource([])
    plans = load_active_plans(source)

    repository = build_repository(args.output, config, Path(args.output_dir))
    notifier = build_notifier(args.notify, config)
    submitter = ContractSubmitter(repository, notifier)
    generator = CustomerProfileGenerator(seed=args.seed)

    created: list[InstallmentContract] = []
    for customer in generator.generate_batch(args.customers):
        principal = Decimal(rng.randint(5, 300) * 1000)
        wizard = ContractWizard.start(customer, principal, plans, submitter, policy=config.policy)

        wizard.advance()
        fitting = [p for p in plans if p.min_amount <= principal <= p.max_amount]
        if fitting:
            wizard.select_plan(rng.choice(fitting).plan_id)
        wizard.advance()

        if wizard.step == WizardStep.GUARANTOR:
            wizard.set_guarantor(generator.generate_guarantor(exclude_id_card=customer.id_card))
            wizard.advance()

        if wizard.step != WizardStep.REVIEW:
            logger.info(
                "Draft for %s stopped at %s: %s",
                customer.name,
                wizard.step.value,
                "; ".join(wizard.errors.values()),
            )
            wizard.dismiss()
            continue

        result = wizard.submit()
        if result.success:
            created.append(result.contract)

    if isinstance(notifier, KafkaNotifier):
        notifier.close()

    if args.export and isinstance(repository, JsonFileContractRepository):
        path = repository.export(created, args.export, pretty=config.output.pretty_json)
        logger.info("Exported %d contracts to %s", len(created), path)

    logger.info("Created %d of %d contracts", len(created), args.customers)
    return len(created)


def main() -> None:
    """Main entry point."""
    config = EngineConfig.from_env()

    parser = argparse.ArgumentParser(
        description="Simulate installment contract drafting with generated customers"
    )
    parser.add_argument(
        "--customers",
        type=int,
        default=10,
        help="Number of customers to simulate (default: 10)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for reproducibility",
    )
    parser.add_argument(
        "--plans",
        choices=["fallback", "postgres"],
        default="fallback",
        help="Plan catalog source (default: fallback)",
    )
    parser.add_argument(
        "--output",
        choices=["memory", "json", "postgres"],
        default="memory",
        help="Contract repository (default: memory)",
    )
    parser.add_argument(
        "--output-dir",
        default=str(config.output.contracts_dir),
        help="Directory for the json repository (default: OUTPUT_DIR or output)",
    )
    parser.add_argument(
        "--export",
        default=None,
        help="With --output json, also write created contracts as one JSON array to this path",
    )
    parser.add_argument(
        "--notify",
        choices=["console", "kafka"],
        default="console",
        help="Notification channel (default: console)",
    )
    parser.add_argument(
        "--log-level",
        default=config.log_level,
        help="Log level (default: LOG_LEVEL or INFO)",
    )
    parser.add_argument(
        "--log-format",
        choices=["standard", "json"],
        default=config.log_format,
        help="Log format (default: LOG_FORMAT or standard)",
    )
    args = parser.parse_args()

    setup_logging(level=args.log_level, format_type=args.log_format)
    run(args, config)


if __name__ == "__main__":
    main()
