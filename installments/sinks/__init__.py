"""Collaborator adapters for contract persistence and notifications."""

from installments.sinks.base import ContractRepository, Notifier
from installments.sinks.console import ConsoleNotifier
from installments.sinks.json_file import JsonFileContractRepository
from installments.sinks.kafka import KafkaNotifier
from installments.sinks.postgres import PostgresContractRepository, PostgresPlanSource

__all__ = [
    "ConsoleNotifier",
    "ContractRepository",
    "JsonFileContractRepository",
    "KafkaNotifier",
    "Notifier",
    "PostgresContractRepository",
    "PostgresPlanSource",
]
