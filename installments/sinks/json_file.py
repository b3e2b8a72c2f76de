"""JSON file repository for contracts."""

import json
import logging
from pathlib import Path
from typing import Iterable

from installments.exceptions import DuplicateContractError, SubmissionError
from installments.models import InstallmentContract
from installments.sinks.base import ContractRepository
from installments.sinks.serialization import to_dict

logger = logging.getLogger(__name__)


class JsonFileContractRepository(ContractRepository):
    """Append contracts to a JSON Lines file, one contract per line."""

    def __init__(self, output_dir: str | Path, filename: str = "contracts.jsonl") -> None:
        """Initialize JSON file repository.

        Parameters
        ----------
        output_dir : str | Path
            Directory holding the contracts file.
        filename : str
            Name of the JSON Lines file.
        """
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self.file_path = self.output_dir / filename
        self._numbers = set(self._existing_numbers())

    def save(self, contract: InstallmentContract) -> InstallmentContract:
        """Append a contract; the line is written whole or not at all."""
        if contract.contract_number in self._numbers:
            raise DuplicateContractError(f"Contract {contract.contract_number} already exists")

        line = json.dumps(to_dict(contract), ensure_ascii=False) + "\n"
        try:
            with open(self.file_path, "a", encoding="utf-8") as f:
                f.write(line)
        except OSError as e:
            raise SubmissionError(f"Could not write {self.file_path}: {e}") from e

        self._numbers.add(contract.contract_number)
        logger.debug("Wrote contract %s to %s", contract.contract_number, self.file_path)
        return contract

    def load(self) -> list[dict]:
        """Read stored contracts back as dictionaries."""
        if not self.file_path.exists():
            return []
        with open(self.file_path, encoding="utf-8") as f:
            return [json.loads(line) for line in f if line.strip()]

    def export(self, contracts: Iterable[InstallmentContract], path: str | Path, pretty: bool = False) -> Path:
        """Write contracts as a single JSON array."""
        path = Path(path)
        data = [to_dict(contract) for contract in contracts]
        with open(path, "w", encoding="utf-8") as f:
            if pretty:
                json.dump(data, f, indent=2, ensure_ascii=False)
            else:
                json.dump(data, f, ensure_ascii=False)
        return path

    def _existing_numbers(self) -> Iterable[str]:
        for record in self.load():
            yield record["contract_number"]
