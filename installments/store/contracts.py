"""In-memory contract store with contract-number uniqueness."""

from dataclasses import dataclass, field

from installments.exceptions import DuplicateContractError
from installments.models import InstallmentContract
from installments.sinks.base import ContractRepository


@dataclass
class InMemoryContractStore(ContractRepository):
    """Contract repository kept in process memory."""

    contracts: dict[str, InstallmentContract] = field(default_factory=dict)

    # Relationship indexes
    _customer_contracts: dict[str, list[str]] = field(default_factory=dict)
    _guarantor_contracts: dict[str, list[str]] = field(default_factory=dict)

    def save(self, contract: InstallmentContract) -> InstallmentContract:
        """Add a contract to the store."""
        if contract.contract_number in self.contracts:
            raise DuplicateContractError(f"Contract {contract.contract_number} already exists")

        self.contracts[contract.contract_number] = contract
        self._customer_contracts.setdefault(contract.customer_id, []).append(
            contract.contract_number
        )
        if contract.guarantor_id:
            self._guarantor_contracts.setdefault(contract.guarantor_id, []).append(
                contract.contract_number
            )
        return contract

    def get(self, contract_number: str) -> InstallmentContract | None:
        return self.contracts.get(contract_number)

    def get_customer_contracts(self, customer_id: str) -> list[InstallmentContract]:
        """Get all contracts for a customer."""
        numbers = self._customer_contracts.get(customer_id, [])
        return [self.contracts[n] for n in numbers]

    def get_guaranteed_contracts(self, guarantor_id: str) -> list[InstallmentContract]:
        """Get all contracts a guarantor co-signed."""
        numbers = self._guarantor_contracts.get(guarantor_id, [])
        return [self.contracts[n] for n in numbers]

    def __len__(self) -> int:
        return len(self.contracts)
