"""Customer and guarantor profiles captured during the contract form."""

import uuid
from dataclasses import dataclass, field
from decimal import Decimal


def _new_id() -> str:
    return str(uuid.uuid4())


@dataclass
class CustomerProfile:
    """Contract applicant.

    Fields hold raw form input; nothing is normalized until validation.
    """

    name: str = ""
    phone: str = ""
    id_card: str = ""  # 13-digit national ID, separators allowed
    address: str = ""
    occupation: str = ""
    monthly_income: Decimal | None = None
    email: str | None = None
    customer_id: str = field(default_factory=_new_id)


@dataclass
class GuarantorProfile:
    """Second natural person co-signing a contract."""

    name: str = ""
    phone: str = ""
    id_card: str = ""
    address: str = ""
    occupation: str = ""
    monthly_income: Decimal | None = None
    email: str | None = None
    guarantor_id: str = field(default_factory=_new_id)
