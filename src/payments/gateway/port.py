"""Payment widget port (abstract interface).

Defines the contract every payment widget adapter implements. The widget is
a hosted overlay that collects card details itself; the storefront hands it a
``PaymentRequest`` and awaits exactly one ``PaymentOutcome``.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum

from shared.money import to_minor_units


@dataclass(frozen=True)
class PaymentRequest:
    """What the widget needs to open for one pending order."""

    public_key: str
    email: str
    amount: int  # major units, e.g. naira
    currency: str
    reference: str
    metadata: dict = field(default_factory=dict)

    @property
    def amount_minor(self) -> int:
        """Amount in the smallest currency unit (kobo for NGN)."""
        return to_minor_units(self.amount)

    def to_dict(self) -> dict:
        return {
            "public_key": self.public_key,
            "email": self.email,
            "amount": self.amount,
            "amount_minor": self.amount_minor,
            "currency": self.currency,
            "reference": self.reference,
            "metadata": self.metadata,
        }


class OutcomeKind(Enum):
    SUCCEEDED = "succeeded"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class PaymentOutcome:
    """Result of one widget session."""

    kind: OutcomeKind
    reference: str | None = None
    status: str | None = None

    @classmethod
    def succeeded(cls, reference: str, status: str = "success") -> "PaymentOutcome":
        return cls(kind=OutcomeKind.SUCCEEDED, reference=reference, status=status)

    @classmethod
    def cancelled(cls) -> "PaymentOutcome":
        return cls(kind=OutcomeKind.CANCELLED)

    @property
    def is_success(self) -> bool:
        return self.kind is OutcomeKind.SUCCEEDED


class PaymentWidget(ABC):
    """Abstract payment widget interface."""

    @abstractmethod
    def ensure_configured(self) -> None:
        """Raise PaymentConfigurationError if the widget cannot be opened."""
        ...

    @abstractmethod
    async def collect(self, request: PaymentRequest) -> PaymentOutcome:
        """Open the widget for ``request`` and wait for the shopper to finish."""
        ...
