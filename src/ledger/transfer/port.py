"""Value-transfer port (abstract interface).

Defines the contract every value-transfer adapter must implement. The ledger
only decides whether and how much value moves; the adapter is the mechanism
that actually moves it between identities and the escrow held by the ledger.

Every movement carries a ``reference``. Adapters must treat it as an
idempotency key: replaying a reference returns the original result and moves
nothing.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class TransferResult:
    """Result of a single value movement."""

    success: bool
    reference: str
    amount: int = 0
    transfer_id: str | None = None
    failure_reason: str | None = None


class ValueTransferPort(ABC):
    """Abstract value-transfer interface."""

    @abstractmethod
    def lock(self, owner: str, amount: int, reference: str) -> TransferResult:
        """Move ``amount`` from ``owner`` into escrow."""
        ...

    @abstractmethod
    def release(self, beneficiary: str, amount: int, reference: str) -> TransferResult:
        """Move ``amount`` out of escrow to ``beneficiary``."""
        ...
