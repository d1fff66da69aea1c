"""Configurable fake value-transfer adapter for development and testing.

Keeps balances in memory: one running balance per identity plus the escrow
balance held on behalf of the ledger. Balances may go negative, which simply
means an identity has sent more value than it has received.

It can be configured at runtime to refuse movements, making it useful for
exercising the ledger's rollback behaviour.
"""

from collections import defaultdict
from uuid import uuid4

from ledger.transfer.port import TransferResult, ValueTransferPort


class FakeTransfer(ValueTransferPort):
    """Configurable in-memory value transfer."""

    def __init__(self) -> None:
        self.should_succeed: bool = True
        self.failure_reason: str = "Transfer rejected"
        self.calls: list[dict] = []
        self.balances: dict[str, int] = defaultdict(int)
        self.escrow_balance: int = 0
        self._processed: dict[str, TransferResult] = {}

    def configure(self, should_succeed: bool, failure_reason: str = "Transfer rejected") -> None:
        """Configure transfer behavior at runtime."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def balance_of(self, identity: str) -> int:
        return self.balances.get(identity, 0)

    def lock(self, owner: str, amount: int, reference: str) -> TransferResult:
        self.calls.append({"method": "lock", "owner": owner, "amount": amount, "reference": reference})
        if reference in self._processed:
            return self._processed[reference]

        if not self.should_succeed:
            return TransferResult(success=False, reference=reference, failure_reason=self.failure_reason)

        self.balances[owner] -= amount
        self.escrow_balance += amount
        return self._record(reference, amount)

    def release(self, beneficiary: str, amount: int, reference: str) -> TransferResult:
        self.calls.append({"method": "release", "beneficiary": beneficiary, "amount": amount, "reference": reference})
        if reference in self._processed:
            return self._processed[reference]

        if not self.should_succeed:
            return TransferResult(success=False, reference=reference, failure_reason=self.failure_reason)
        if amount > self.escrow_balance:
            return TransferResult(
                success=False,
                reference=reference,
                failure_reason=f"Escrow holds {self.escrow_balance}, cannot release {amount}",
            )

        self.escrow_balance -= amount
        self.balances[beneficiary] += amount
        return self._record(reference, amount)

    def _record(self, reference: str, amount: int) -> TransferResult:
        result = TransferResult(
            success=True,
            reference=reference,
            amount=amount,
            transfer_id=f"fake_xfer_{uuid4().hex[:12]}",
        )
        self._processed[reference] = result
        return result
