"""Value-transfer adapter factory.

Provides get_transfer() / set_transfer() to swap implementations. The adapter
is chosen by the VALUE_TRANSFER_ADAPTER environment variable; FakeTransfer
is the default for development and testing.
"""

import os

from ledger.transfer.port import ValueTransferPort

_current_transfer: ValueTransferPort | None = None


def get_transfer() -> ValueTransferPort:
    """Return the configured value-transfer adapter (singleton)."""
    global _current_transfer
    if _current_transfer is None:
        adapter = os.environ.get("VALUE_TRANSFER_ADAPTER", "fake")
        if adapter == "fake":
            from ledger.transfer.fake_adapter import FakeTransfer

            _current_transfer = FakeTransfer()
        else:
            raise ValueError(f"Unknown value transfer adapter: {adapter}")
    return _current_transfer


def set_transfer(transfer: ValueTransferPort) -> None:
    """Override the active value-transfer adapter (useful for tests)."""
    global _current_transfer
    _current_transfer = transfer


def reset_transfer() -> None:
    """Reset to the configured default adapter."""
    global _current_transfer
    _current_transfer = None
