"""Rejections raised by the Shipment Ledger.

Every rejection is synchronous and leaves the ledger exactly as it was: the
command handler's unit of work is rolled back and no value moves. Rejections
are ``ValidationError`` subclasses, so they carry a ``messages`` dict keyed
by the offending field like any other Protean validation failure.
"""

from protean.exceptions import ObjectNotFoundError, ValidationError


class ShipmentLedgerError(ValidationError):
    """Base class for all ledger rejections."""

    field = "shipment"

    def __init__(self, message: str) -> None:
        super().__init__({self.field: [message]})


class PaymentMismatch(ShipmentLedgerError):
    """Attached value differs from the declared price."""

    field = "attached_value"


class InvalidReceiver(ShipmentLedgerError):
    """Supplied receiver does not match the stored receiver."""

    field = "receiver"


class Unauthorized(ShipmentLedgerError):
    """Caller identity is not allowed to perform the operation."""

    field = "caller"


class InvalidStateTransition(ShipmentLedgerError):
    field = "status"


class AlreadyDelivered(ShipmentLedgerError):
    field = "status"


class NotInTransit(ShipmentLedgerError):
    field = "status"


class AlreadyPaid(ShipmentLedgerError):
    field = "is_paid"


class EscrowTransferFailed(ShipmentLedgerError):
    """The value-transfer substrate refused to move the escrowed value."""

    field = "escrow"


class NotFound(ObjectNotFoundError):
    """No shipment exists at the requested index."""
