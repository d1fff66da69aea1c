"""Escrow movements paired with shipment transitions.

Handlers call these after mutating the aggregate and before persisting it.
A refused movement raises ``EscrowTransferFailed``, which rolls back the
handler's unit of work, so the shipment never changes without its funds.
"""

import structlog

from ledger.shipment.errors import EscrowTransferFailed
from ledger.shipment.shipment import FundAction, Shipment, Transition
from ledger.transfer import get_transfer
from ledger.transfer.port import TransferResult

logger = structlog.get_logger(__name__)


def lock_price(shipment: Shipment) -> TransferResult:
    """Move the shipment's price from the sender into escrow."""
    result = get_transfer().lock(
        owner=shipment.sender,
        amount=shipment.price,
        reference=shipment.escrow_reference("lock"),
    )
    _ensure_moved(shipment, result)
    return result


def settle(shipment: Shipment, step: Transition) -> TransferResult | None:
    """Release the escrowed price as dictated by the transition's fund action."""
    if step.fund_action is FundAction.NONE:
        return None

    if step.fund_action is FundAction.REFUND_SENDER:
        beneficiary, purpose = shipment.sender, "refund"
    else:
        beneficiary, purpose = shipment.receiver, "payout"

    result = get_transfer().release(
        beneficiary=beneficiary,
        amount=shipment.price,
        reference=shipment.escrow_reference(purpose),
    )
    _ensure_moved(shipment, result)
    return result


def _ensure_moved(shipment: Shipment, result: TransferResult) -> None:
    if result.success:
        return
    logger.warning(
        "Escrow transfer refused by value-transfer substrate",
        shipment_id=str(shipment.id),
        reference=result.reference,
        reason=result.failure_reason,
    )
    raise EscrowTransferFailed(result.failure_reason or "Value transfer was refused")
