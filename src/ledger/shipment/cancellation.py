"""Shipment cancellation — command and handler.

Cancelling refunds the full escrowed price to the sender. A cancelled
shipment can never be cancelled (or refunded) again.
"""

import structlog
from protean import handle
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain

from ledger.domain import ledger
from ledger.shipment.escrow import settle
from ledger.shipment.shipment import Shipment

logger = structlog.get_logger(__name__)


@ledger.command(part_of="Shipment")
class CancelShipment:
    """Cancel a pending or in-transit shipment. Sender only."""

    caller = Identifier(required=True)
    sender = Identifier(required=True)
    receiver = Identifier(required=True)
    index = Integer(required=True, min_value=0)


@ledger.command_handler(part_of=Shipment)
class CancelShipmentHandler:
    @handle(CancelShipment)
    def cancel_shipment(self, command):
        repo = current_domain.repository_for(Shipment)
        shipment = repo.at(command.sender, command.index)

        step = shipment.cancel(caller=command.caller, receiver=command.receiver)
        settle(shipment, step)
        repo.add(shipment)

        logger.info(
            "Shipment cancelled and escrow refunded to sender",
            shipment_id=str(shipment.id),
            sender=shipment.sender,
            index=shipment.sender_index,
            refunded=shipment.price,
        )
