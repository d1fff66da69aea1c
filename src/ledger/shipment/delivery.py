"""Shipment delivery — command and handler.

Completing a shipment records the delivery time and pays the escrowed price
out to the receiver, all in one unit of work.
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
class CompleteShipment:
    """Confirm delivery of an in-transit shipment."""

    caller = Identifier(required=True)
    sender = Identifier(required=True)
    receiver = Identifier(required=True)
    index = Integer(required=True, min_value=0)


@ledger.command_handler(part_of=Shipment)
class CompleteShipmentHandler:
    @handle(CompleteShipment)
    def complete_shipment(self, command):
        repo = current_domain.repository_for(Shipment)
        shipment = repo.at(command.sender, command.index)

        step = shipment.complete(receiver=command.receiver)
        settle(shipment, step)
        repo.add(shipment)

        logger.info(
            "Shipment delivered and escrow paid to receiver",
            shipment_id=str(shipment.id),
            sender=shipment.sender,
            index=shipment.sender_index,
            receiver=shipment.receiver,
            paid=shipment.price,
            delivery_time=shipment.delivery_time,
        )
