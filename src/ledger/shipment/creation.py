"""Shipment creation — command and handler."""

from dataclasses import dataclass

import structlog
from protean import handle
from protean.fields import Float, Identifier, Integer
from protean.utils.globals import current_domain

from ledger.domain import ledger
from ledger.shipment.escrow import lock_price
from ledger.shipment.shipment import Shipment

logger = structlog.get_logger(__name__)


@ledger.command(part_of="Shipment")
class CreateShipment:
    """Register a new shipment and lock its price in escrow."""

    caller = Identifier(required=True)
    receiver = Identifier(required=True)
    pickup_time = Integer(required=True, min_value=0)
    distance = Float(required=True, min_value=0.0)
    price = Integer(required=True, min_value=0)
    attached_value = Integer(required=True, min_value=0)


@dataclass(frozen=True)
class ShipmentRef:
    """Addresses of a freshly created shipment."""

    shipment_id: str
    sender: str
    index: int
    global_index: int


@ledger.command_handler(part_of=Shipment)
class CreateShipmentHandler:
    @handle(CreateShipment)
    def create_shipment(self, command):
        repo = current_domain.repository_for(Shipment)
        sender_index, global_index = repo.next_indices(command.caller)

        shipment = Shipment.create(
            sender=command.caller,
            receiver=command.receiver,
            pickup_time=command.pickup_time,
            distance=command.distance,
            price=command.price,
            attached_value=command.attached_value,
            sender_index=sender_index,
            global_index=global_index,
        )
        lock_price(shipment)
        repo.add(shipment)

        logger.info(
            "Shipment created and price locked in escrow",
            shipment_id=str(shipment.id),
            sender=shipment.sender,
            index=sender_index,
            global_index=global_index,
            price=shipment.price,
        )
        return ShipmentRef(
            shipment_id=str(shipment.id),
            sender=shipment.sender,
            index=sender_index,
            global_index=global_index,
        )
