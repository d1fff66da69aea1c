"""Shipment dispatch — command and handler that put a shipment in transit."""

import structlog
from protean import handle
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain

from ledger.domain import ledger
from ledger.shipment.escrow import settle
from ledger.shipment.shipment import Shipment, StartPolicy

logger = structlog.get_logger(__name__)


@ledger.command(part_of="Shipment")
class StartShipment:
    caller = Identifier(required=True)
    sender = Identifier(required=True)
    receiver = Identifier(required=True)
    index = Integer(required=True, min_value=0)


def configured_start_policy() -> StartPolicy:
    """Start policy from the ``[custom]`` section of the domain config."""
    custom = current_domain.config.get("custom") or {}
    return StartPolicy(custom.get("start_policy") or StartPolicy.PARTICIPANTS.value)


@ledger.command_handler(part_of=Shipment)
class StartShipmentHandler:
    @handle(StartShipment)
    def start_shipment(self, command):
        repo = current_domain.repository_for(Shipment)
        shipment = repo.at(command.sender, command.index)

        step = shipment.start(
            caller=command.caller,
            receiver=command.receiver,
            policy=configured_start_policy(),
        )
        settle(shipment, step)
        repo.add(shipment)

        logger.info(
            "Shipment handed over and in transit",
            shipment_id=str(shipment.id),
            sender=shipment.sender,
            index=shipment.sender_index,
            caller=command.caller,
        )
