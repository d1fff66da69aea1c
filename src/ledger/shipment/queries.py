"""Read access to the ledger.

Reads return frozen ``ShipmentRecord`` snapshots rather than aggregates, so a
caller holding a record cannot mutate the ledger through it.
"""

from dataclasses import dataclass
from datetime import datetime

from protean.utils.globals import current_domain

from ledger.shipment.shipment import Shipment


@dataclass(frozen=True)
class ShipmentRecord:
    shipment_id: str
    sender: str
    receiver: str
    index: int
    global_index: int
    pickup_time: int
    delivery_time: int
    distance: float
    price: int
    status: str
    is_paid: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_shipment(cls, shipment: Shipment) -> "ShipmentRecord":
        return cls(
            shipment_id=str(shipment.id),
            sender=shipment.sender,
            receiver=shipment.receiver,
            index=shipment.sender_index,
            global_index=shipment.global_index,
            pickup_time=shipment.pickup_time,
            delivery_time=shipment.delivery_time,
            distance=shipment.distance,
            price=shipment.price,
            status=shipment.status,
            is_paid=bool(shipment.is_paid),
            created_at=shipment.created_at,
            updated_at=shipment.updated_at,
        )


def _repo():
    return current_domain.repository_for(Shipment)


def get_shipment(sender: str, index: int) -> ShipmentRecord:
    """Shipment number ``index`` of ``sender``. Raises ``NotFound``."""
    return ShipmentRecord.from_shipment(_repo().at(sender, index))


def get_by_global_index(index: int) -> ShipmentRecord:
    """Shipment at position ``index`` of the global record. Raises ``NotFound``."""
    return ShipmentRecord.from_shipment(_repo().at_global(index))


def count_for(sender: str) -> int:
    """Number of shipments ever created by ``sender``."""
    return _repo().count_for(sender)


def get_all() -> tuple[ShipmentRecord, ...]:
    """Every shipment in creation order."""
    return tuple(ShipmentRecord.from_shipment(s) for s in _repo().in_creation_order())
