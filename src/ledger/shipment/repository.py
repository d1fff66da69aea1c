"""Repository for the Shipment aggregate.

One stored record per shipment carries both addressing keys, so the
per-sender view ``(sender, sender_index)`` and the global view
``global_index`` always resolve to the same shipment.
"""

from ledger.domain import ledger
from ledger.shipment.errors import NotFound
from ledger.shipment.shipment import Shipment


@ledger.repository(part_of=Shipment)
class ShipmentRepository:
    def next_indices(self, sender: str) -> tuple[int, int]:
        """Per-sender and global index the next shipment from ``sender`` receives."""
        return self.count_for(sender), self._dao.query.count()

    def count_for(self, sender: str) -> int:
        return self._dao.query.filter(sender=sender).count()

    def at(self, sender: str, index: int) -> Shipment:
        shipment = self._dao.query.filter(sender=sender, sender_index=index).all().first
        if shipment is None:
            raise NotFound(f"No shipment at index {index} for sender {sender}")
        return shipment

    def at_global(self, index: int) -> Shipment:
        shipment = self._dao.query.filter(global_index=index).all().first
        if shipment is None:
            raise NotFound(f"No shipment at global index {index}")
        return shipment

    def in_creation_order(self) -> list[Shipment]:
        return self._dao.query.order_by("global_index").limit(None).all().items
