"""Audit trail projection — an append-only, gap-free log of ledger events.

Each ledger event becomes one entry with a monotonically increasing
``sequence``. Entries are keyed by the event's message id, so a redelivered
event is recorded only once.
"""

import json
from datetime import UTC, datetime

from protean.core.projector import on
from protean.exceptions import ObjectNotFoundError
from protean.fields import DateTime, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from ledger.domain import ledger
from ledger.shipment.events import (
    ShipmentCancelled,
    ShipmentCreated,
    ShipmentDelivered,
    ShipmentInTransit,
    ShipmentPaid,
)
from ledger.shipment.shipment import Shipment


@ledger.projection
class AuditTrailEntry:
    entry_id = Identifier(identifier=True, required=True)
    sequence = Integer(required=True, min_value=0)
    shipment_id = Identifier(required=True)
    event_type = String(required=True, max_length=50)
    payload = Text(required=True)  # JSON
    recorded_at = DateTime(required=True)


def _append(event) -> None:
    repo = current_domain.repository_for(AuditTrailEntry)
    entry_id = str(event._metadata.headers.id)
    try:
        repo.get(entry_id)
        return
    except ObjectNotFoundError:
        pass

    repo.add(
        AuditTrailEntry(
            entry_id=entry_id,
            sequence=repo._dao.query.count(),
            shipment_id=event.shipment_id,
            event_type=event.__class__.__name__,
            payload=json.dumps(event.payload, sort_keys=True),
            recorded_at=datetime.now(UTC),
        )
    )


@ledger.projector(projector_for=AuditTrailEntry, aggregates=[Shipment])
class AuditTrailProjector:
    @on(ShipmentCreated)
    def on_shipment_created(self, event):
        _append(event)

    @on(ShipmentInTransit)
    def on_shipment_in_transit(self, event):
        _append(event)

    @on(ShipmentCancelled)
    def on_shipment_cancelled(self, event):
        _append(event)

    @on(ShipmentDelivered)
    def on_shipment_delivered(self, event):
        _append(event)

    @on(ShipmentPaid)
    def on_shipment_paid(self, event):
        _append(event)


def entries_in_order() -> list[AuditTrailEntry]:
    """All audit entries, oldest first."""
    repo = current_domain.repository_for(AuditTrailEntry)
    return repo._dao.query.order_by("sequence").limit(None).all().items
