"""Rebuild shipment state from the audit trail.

Folding every recorded event in sequence order must reproduce the ledger's
current records exactly, bookkeeping timestamps aside. A mismatch means an
event was lost or a mutation escaped the event stream.
"""

import json
from dataclasses import replace

from ledger.projections.audit_trail import AuditTrailEntry, entries_in_order
from ledger.shipment.queries import ShipmentRecord
from ledger.shipment.shipment import ShipmentStatus


def _created(records, data):
    records[data["shipment_id"]] = ShipmentRecord(
        shipment_id=data["shipment_id"],
        sender=data["sender"],
        receiver=data["receiver"],
        index=data["index"],
        global_index=data["global_index"],
        pickup_time=data["pickup_time"],
        delivery_time=0,
        distance=data["distance"],
        price=data["price"],
        status=ShipmentStatus.PENDING.value,
        is_paid=False,
    )


def _in_transit(records, data):
    record = records[data["shipment_id"]]
    records[record.shipment_id] = replace(record, status=ShipmentStatus.IN_TRANSIT.value)


def _cancelled(records, data):
    record = records[data["shipment_id"]]
    records[record.shipment_id] = replace(record, pickup_time=0, status=ShipmentStatus.CANCELLED.value)


def _delivered(records, data):
    record = records[data["shipment_id"]]
    records[record.shipment_id] = replace(
        record,
        status=ShipmentStatus.DELIVERED.value,
        delivery_time=data["delivery_time"],
    )


def _paid(records, data):
    record = records[data["shipment_id"]]
    records[record.shipment_id] = replace(record, is_paid=True)


_APPLIERS = {
    "ShipmentCreated": _created,
    "ShipmentInTransit": _in_transit,
    "ShipmentCancelled": _cancelled,
    "ShipmentDelivered": _delivered,
    "ShipmentPaid": _paid,
}


def rebuild(entries: list[AuditTrailEntry] | None = None) -> tuple[ShipmentRecord, ...]:
    """Replay audit entries into shipment records, ordered by global index.

    Defaults to the full audit trail. Rebuilt records carry no timestamps.
    """
    if entries is None:
        entries = entries_in_order()

    records: dict[str, ShipmentRecord] = {}
    for entry in sorted(entries, key=lambda e: e.sequence):
        apply = _APPLIERS.get(entry.event_type)
        if apply is None:
            raise ValueError(f"Unknown ledger event type: {entry.event_type}")
        apply(records, json.loads(entry.payload))

    return tuple(sorted(records.values(), key=lambda r: r.global_index))
