"""Domain events for the Shipment aggregate.

Events are immutable facts, one per successful transition (two on
completion). Each carries the fields an audit consumer needs plus the
shipment's identifier and per-sender index, so that replaying the full stream
in commit order reproduces every shipment's current state.
"""

from protean.fields import Float, Identifier, Integer

from ledger.domain import ledger


@ledger.event(part_of="Shipment")
class ShipmentCreated:
    """A shipment was created and its price locked in escrow."""

    __version__ = 1

    shipment_id = Identifier(required=True)
    index = Integer(required=True)
    global_index = Integer(required=True)
    sender = Identifier(required=True)
    receiver = Identifier(required=True)
    pickup_time = Integer(required=True)
    distance = Float(required=True)
    price = Integer(required=True)


@ledger.event(part_of="Shipment")
class ShipmentInTransit:
    """The shipment left the sender and is on its way."""

    __version__ = 1

    shipment_id = Identifier(required=True)
    index = Integer(required=True)
    sender = Identifier(required=True)
    receiver = Identifier(required=True)
    pickup_time = Integer(required=True)


@ledger.event(part_of="Shipment")
class ShipmentCancelled:
    """The shipment was cancelled and its escrow refunded to the sender."""

    __version__ = 1

    shipment_id = Identifier(required=True)
    index = Integer(required=True)
    sender = Identifier(required=True)
    receiver = Identifier(required=True)
    amount = Integer(required=True)


@ledger.event(part_of="Shipment")
class ShipmentDelivered:
    """The receiver took delivery of the shipment."""

    __version__ = 1

    shipment_id = Identifier(required=True)
    index = Integer(required=True)
    sender = Identifier(required=True)
    receiver = Identifier(required=True)
    delivery_time = Integer(required=True)


@ledger.event(part_of="Shipment")
class ShipmentPaid:
    """The escrowed price was disbursed to the receiver."""

    __version__ = 1

    shipment_id = Identifier(required=True)
    index = Integer(required=True)
    sender = Identifier(required=True)
    receiver = Identifier(required=True)
    amount = Integer(required=True)
