"""Sender escrow view — per-sender totals of escrowed, refunded and paid value.

Keyed by sender. ``held_in_escrow`` is the value of the sender's shipments
that are neither cancelled nor delivered.
"""

from datetime import UTC, datetime

from protean.core.projector import on
from protean.exceptions import ObjectNotFoundError
from protean.fields import DateTime, Identifier, Integer
from protean.utils.globals import current_domain

from ledger.domain import ledger
from ledger.shipment.events import ShipmentCancelled, ShipmentCreated, ShipmentPaid
from ledger.shipment.shipment import Shipment


@ledger.projection
class SenderEscrowView:
    sender = Identifier(identifier=True, required=True)
    shipments_created = Integer(default=0)
    held_in_escrow = Integer(default=0)
    refunded = Integer(default=0)
    paid_out = Integer(default=0)
    updated_at = DateTime()


def _get_or_create(sender):
    repo = current_domain.repository_for(SenderEscrowView)
    try:
        return repo.get(sender)
    except ObjectNotFoundError:
        return SenderEscrowView(
            sender=sender,
            shipments_created=0,
            held_in_escrow=0,
            refunded=0,
            paid_out=0,
        )


@ledger.projector(projector_for=SenderEscrowView, aggregates=[Shipment])
class SenderEscrowProjector:
    @on(ShipmentCreated)
    def on_shipment_created(self, event):
        view = _get_or_create(event.sender)
        view.shipments_created = (view.shipments_created or 0) + 1
        view.held_in_escrow = (view.held_in_escrow or 0) + event.price
        view.updated_at = datetime.now(UTC)
        current_domain.repository_for(SenderEscrowView).add(view)

    @on(ShipmentCancelled)
    def on_shipment_cancelled(self, event):
        view = _get_or_create(event.sender)
        view.held_in_escrow = (view.held_in_escrow or 0) - event.amount
        view.refunded = (view.refunded or 0) + event.amount
        view.updated_at = datetime.now(UTC)
        current_domain.repository_for(SenderEscrowView).add(view)

    @on(ShipmentPaid)
    def on_shipment_paid(self, event):
        view = _get_or_create(event.sender)
        view.held_in_escrow = (view.held_in_escrow or 0) - event.amount
        view.paid_out = (view.paid_out or 0) + event.amount
        view.updated_at = datetime.now(UTC)
        current_domain.repository_for(SenderEscrowView).add(view)
