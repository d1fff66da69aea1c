"""Shared BDD fixtures and step definitions for the Shipment Ledger."""

import pytest
from ledger.projections.audit_trail import entries_in_order
from ledger.shipment.cancellation import CancelShipment
from ledger.shipment.creation import CreateShipment
from ledger.shipment.delivery import CompleteShipment
from ledger.shipment.dispatch import StartShipment
from ledger.shipment.errors import (
    AlreadyDelivered,
    AlreadyPaid,
    EscrowTransferFailed,
    InvalidReceiver,
    InvalidStateTransition,
    NotFound,
    NotInTransit,
    PaymentMismatch,
    Unauthorized,
)
from ledger.shipment.queries import count_for, get_shipment
from protean import current_domain
from pytest_bdd import given, parsers, then

_LEDGER_ERRORS = {
    cls.__name__: cls
    for cls in (
        AlreadyDelivered,
        AlreadyPaid,
        EscrowTransferFailed,
        InvalidReceiver,
        InvalidStateTransition,
        NotFound,
        NotInTransit,
        PaymentMismatch,
        Unauthorized,
    )
}


@pytest.fixture()
def error():
    """Container for captured ledger rejections."""
    return {"exc": None}


def _process(ref, command_cls, caller):
    record = get_shipment(ref.sender, ref.index)
    current_domain.process(
        command_cls(caller=caller, sender=record.sender, receiver=record.receiver, index=ref.index),
        asynchronous=False,
    )


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(
    parsers.cfparse('a shipment from "{sender}" to "{receiver}" priced at {price:d}'),
    target_fixture="ref",
)
def shipment_created(sender, receiver, price):
    return current_domain.process(
        CreateShipment(
            caller=sender,
            receiver=receiver,
            pickup_time=100,
            distance=5.0,
            price=price,
            attached_value=price,
        ),
        asynchronous=False,
    )


@given("the shipment is in transit")
def shipment_in_transit(ref):
    _process(ref, StartShipment, ref.sender)


@given("the shipment has been delivered")
def shipment_delivered(ref):
    _process(ref, StartShipment, ref.sender)
    _process(ref, CompleteShipment, get_shipment(ref.sender, ref.index).receiver)


@given("the shipment has been cancelled")
def shipment_cancelled(ref):
    _process(ref, CancelShipment, ref.sender)


@given("the value transfer substrate refuses movements")
def transfer_refuses(transfer):
    transfer.configure(should_succeed=False, failure_reason="Substrate unavailable")


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the shipment status is "{status}"'))
def shipment_status_is(ref, status):
    assert get_shipment(ref.sender, ref.index).status == status


@then("the shipment is paid")
def shipment_is_paid(ref):
    assert get_shipment(ref.sender, ref.index).is_paid is True


@then("the shipment is not paid")
def shipment_is_not_paid(ref):
    assert get_shipment(ref.sender, ref.index).is_paid is False


@then(parsers.cfparse("the pickup time is {value:d}"))
def pickup_time_is(ref, value):
    assert get_shipment(ref.sender, ref.index).pickup_time == value


@then(parsers.cfparse('"{identity}" has a balance of {amount:d}'))
def balance_is(transfer, identity, amount):
    assert transfer.balance_of(identity) == amount


@then(parsers.cfparse("the escrow holds {amount:d}"))
def escrow_holds(transfer, amount):
    assert transfer.escrow_balance == amount


@then(parsers.cfparse('"{sender}" has {count:d} shipments'))
def sender_has_n_shipments(sender, count):
    assert count_for(sender) == count


@then(parsers.cfparse("the ledger action fails with {error_name}"))
def ledger_action_fails(error, error_name):
    assert error["exc"] is not None, "Expected a ledger rejection but none was raised"
    assert isinstance(error["exc"], _LEDGER_ERRORS[error_name]), f"Got {type(error['exc']).__name__}"


@then(parsers.cfparse("a {event_type} audit entry is recorded"))
def audit_entry_recorded(event_type):
    recorded = [e.event_type for e in entries_in_order()]
    assert event_type in recorded, f"No {event_type} entry found. Entries: {recorded}"
