"""Application tests for putting shipments in transit via domain.process()."""

import pytest
from ledger.shipment.creation import CreateShipment
from ledger.shipment.dispatch import StartShipment, configured_start_policy
from ledger.shipment.errors import InvalidReceiver, InvalidStateTransition, NotFound, Unauthorized
from ledger.shipment.queries import get_shipment
from ledger.shipment.shipment import ShipmentStatus, StartPolicy
from protean import current_domain


def _create(caller="alice", receiver="bob"):
    return current_domain.process(
        CreateShipment(
            caller=caller,
            receiver=receiver,
            pickup_time=1_700_000_000,
            distance=2.0,
            price=60,
            attached_value=60,
        ),
        asynchronous=False,
    )


def _start(caller="alice", sender="alice", receiver="bob", index=0):
    current_domain.process(
        StartShipment(caller=caller, sender=sender, receiver=receiver, index=index),
        asynchronous=False,
    )


class TestStartShipment:
    def test_moves_to_in_transit(self):
        _create()
        _start()
        assert get_shipment("alice", 0).status == ShipmentStatus.IN_TRANSIT.value

    def test_moves_no_funds(self, transfer):
        _create()
        _start()
        assert [c["method"] for c in transfer.calls] == ["lock"]
        assert transfer.escrow_balance == 60

    def test_addresses_shipment_by_sender_index(self):
        _create()
        _create()
        _start(index=1)
        assert get_shipment("alice", 0).status == ShipmentStatus.PENDING.value
        assert get_shipment("alice", 1).status == ShipmentStatus.IN_TRANSIT.value

    def test_unknown_index(self):
        _create()
        with pytest.raises(NotFound):
            _start(index=1)

    def test_unknown_sender(self):
        with pytest.raises(NotFound):
            _start(sender="nobody")

    def test_mismatched_receiver_leaves_status(self):
        _create()
        with pytest.raises(InvalidReceiver):
            _start(receiver="carol")
        assert get_shipment("alice", 0).status == ShipmentStatus.PENDING.value

    def test_cannot_start_twice(self):
        _create()
        _start()
        with pytest.raises(InvalidStateTransition):
            _start()


class TestStartPolicy:
    def test_default_policy_is_participants(self):
        assert configured_start_policy() is StartPolicy.PARTICIPANTS

    def test_receiver_may_start(self):
        _create()
        _start(caller="bob")
        assert get_shipment("alice", 0).status == ShipmentStatus.IN_TRANSIT.value

    def test_third_party_rejected_by_default(self):
        _create()
        with pytest.raises(Unauthorized):
            _start(caller="mallory")
        assert get_shipment("alice", 0).status == ShipmentStatus.PENDING.value

    def test_open_policy(self, monkeypatch):
        monkeypatch.setitem(current_domain.config["custom"], "start_policy", "open")
        _create()
        _start(caller="mallory")
        assert get_shipment("alice", 0).status == ShipmentStatus.IN_TRANSIT.value

    def test_sender_policy(self, monkeypatch):
        monkeypatch.setitem(current_domain.config["custom"], "start_policy", "sender")
        _create()
        with pytest.raises(Unauthorized):
            _start(caller="bob")
        _start(caller="alice")
        assert get_shipment("alice", 0).status == ShipmentStatus.IN_TRANSIT.value

    def test_unknown_policy_is_rejected(self, monkeypatch):
        monkeypatch.setitem(current_domain.config["custom"], "start_policy", "anyone")
        with pytest.raises(ValueError):
            configured_start_policy()
