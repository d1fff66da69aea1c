"""Shipment aggregate — a physical shipment coupled with its escrowed price.

A shipment is created with its price locked in escrow. The escrow is released
exactly once: back to the sender on cancellation, or to the receiver on
completion. Which of the two happens, if any, is decided by the transition
table below, so the state change and the fund movement can never disagree.

State Machine:
    PENDING → IN_TRANSIT → DELIVERED   (escrow paid to receiver)
    {PENDING, IN_TRANSIT} → CANCELLED  (escrow refunded to sender)

DELIVERED and CANCELLED are terminal.
"""

from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, Identifier, Integer, String

from ledger.domain import ledger
from ledger.shipment.errors import (
    AlreadyDelivered,
    AlreadyPaid,
    InvalidReceiver,
    InvalidStateTransition,
    NotInTransit,
    PaymentMismatch,
    Unauthorized,
)
from ledger.shipment.events import (
    ShipmentCancelled,
    ShipmentCreated,
    ShipmentDelivered,
    ShipmentInTransit,
    ShipmentPaid,
)


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class ShipmentStatus(Enum):
    PENDING = "Pending"
    IN_TRANSIT = "In_Transit"
    CANCELLED = "Cancelled"
    DELIVERED = "Delivered"


class Operation(Enum):
    START = "start"
    CANCEL = "cancel"
    COMPLETE = "complete"


class FundAction(Enum):
    NONE = "None"
    REFUND_SENDER = "Refund_Sender"
    PAY_RECEIVER = "Pay_Receiver"


class StartPolicy(Enum):
    """Who may move a shipment into transit."""

    OPEN = "open"
    PARTICIPANTS = "participants"
    SENDER = "sender"


# ---------------------------------------------------------------------------
# Transition table
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class Transition:
    next_status: ShipmentStatus
    fund_action: FundAction


_TRANSITIONS = {
    (ShipmentStatus.PENDING, Operation.START): Transition(ShipmentStatus.IN_TRANSIT, FundAction.NONE),
    (ShipmentStatus.PENDING, Operation.CANCEL): Transition(ShipmentStatus.CANCELLED, FundAction.REFUND_SENDER),
    (ShipmentStatus.IN_TRANSIT, Operation.CANCEL): Transition(ShipmentStatus.CANCELLED, FundAction.REFUND_SENDER),
    (ShipmentStatus.IN_TRANSIT, Operation.COMPLETE): Transition(ShipmentStatus.DELIVERED, FundAction.PAY_RECEIVER),
}


def _rejection(current: ShipmentStatus, operation: Operation) -> ValidationError:
    if operation is Operation.COMPLETE:
        return NotInTransit(f"Cannot complete a shipment in {current.value} state")
    if operation is Operation.CANCEL and current is ShipmentStatus.DELIVERED:
        return AlreadyDelivered("Cannot cancel a shipment that has been delivered")
    return InvalidStateTransition(f"Cannot {operation.value} a shipment in {current.value} state")


def transition(current: ShipmentStatus, operation: Operation) -> Transition:
    """Return the next status and fund movement for ``operation``.

    Raises the typed rejection for every (status, operation) pair that is not
    in the table.
    """
    allowed = _TRANSITIONS.get((current, operation))
    if allowed is None:
        raise _rejection(current, operation)
    return allowed


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@ledger.aggregate
class Shipment:
    sender = Identifier(required=True)
    receiver = Identifier(required=True)
    pickup_time = Integer(min_value=0, default=0)
    delivery_time = Integer(min_value=0, default=0)
    distance = Float(required=True, min_value=0.0)
    price = Integer(required=True, min_value=0)
    status = String(
        choices=ShipmentStatus,
        default=ShipmentStatus.PENDING.value,
    )
    is_paid = Boolean(default=False)
    sender_index = Integer(required=True, min_value=0)
    global_index = Integer(required=True, min_value=0)
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def paid_exactly_when_delivered(self):
        delivered = self.status == ShipmentStatus.DELIVERED.value
        if bool(self.is_paid) != delivered:
            raise ValidationError({"is_paid": ["A shipment is paid if and only if it has been delivered"]})

    @invariant.post
    def delivery_time_set_exactly_when_delivered(self):
        delivered = self.status == ShipmentStatus.DELIVERED.value
        if bool(self.delivery_time) != delivered:
            raise ValidationError({"delivery_time": ["Delivery time is recorded if and only if delivered"]})

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def create(
        cls,
        sender: str,
        receiver: str,
        pickup_time: int,
        distance: float,
        price: int,
        attached_value: int,
        sender_index: int,
        global_index: int,
    ):
        """Create a pending shipment whose price is covered by ``attached_value``."""
        if attached_value != price:
            raise PaymentMismatch(f"Attached value {attached_value} does not match price {price}")

        now = datetime.now(UTC)
        shipment = cls(
            sender=sender,
            receiver=receiver,
            pickup_time=pickup_time,
            distance=distance,
            price=price,
            status=ShipmentStatus.PENDING.value,
            sender_index=sender_index,
            global_index=global_index,
            created_at=now,
            updated_at=now,
        )
        shipment.raise_(
            ShipmentCreated(
                shipment_id=str(shipment.id),
                index=sender_index,
                global_index=global_index,
                sender=sender,
                receiver=receiver,
                pickup_time=pickup_time,
                distance=distance,
                price=price,
            )
        )
        return shipment

    # -------------------------------------------------------------------
    # Guards
    # -------------------------------------------------------------------
    def _assert_receiver(self, receiver: str) -> None:
        if receiver != self.receiver:
            raise InvalidReceiver("Receiver does not match the shipment's receiver")

    def _assert_can_start(self, caller: str, policy: StartPolicy) -> None:
        if policy is StartPolicy.OPEN:
            return
        allowed = {self.sender} if policy is StartPolicy.SENDER else {self.sender, self.receiver}
        if caller not in allowed:
            raise Unauthorized(f"Caller may not start this shipment under the {policy.value} policy")

    def escrow_reference(self, purpose: str) -> str:
        """Idempotency key for one escrow movement, e.g. ``<id>:lock``."""
        return f"{self.id}:{purpose}"

    # -------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------
    def start(self, caller: str, receiver: str, policy: StartPolicy = StartPolicy.PARTICIPANTS) -> Transition:
        """Hand the shipment over to the carrier."""
        self._assert_can_start(caller, policy)
        self._assert_receiver(receiver)
        step = transition(ShipmentStatus(self.status), Operation.START)

        self.status = step.next_status.value
        self.updated_at = datetime.now(UTC)
        self.raise_(
            ShipmentInTransit(
                shipment_id=str(self.id),
                index=self.sender_index,
                sender=self.sender,
                receiver=self.receiver,
                pickup_time=self.pickup_time,
            )
        )
        return step

    def cancel(self, caller: str, receiver: str) -> Transition:
        """Cancel the shipment. Only the sender may cancel."""
        if caller != self.sender:
            raise Unauthorized("Only the sender may cancel this shipment")
        self._assert_receiver(receiver)
        step = transition(ShipmentStatus(self.status), Operation.CANCEL)

        with atomic_change(self):
            self.pickup_time = 0
            self.status = step.next_status.value
            self.updated_at = datetime.now(UTC)

        self.raise_(
            ShipmentCancelled(
                shipment_id=str(self.id),
                index=self.sender_index,
                sender=self.sender,
                receiver=self.receiver,
                amount=self.price,
            )
        )
        return step

    def complete(self, receiver: str) -> Transition:
        """Confirm delivery and mark the escrowed price as paid out."""
        self._assert_receiver(receiver)
        step = transition(ShipmentStatus(self.status), Operation.COMPLETE)
        if self.is_paid:
            raise AlreadyPaid("Shipment has already been paid")

        now = datetime.now(UTC)
        with atomic_change(self):
            self.status = step.next_status.value
            self.delivery_time = int(now.timestamp())
            self.is_paid = True
            self.updated_at = now

        self.raise_(
            ShipmentDelivered(
                shipment_id=str(self.id),
                index=self.sender_index,
                sender=self.sender,
                receiver=self.receiver,
                delivery_time=self.delivery_time,
            )
        )
        self.raise_(
            ShipmentPaid(
                shipment_id=str(self.id),
                index=self.sender_index,
                sender=self.sender,
                receiver=self.receiver,
                amount=self.price,
            )
        )
        return step
