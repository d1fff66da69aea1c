"""Shipment Ledger bounded context — Shipment Lifecycle and Escrowed Payment.

Owns every shipment record, moves each one through its lifecycle, and couples
each transition to the escrow movement it implies. Uses CQRS: shipments are
persisted as current state, while every transition is published as a domain
event for the audit trail.
"""

from protean.domain import Domain

from ledger.utils.logging import configure_logging, get_logger

# Configure logging for the application
configure_logging()

logger = get_logger(__name__)

# Domain Composition Root
ledger = Domain(name="ledger")
