import pytest
from ledger.transfer import reset_transfer, set_transfer
from ledger.transfer.fake_adapter import FakeTransfer
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def ledger_bed():
    from ledger.domain import ledger

    bed = DomainFixture(ledger)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(ledger_bed):
    with ledger_bed.domain_context():
        yield


@pytest.fixture(autouse=True)
def transfer():
    """Fresh in-memory value transfer for every test."""
    fake = FakeTransfer()
    set_transfer(fake)
    yield fake
    reset_transfer()
