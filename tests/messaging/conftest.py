import pytest
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def messaging_bed():
    from messaging.domain import messaging

    bed = DomainFixture(messaging)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(messaging_bed):
    with messaging_bed.domain_context():
        yield
