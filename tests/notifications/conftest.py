import pytest
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def notifications_bed():
    from notifications.domain import notifications

    bed = DomainFixture(notifications)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(notifications_bed):
    with notifications_bed.domain_context():
        yield


@pytest.fixture(autouse=True)
def _fake_channel(monkeypatch):
    """Every test starts with a fresh in-memory email adapter."""
    from notifications.channel import reset_channels

    monkeypatch.delenv("SMTP_HOST", raising=False)
    reset_channels()
    yield
    reset_channels()


@pytest.fixture()
def outbox():
    from notifications.channel import get_channel

    return get_channel()
