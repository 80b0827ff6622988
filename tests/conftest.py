import pytest

from eczemahub.catalog import Catalog, FixedClock, Identity
from eczemahub.config.settings import Settings


@pytest.fixture(autouse=True)
def fresh_settings():
    Settings.reset()
    yield
    Settings.reset()


@pytest.fixture
def clock():
    return FixedClock(1_700_000_000)


@pytest.fixture
def catalog(clock):
    return Catalog.setup(Identity("admin"), clock=clock)
