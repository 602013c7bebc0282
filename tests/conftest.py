import datetime as dt

import pytest

from carebook.store.adapters.fake import FakeStoreClient
from carebook.store.service import RecordService

TODAY = dt.date(2026, 6, 15)


@pytest.fixture
def fake_client() -> FakeStoreClient:
    return FakeStoreClient()


@pytest.fixture
def service(fake_client: FakeStoreClient) -> RecordService:
    return RecordService(client=fake_client)


@pytest.fixture
def today() -> dt.date:
    return TODAY
