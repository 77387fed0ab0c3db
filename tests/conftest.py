# tests/conftest.py
from datetime import datetime, timezone

import pytest

from fakes import FakeClock, FakeSession, RecordingSleep
from vapi_dialer.services.vapi_client import VapiClient


@pytest.fixture
def fake_session():
    return FakeSession()


@pytest.fixture
def vapi_client(fake_session):
    return VapiClient(
        api_key="test-key",
        phone_number_id="pn_test",
        base_url="https://vapi.test",
        session=fake_session,
    )


@pytest.fixture
def recording_sleep():
    return RecordingSleep()


@pytest.fixture
def fixed_clock():
    return FakeClock(datetime(2025, 1, 1, 9, 0, tzinfo=timezone.utc))
