# tests/test_dispatch_service.py
from datetime import datetime, timedelta, timezone

import pytest

from fakes import FakeResponse, FakeSession, default_call_response
from vapi_dialer.schemas.calls import ImmediateMode, ScheduledMode
from vapi_dialer.services.dispatch_service import DispatchValidationError, dispatch_calls
from vapi_dialer.services.vapi_client import GatewayConfigError, VapiClient


@pytest.mark.parametrize(
    "mode",
    [ImmediateMode(delay_ms=0), ScheduledMode(interval_ms=1000)],
    ids=["immediate", "scheduled"],
)
def test_blank_entries_are_skipped(vapi_client, fake_session, recording_sleep, fixed_clock, mode):
    outcome = dispatch_calls(
        vapi_client,
        assistant_id="asst_1",
        phone_numbers=["+1", "", " ", "+2"],
        mode=mode,
        sleep=recording_sleep,
        clock=fixed_clock,
    )

    assert [r.number for r in outcome.results] == ["+1", "+2"]
    assert outcome.total_calls == 2
    assert len(fake_session.call_bodies) == 2


def test_numbers_are_trimmed_and_called_in_order(vapi_client, fake_session, recording_sleep):
    outcome = dispatch_calls(
        vapi_client,
        assistant_id="asst_1",
        phone_numbers=["  +15551230003 ", "+15551230001", "+15551230002\t"],
        mode=ImmediateMode(delay_ms=0),
        sleep=recording_sleep,
    )

    sent = [body["customer"]["number"] for body in fake_session.call_bodies]
    assert sent == ["+15551230003", "+15551230001", "+15551230002"]
    assert [r.number for r in outcome.results] == sent
    assert [r.call_id for r in outcome.results] == ["call_1", "call_2", "call_3"]


def test_immediate_mode_waits_between_attempts_only(vapi_client, recording_sleep):
    outcome = dispatch_calls(
        vapi_client,
        assistant_id="asst_1",
        phone_numbers=["+1", "+2", "+3"],
        mode=ImmediateMode(delay_ms=1000),
        sleep=recording_sleep,
    )

    assert recording_sleep.calls == [1.0, 1.0]
    assert outcome.scheduled_calls is None
    assert "scheduledCalls" not in outcome.to_wire()


def test_immediate_mode_no_wait_after_trailing_blanks(vapi_client, recording_sleep):
    dispatch_calls(
        vapi_client,
        assistant_id="asst_1",
        phone_numbers=["", "+1", "+2", "  ", ""],
        mode=ImmediateMode(delay_ms=500),
        sleep=recording_sleep,
    )

    assert recording_sleep.calls == [0.5]


def test_scheduled_mode_staggers_start_times(vapi_client, fake_session, recording_sleep):
    base = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)

    outcome = dispatch_calls(
        vapi_client,
        assistant_id="asst_1",
        phone_numbers=["+1", "", "+2", "+3"],
        mode=ScheduledMode(interval_ms=3000, base_time=base),
        sleep=recording_sleep,
    )

    assert recording_sleep.calls == []
    plans = [body["schedulePlan"]["earliestAt"] for body in fake_session.call_bodies]
    assert plans == [
        "2025-03-01T12:00:00.000Z",
        "2025-03-01T12:00:03.000Z",
        "2025-03-01T12:00:06.000Z",
    ]
    assert [r.scheduled_at for r in outcome.results] == [
        base,
        base + timedelta(seconds=3),
        base + timedelta(seconds=6),
    ]
    assert outcome.scheduled_calls == 3
    assert outcome.successful_calls == 3
    assert outcome.failed_calls == 0


def test_scheduled_mode_defaults_base_time_to_now(vapi_client, fake_session, fixed_clock):
    dispatch_calls(
        vapi_client,
        assistant_id="asst_1",
        phone_numbers=["+1", "+2"],
        mode=ScheduledMode(interval_ms=60000),
        clock=fixed_clock,
    )

    plans = [body["schedulePlan"]["earliestAt"] for body in fake_session.call_bodies]
    assert plans == ["2025-01-01T09:00:00.000Z", "2025-01-01T09:01:00.000Z"]


def test_one_failure_does_not_abort_the_run(recording_sleep):
    def handler(method, url, body):
        if body["customer"]["number"] == "+2":
            return FakeResponse(500, text="carrier unavailable")
        return default_call_response(body, 0)

    session = FakeSession(handler=handler)
    client = VapiClient(api_key="k", phone_number_id="pn", session=session)

    outcome = dispatch_calls(
        client,
        assistant_id="asst_1",
        phone_numbers=["+1", "+2", "+3"],
        mode=ImmediateMode(delay_ms=10),
        sleep=recording_sleep,
    )

    assert len(session.call_bodies) == 3
    assert outcome.total_calls == 3
    assert outcome.successful_calls == 2
    assert outcome.failed_calls == 1
    assert outcome.results[1].status == "failed"
    assert outcome.results[1].call_id is None
    assert recording_sleep.calls == [0.01, 0.01]


@pytest.mark.parametrize(
    "assistant_id, numbers",
    [("", ["+1"]), (None, ["+1"]), ("asst_1", []), ("asst_1", None)],
)
def test_invalid_input_places_no_calls(vapi_client, fake_session, assistant_id, numbers):
    with pytest.raises(DispatchValidationError):
        dispatch_calls(
            vapi_client,
            assistant_id=assistant_id,
            phone_numbers=numbers,
            mode=ImmediateMode(delay_ms=0),
        )

    assert fake_session.requests == []


def test_missing_phone_number_id_places_no_calls():
    session = FakeSession()
    client = VapiClient(api_key="k", phone_number_id=None, session=session)

    with pytest.raises(GatewayConfigError) as exc_info:
        dispatch_calls(
            client,
            assistant_id="asst_1",
            phone_numbers=["+1"],
            mode=ImmediateMode(delay_ms=0),
        )

    assert "VAPI_PHONE_NUMBER_ID" in str(exc_info.value)
    assert session.requests == []


def test_validation_is_checked_before_config():
    client = VapiClient(api_key=None, phone_number_id=None, session=FakeSession())

    with pytest.raises(DispatchValidationError):
        dispatch_calls(client, assistant_id="", phone_numbers=["+1"], mode=ImmediateMode(0))


def test_all_blank_list_returns_empty_outcome(vapi_client, fake_session):
    outcome = dispatch_calls(
        vapi_client,
        assistant_id="asst_1",
        phone_numbers=["", "   "],
        mode=ImmediateMode(delay_ms=0),
    )

    assert outcome.total_calls == 0
    assert outcome.results == []
    assert fake_session.requests == []


@pytest.mark.parametrize(
    "mode",
    [ImmediateMode(delay_ms=-5), ScheduledMode(interval_ms=-1000)],
    ids=["immediate", "scheduled"],
)
def test_negative_timing_is_rejected_before_any_call(vapi_client, fake_session, recording_sleep, mode):
    with pytest.raises(DispatchValidationError):
        dispatch_calls(
            vapi_client,
            assistant_id="asst_1",
            phone_numbers=["+1", "+2"],
            mode=mode,
            sleep=recording_sleep,
        )

    assert fake_session.requests == []
    assert recording_sleep.calls == []
