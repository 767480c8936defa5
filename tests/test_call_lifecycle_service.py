"""Tests for the call record lifecycle."""

import pytest

from cloudgreet.domain.services.call_lifecycle_service import CallLifecycleService
from cloudgreet.infrastructure.best_effort import BestEffortResult
from cloudgreet.persistence.models.call import CallStatus

BUSINESS_NUMBER = "+18005550100"
CALLER_NUMBER = "+15125550199"

CALL_ID = "v3:lifecycle-call"


@pytest.fixture
def lifecycle(db_session, call_control, notifier):
    return CallLifecycleService(db_session, call_control, notifier)


async def start_call(lifecycle, business_id):
    return await lifecycle.on_initiated(CALL_ID, business_id, CALLER_NUMBER, BUSINESS_NUMBER, "incoming")


@pytest.mark.asyncio
async def test_initiated_creates_call(lifecycle, business):
    call = await start_call(lifecycle, business.id)

    assert call.call_id == CALL_ID
    assert call.business_id == business.id
    assert call.status == CallStatus.INITIATED
    assert call.from_number == CALLER_NUMBER
    assert call.to_number == BUSINESS_NUMBER


@pytest.mark.asyncio
async def test_initiated_twice_keeps_one_row(lifecycle, business):
    first = await start_call(lifecycle, business.id)
    second = await start_call(lifecycle, business.id)

    assert first.id == second.id


@pytest.mark.asyncio
async def test_answered_sets_agent(lifecycle, business, agent):
    await start_call(lifecycle, business.id)

    assert await lifecycle.on_answered(CALL_ID, agent.id) is True

    call = await lifecycle.get_call(CALL_ID)
    assert call.status == CallStatus.ANSWERED
    assert call.ai_agent_id == agent.id
    assert call.answered_at is not None


@pytest.mark.asyncio
async def test_answered_after_hangup_does_not_reopen(lifecycle, business, agent):
    await start_call(lifecycle, business.id)
    await lifecycle.on_hangup(CALL_ID, "normal_clearing", 12)

    assert await lifecycle.on_answered(CALL_ID, agent.id) is False
    assert (await lifecycle.get_call(CALL_ID)).status == CallStatus.COMPLETED


@pytest.mark.asyncio
async def test_hangup_completes_and_notifies(lifecycle, business, call_control, notifier):
    await start_call(lifecycle, business.id)

    result = await lifecycle.on_hangup(CALL_ID, "normal_clearing", 42.7)

    assert result.updated is True
    call_control.stop_recording.assert_awaited_once_with(CALL_ID)
    call = await lifecycle.get_call(CALL_ID)
    assert call.status == CallStatus.COMPLETED
    assert call.duration == 42
    assert call.outcome == "normal_clearing"
    assert call.ended_at is not None

    notifier.send.assert_awaited_once()
    kwargs = notifier.send.await_args.kwargs
    assert kwargs["business_id"] == business.id
    assert kwargs["message"] == f"Call completed: {CALLER_NUMBER} - Duration: 42s"
    assert kwargs["notification_type"] == "call_completed"


@pytest.mark.asyncio
async def test_hangup_defaults_outcome_and_duration(lifecycle, business):
    await start_call(lifecycle, business.id)

    await lifecycle.on_hangup(CALL_ID, None, None)

    call = await lifecycle.get_call(CALL_ID)
    assert call.outcome == "completed"
    assert call.duration == 0


@pytest.mark.asyncio
async def test_duplicate_hangup_is_a_noop(lifecycle, business, notifier):
    await start_call(lifecycle, business.id)
    await lifecycle.on_hangup(CALL_ID, "normal_clearing", 30)

    result = await lifecycle.on_hangup(CALL_ID, "originator_cancel", 99)

    assert result.updated is False
    assert notifier.send.await_count == 1
    call = await lifecycle.get_call(CALL_ID)
    assert call.duration == 30
    assert call.outcome == "normal_clearing"


@pytest.mark.asyncio
async def test_hangup_survives_recording_stop_failure(lifecycle, business, call_control):
    call_control.stop_recording.return_value = BestEffortResult(operation="record_stop", ok=False, error="timeout")
    await start_call(lifecycle, business.id)

    result = await lifecycle.on_hangup(CALL_ID, "normal_clearing", 5)

    assert result.updated is True
    assert result.recording_stop.ok is False
    assert (await lifecycle.get_call(CALL_ID)).status == CallStatus.COMPLETED


@pytest.mark.asyncio
async def test_recording_after_hangup_keeps_completed(lifecycle, business):
    await start_call(lifecycle, business.id)
    await lifecycle.on_hangup(CALL_ID, "normal_clearing", 20)

    url = await lifecycle.on_recording_saved(CALL_ID, [{"url": "https://recordings.example/r1.mp3"}])

    assert url == "https://recordings.example/r1.mp3"
    call = await lifecycle.get_call(CALL_ID)
    assert call.status == CallStatus.COMPLETED
    assert call.recording_url == "https://recordings.example/r1.mp3"


@pytest.mark.asyncio
async def test_recording_url_forms(lifecycle, business):
    await start_call(lifecycle, business.id)

    assert await lifecycle.on_recording_saved(CALL_ID, {"mp3": "https://r.example/a.mp3", "wav": None}) == (
        "https://r.example/a.mp3"
    )
    assert await lifecycle.on_recording_saved(CALL_ID, ["https://r.example/b.mp3"]) == "https://r.example/b.mp3"
    assert await lifecycle.on_recording_saved(CALL_ID, []) is None
    assert await lifecycle.on_recording_saved(CALL_ID, None) is None
    assert (await lifecycle.get_call(CALL_ID)).recording_url == "https://r.example/b.mp3"


@pytest.mark.asyncio
async def test_recording_for_unknown_call_is_not_stored(lifecycle, business):
    url = await lifecycle.on_recording_saved("v3:no-such-call", [{"url": "https://r.example/c.mp3"}])

    assert url is None
    assert await lifecycle.get_call("v3:no-such-call") is None
