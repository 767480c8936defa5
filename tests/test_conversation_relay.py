"""Tests for relaying caller turns to the conversation endpoint."""

import pytest

from cloudgreet.core.errors import ConversationRelayError, PersistenceError
from cloudgreet.domain.services.call_lifecycle_service import CallLifecycleService
from cloudgreet.domain.services.conversation_relay import (
    CALL_NOT_FOUND_MESSAGE,
    RELAY_ERROR_MESSAGE,
    RELAY_UNSUCCESSFUL_MESSAGE,
    REPROMPT_MESSAGE,
    ConversationRelayService,
    RelayOutcome,
    extract_user_input,
)
from cloudgreet.infrastructure.conversation_client import ConversationReply
from cloudgreet.persistence.models.conversation_turn import ConversationTurn

CALL_ID = "v3:relay-call"


@pytest.fixture
async def active_call(db_session, business, agent, call_control, notifier):
    lifecycle = CallLifecycleService(db_session, call_control, notifier)
    await lifecycle.on_initiated(CALL_ID, business.id, "+15125550199", "+18005550100", "incoming")
    await lifecycle.on_answered(CALL_ID, agent.id)
    return await lifecycle.get_call(CALL_ID)


@pytest.fixture
def relay(db_session, conversation_client):
    return ConversationRelayService(db_session, conversation_client)


def spoken(actions):
    return actions[0]["payload"]["text"]


class TestExtractUserInput:
    """Tests for picking the caller's words out of a gather result."""

    def test_prefers_speech(self):
        assert extract_user_input({"speech": " I need a repair ", "digits": "1"}) == "I need a repair"

    def test_falls_back_to_digits(self):
        assert extract_user_input({"speech": "   ", "digits": "2"}) == "2"

    def test_empty(self):
        assert extract_user_input(None) == ""
        assert extract_user_input({}) == ""


@pytest.mark.asyncio
async def test_empty_input_reprompts_without_calling_endpoint(relay, conversation_client):
    result = await relay.relay(CALL_ID, {"speech": "  "})

    assert result.outcome == RelayOutcome.REPROMPT
    assert spoken(result.actions) == REPROMPT_MESSAGE
    assert [a["action"] for a in result.actions] == ["speak", "gather_using_speak"]
    conversation_client.generate_reply.assert_not_awaited()


@pytest.mark.asyncio
async def test_reply_is_spoken_in_agent_voice(relay, active_call, conversation_client):
    result = await relay.relay(CALL_ID, {"speech": "My furnace is broken"})

    assert result.outcome == RelayOutcome.REPLY
    assert spoken(result.actions) == "Sure, what day works for you?"
    assert result.actions[0]["payload"]["voice"] == "male"
    assert [a["action"] for a in result.actions] == ["speak", "gather_using_speak"]

    kwargs = conversation_client.generate_reply.await_args.kwargs
    assert kwargs["business_id"] == active_call.business_id
    assert kwargs["message"] == "My furnace is broken"
    assert kwargs["call_id"] == CALL_ID
    assert kwargs["caller_phone"] == "+15125550199"
    assert kwargs["conversation_history"] == []


@pytest.mark.asyncio
async def test_history_is_sent_oldest_first(db_session, relay, active_call, conversation_client):
    for user_message, ai_response in [("Hi", "Hello!"), ("Need AC", "Sure thing.")]:
        db_session.add(
            ConversationTurn(
                business_id=active_call.business_id,
                call_id=CALL_ID,
                user_message=user_message,
                ai_response=ai_response,
            )
        )
        await db_session.commit()

    await relay.relay(CALL_ID, {"speech": "Tomorrow works"})

    history = conversation_client.generate_reply.await_args.kwargs["conversation_history"]
    assert history == [
        {"user_message": "Hi", "ai_response": "Hello!"},
        {"user_message": "Need AC", "ai_response": "Sure thing."},
    ]


@pytest.mark.asyncio
async def test_transfer_speaks_then_hangs_up(relay, active_call, conversation_client):
    conversation_client.generate_reply.return_value = ConversationReply(
        success=True, response="Let me transfer you.", should_transfer=True
    )

    result = await relay.relay(CALL_ID, {"speech": "I want a human"})

    assert result.outcome == RelayOutcome.TRANSFER
    assert spoken(result.actions) == "Let me transfer you."
    assert [a["action"] for a in result.actions] == ["speak", "hangup"]


@pytest.mark.asyncio
async def test_unsuccessful_reply_apologizes_and_hangs_up(relay, active_call, conversation_client):
    conversation_client.generate_reply.return_value = ConversationReply(
        success=False, response="", message="AI agent not configured"
    )

    result = await relay.relay(CALL_ID, {"speech": "Hello?"})

    assert result.outcome == RelayOutcome.UNSUCCESSFUL
    assert spoken(result.actions) == RELAY_UNSUCCESSFUL_MESSAGE
    assert result.actions[0]["payload"]["voice"] == "female"
    assert [a["action"] for a in result.actions] == ["speak", "hangup"]


@pytest.mark.asyncio
async def test_unknown_call(relay, business, conversation_client):
    result = await relay.relay("v3:no-such-call", {"speech": "Hello?"})

    assert result.outcome == RelayOutcome.CALL_NOT_FOUND
    assert spoken(result.actions) == CALL_NOT_FOUND_MESSAGE
    assert [a["action"] for a in result.actions] == ["speak", "hangup"]
    conversation_client.generate_reply.assert_not_awaited()


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error",
    [
        ConversationRelayError("unreachable"),
        PersistenceError("db down", call_control_id=CALL_ID),
        RuntimeError("boom"),
    ],
)
async def test_failures_never_raise(relay, active_call, conversation_client, error):
    conversation_client.generate_reply.side_effect = error

    result = await relay.relay(CALL_ID, {"speech": "Hello?"})

    assert result.outcome == RelayOutcome.ERROR
    assert spoken(result.actions) == RELAY_ERROR_MESSAGE
    assert [a["action"] for a in result.actions] == ["speak", "hangup"]


@pytest.mark.asyncio
async def test_history_load_failure_apologizes_and_hangs_up(relay, active_call, conversation_client, monkeypatch):
    async def broken_history(call_id):
        raise RuntimeError("history unavailable")

    monkeypatch.setattr(relay.turn_repo, "list_for_call", broken_history)

    result = await relay.relay(CALL_ID, {"speech": "Hello?"})

    assert result.outcome == RelayOutcome.ERROR
    assert [a["action"] for a in result.actions] == ["speak", "hangup"]
    conversation_client.generate_reply.assert_not_awaited()
