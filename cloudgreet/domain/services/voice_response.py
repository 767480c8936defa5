"""Telnyx voice mapping and call-control action assembly.

Everything here is pure: no I/O, no state. The action dictionaries match the
shape Telnyx expects in a webhook response body (``{"actions": [...]}``).
"""

from typing import Any

DEFAULT_LANGUAGE = "en-US"
DEFAULT_TELNYX_VOICE = "female"
GATHER_TIMEOUT_MILLIS = 10000
DTMF_FINISH_ON_KEY = "#"
DTMF_VALID_DIGITS = "0123456789*#"
DTMF_INTER_DIGIT_TIMEOUT_MILLIS = 5000

# Agent voices are configured with OpenAI voice names
OPENAI_TO_TELNYX_VOICE: dict[str, str] = {
    "alloy": "female",
    "echo": "male",
    "fable": "female",
    "onyx": "male",
    "nova": "female",
    "shimmer": "female",
}

Action = dict[str, Any]


def map_voice_to_telnyx(voice: str | None) -> str:
    """Map an agent voice label to a Telnyx voice.

    Unknown or missing labels fall back to the default Telnyx voice.
    """
    if not voice:
        return DEFAULT_TELNYX_VOICE
    return OPENAI_TO_TELNYX_VOICE.get(voice.strip().lower(), DEFAULT_TELNYX_VOICE)


def answer_action() -> Action:
    return {"action": "answer"}


def hangup_action() -> Action:
    return {"action": "hangup"}


def record_start_action(format: str = "mp3", channels: str = "single") -> Action:
    return {
        "action": "record_start",
        "payload": {"format": format, "channels": channels},
    }


def speak_action(text: str, voice: str = DEFAULT_TELNYX_VOICE) -> Action:
    """Build a speak action.

    Args:
        text: Text to speak
        voice: Telnyx voice (already mapped)
    """
    return {
        "action": "speak",
        "payload": {
            "text": text,
            "voice": voice,
            "language": DEFAULT_LANGUAGE,
        },
    }


def gather_action(voice: str = DEFAULT_TELNYX_VOICE, text: str = "", dtmf: bool = False) -> Action:
    """Build a gather_using_speak action that listens for speech or DTMF.

    ``text`` is empty by default because the prompt has normally just been
    spoken by a preceding speak action. With ``dtmf`` the gather also
    collects keypad digits, finishing on ``#``.
    """
    payload: dict[str, Any] = {
        "text": text,
        "voice": voice,
        "language": DEFAULT_LANGUAGE,
        "timeout_millis": GATHER_TIMEOUT_MILLIS,
    }
    if dtmf:
        payload.update(
            finish_on_key=DTMF_FINISH_ON_KEY,
            valid_digits=DTMF_VALID_DIGITS,
            inter_digit_timeout_millis=DTMF_INTER_DIGIT_TIMEOUT_MILLIS,
        )
    payload["speech_recognition"] = {
        "enabled": True,
        "language": DEFAULT_LANGUAGE,
        "timeout_millis": GATHER_TIMEOUT_MILLIS,
    }
    return {"action": "gather_using_speak", "payload": payload}


def build_reply_actions(
    message: str,
    voice: str = DEFAULT_TELNYX_VOICE,
    continue_call: bool = True,
) -> list[Action]:
    """Speak a message, then either listen for the caller or hang up."""
    actions = [speak_action(message, voice)]
    if continue_call:
        actions.append(gather_action(voice))
    else:
        actions.append(hangup_action())
    return actions


def build_greeting_actions(greeting: str, voice: str) -> list[Action]:
    """Start recording, greet the caller and listen."""
    return [
        record_start_action(),
        speak_action(greeting, voice),
        gather_action(voice, dtmf=True),
    ]


def build_goodbye_actions(message: str, voice: str = DEFAULT_TELNYX_VOICE, answer_first: bool = False) -> list[Action]:
    """Speak a message and end the call, answering it first if needed."""
    actions: list[Action] = [answer_action()] if answer_first else []
    actions.extend(build_reply_actions(message, voice, continue_call=False))
    return actions
