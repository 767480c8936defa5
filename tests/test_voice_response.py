"""Tests for voice mapping and Telnyx action assembly."""

import pytest

from cloudgreet.domain.services.voice_response import (
    build_goodbye_actions,
    build_greeting_actions,
    build_reply_actions,
    gather_action,
    map_voice_to_telnyx,
    speak_action,
)


class TestVoiceMapping:
    """Tests for map_voice_to_telnyx."""

    @pytest.mark.parametrize("voice", ["alloy", "fable", "nova", "shimmer"])
    def test_female_voices(self, voice):
        assert map_voice_to_telnyx(voice) == "female"

    @pytest.mark.parametrize("voice", ["echo", "onyx"])
    def test_male_voices(self, voice):
        assert map_voice_to_telnyx(voice) == "male"

    def test_unknown_and_missing_default_to_female(self):
        assert map_voice_to_telnyx("robot") == "female"
        assert map_voice_to_telnyx("") == "female"
        assert map_voice_to_telnyx(None) == "female"

    def test_mapping_ignores_case(self):
        assert map_voice_to_telnyx("Onyx") == "male"


class TestActionAssembly:
    """Tests for response action builders."""

    def test_speak_action_shape(self):
        assert speak_action("Hello", "male") == {
            "action": "speak",
            "payload": {"text": "Hello", "voice": "male", "language": "en-US"},
        }

    def test_gather_listens_for_speech(self):
        action = gather_action("male")
        assert action["action"] == "gather_using_speak"
        assert action["payload"]["voice"] == "male"
        assert action["payload"]["timeout_millis"] == 10000
        assert action["payload"]["speech_recognition"]["enabled"] is True
        assert action["payload"]["speech_recognition"]["language"] == "en-US"

    def test_greeting_records_then_speaks_then_gathers(self):
        actions = build_greeting_actions("Hi there", "male")
        assert [a["action"] for a in actions] == ["record_start", "speak", "gather_using_speak"]
        assert actions[0]["payload"] == {"format": "mp3", "channels": "single"}
        assert actions[1]["payload"]["text"] == "Hi there"

    def test_greeting_gather_accepts_keypad_input(self):
        gather = build_greeting_actions("Hi there", "male")[2]["payload"]
        assert gather["finish_on_key"] == "#"
        assert gather["valid_digits"] == "0123456789*#"
        assert gather["inter_digit_timeout_millis"] == 5000

    def test_plain_gather_has_no_keypad_settings(self):
        assert "finish_on_key" not in gather_action("male")["payload"]

    def test_reply_continues_with_gather(self):
        actions = build_reply_actions("Sure", "female", continue_call=True)
        assert [a["action"] for a in actions] == ["speak", "gather_using_speak"]

    def test_reply_ends_with_hangup(self):
        actions = build_reply_actions("Goodbye", "female", continue_call=False)
        assert [a["action"] for a in actions] == ["speak", "hangup"]

    def test_goodbye_can_answer_first(self):
        actions = build_goodbye_actions("Not in service", answer_first=True)
        assert [a["action"] for a in actions] == ["answer", "speak", "hangup"]
        assert actions[1]["payload"]["voice"] == "female"
