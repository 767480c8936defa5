"""Telephony provider infrastructure."""

from cloudgreet.infrastructure.telephony.telnyx_call_control import TelnyxCallControlClient

__all__ = ["TelnyxCallControlClient"]
