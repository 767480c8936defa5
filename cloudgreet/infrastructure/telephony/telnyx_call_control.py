"""Telnyx Call Control API client."""

import logging
from typing import Any

import httpx

from cloudgreet.infrastructure.best_effort import BestEffortResult, run_best_effort

logger = logging.getLogger(__name__)

TELNYX_API_BASE = "https://api.telnyx.com/v2"


class TelnyxCallControlClient:
    """Client for out-of-band Telnyx call actions."""

    def __init__(
        self,
        api_key: str,
        api_base: str = TELNYX_API_BASE,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize Telnyx call control client.

        Args:
            api_key: Telnyx API v2 key
            api_base: API base URL
            timeout: Request timeout in seconds
            transport: Optional httpx transport (tests)
        """
        self.api_key = api_key
        self.api_base = api_base
        self.timeout = timeout
        self._transport = transport

    def _get_client(self) -> httpx.AsyncClient:
        """Create HTTP client with auth headers."""
        return httpx.AsyncClient(
            base_url=self.api_base,
            headers={
                "Authorization": f"Bearer {self.api_key}",
                "Content-Type": "application/json",
            },
            timeout=self.timeout,
            transport=self._transport,
        )

    async def _call_action(self, call_control_id: str, action: str, payload: dict[str, Any] | None = None) -> dict:
        async with self._get_client() as client:
            response = await client.post(
                f"/calls/{call_control_id}/actions/{action}",
                json=payload or {},
            )
            response.raise_for_status()
            return response.json() if response.content else {}

    async def stop_recording(self, call_control_id: str) -> BestEffortResult:
        """Stop recording a call. Never raises.

        Args:
            call_control_id: Telnyx call control ID
        """
        return await run_best_effort(
            "record_stop",
            lambda: self._call_action(call_control_id, "record_stop"),
            call_control_id=call_control_id,
        )
