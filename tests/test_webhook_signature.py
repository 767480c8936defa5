"""Tests for Telnyx Ed25519 webhook signature verification."""

import base64
import time

import pytest
from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PrivateKey
from cryptography.hazmat.primitives.serialization import Encoding, PublicFormat
from fastapi.testclient import TestClient

from cloudgreet.api import deps
from cloudgreet.core.webhook_signature import SIGNATURE_HEADER, TIMESTAMP_HEADER, TelnyxSignatureVerifier

BODY = b'{"data":{"event_type":"call.speak.ended","payload":{"call_control_id":"v3:sig"}}}'


@pytest.fixture
def private_key():
    return Ed25519PrivateKey.generate()


@pytest.fixture
def verifier(private_key):
    public_bytes = private_key.public_key().public_bytes(Encoding.Raw, PublicFormat.Raw)
    return TelnyxSignatureVerifier(base64.b64encode(public_bytes).decode(), tolerance_seconds=300)


def sign(private_key, body: bytes, timestamp: str) -> str:
    return base64.b64encode(private_key.sign(f"{timestamp}|".encode() + body)).decode()


class TestTelnyxSignatureVerifier:
    """Tests for TelnyxSignatureVerifier."""

    def test_valid_signature(self, private_key, verifier):
        timestamp = str(int(time.time()))
        assert verifier.verify(BODY, sign(private_key, BODY, timestamp), timestamp) is True

    def test_tampered_body_rejected(self, private_key, verifier):
        timestamp = str(int(time.time()))
        signature = sign(private_key, BODY, timestamp)
        assert verifier.verify(BODY.replace(b"sig", b"bad"), signature, timestamp) is False

    def test_stale_timestamp_rejected(self, private_key, verifier):
        timestamp = str(int(time.time()) - 301)
        assert verifier.verify(BODY, sign(private_key, BODY, timestamp), timestamp) is False

    def test_timestamp_inside_tolerance_accepted(self, private_key, verifier):
        timestamp = "1700000000"
        signature = sign(private_key, BODY, timestamp)
        assert verifier.verify(BODY, signature, timestamp, now=1700000000 + 299) is True

    def test_missing_headers_rejected(self, verifier):
        assert verifier.verify(BODY, None, "1700000000") is False
        assert verifier.verify(BODY, "c2ln", None) is False

    def test_garbage_signature_rejected(self, verifier):
        timestamp = str(int(time.time()))
        assert verifier.verify(BODY, "not base64!!", timestamp) is False
        assert verifier.verify(BODY, "abc", "yesterday") is False

    def test_other_key_rejected(self, verifier):
        timestamp = str(int(time.time()))
        other = Ed25519PrivateKey.generate()
        assert verifier.verify(BODY, sign(other, BODY, timestamp), timestamp) is False


class TestSignatureOnWebhookRoute:
    """The voice webhook rejects unsigned deliveries when verification is on."""

    async def test_invalid_signature_returns_401(self, client: TestClient, verifier):
        client.app.dependency_overrides[deps.get_signature_verifier] = lambda: verifier

        response = client.post(
            "/api/v1/telnyx/voice-webhook",
            content=BODY,
            headers={SIGNATURE_HEADER: "c2ln", TIMESTAMP_HEADER: str(int(time.time()))},
        )

        assert response.status_code == 401
        assert response.json() == {"error": "Invalid webhook signature"}

    async def test_valid_signature_is_dispatched(self, client: TestClient, private_key, verifier):
        client.app.dependency_overrides[deps.get_signature_verifier] = lambda: verifier
        timestamp = str(int(time.time()))

        response = client.post(
            "/api/v1/telnyx/voice-webhook",
            content=BODY,
            headers={SIGNATURE_HEADER: sign(private_key, BODY, timestamp), TIMESTAMP_HEADER: timestamp},
        )

        assert response.status_code == 200
        assert response.json()["actions"][0]["action"] == "gather_using_speak"
