"""Tests for webhook delivery de-duplication."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from cloudgreet.core.idempotency import generate_webhook_delivery_key
from cloudgreet.infrastructure.redis import RedisClient


def test_delivery_key_is_stable():
    key1 = generate_webhook_delivery_key("call.hangup", "v3:abc", "evt-1")
    key2 = generate_webhook_delivery_key("call.hangup", "v3:abc", "evt-1")
    assert key1 == key2
    assert key1.startswith("telnyx:voice:")


def test_delivery_key_differs_per_event_and_call():
    base = generate_webhook_delivery_key("call.hangup", "v3:abc", "evt-1")
    assert generate_webhook_delivery_key("call.hangup", "v3:abc", "evt-2") != base
    assert generate_webhook_delivery_key("call.hangup", "v3:xyz", "evt-1") != base
    assert generate_webhook_delivery_key("call.answered", "v3:abc", "evt-1") != base


def test_delivery_key_without_event_id():
    key = generate_webhook_delivery_key("call.initiated", "v3:abc")
    assert key == generate_webhook_delivery_key("call.initiated", "v3:abc", None)


@pytest.mark.asyncio
async def test_disabled_redis_admits_every_delivery():
    redis = RedisClient("redis://localhost:6379/0", enabled=False)
    await redis.connect()

    assert redis.enabled is False
    assert await redis.claim("telnyx:voice:k", 60) is True
    assert await redis.claim("telnyx:voice:k", 60) is True


@pytest.mark.asyncio
async def test_claim_uses_set_nx_with_ttl():
    redis = RedisClient("redis://localhost:6379/0", enabled=True)
    redis._client = MagicMock()
    redis._client.set = AsyncMock(side_effect=[True, None])

    assert await redis.claim("telnyx:voice:k", 300) is True
    assert await redis.claim("telnyx:voice:k", 300) is False
    redis._client.set.assert_awaited_with("telnyx:voice:k", "processing", nx=True, ex=300)


@pytest.mark.asyncio
async def test_claim_admits_delivery_when_redis_fails():
    redis = RedisClient("redis://localhost:6379/0", enabled=True)
    redis._client = MagicMock()
    redis._client.set = AsyncMock(side_effect=RedisConnectionError("down"))

    assert await redis.claim("telnyx:voice:k", 300) is True
