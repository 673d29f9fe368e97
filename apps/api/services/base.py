"""Base service class with RabbitMQ publishing capability."""

from __future__ import annotations

import typing
import uuid
from logging import getLogger

import aio_pika
import aio_pika.exceptions
import msgspec
import sentry_sdk
from asyncpg import Pool
from litestar.datastructures import Headers, State

log = getLogger(__name__)


class RabbitMessageBody(msgspec.Struct):
    """RabbitMQ message body structure."""

    type: str
    data: typing.Any


class BaseService:
    """Base class for all services.

    Services contain business logic and orchestrate repository calls.
    They own transaction boundaries and publish domain events to RabbitMQ.
    """

    def __init__(self, pool: Pool, state: State) -> None:
        """Initialize service.

        Args:
            pool: AsyncPG connection pool.
            state: Application state (RabbitMQ channel pool, caches).
        """
        self._pool = pool
        self._state = state

    async def publish_message(
        self,
        *,
        routing_key: str,
        data: msgspec.Struct,
        headers: Headers,
        idempotency_key: str | None = None,
    ) -> bool:
        """Publish a domain event to RabbitMQ, best effort.

        The event is skipped when no channel pool is configured or the request is
        part of a test run. Broker failures are logged and reported, never raised.

        Args:
            routing_key: The RabbitMQ message routing key.
            data: The event payload.
            headers: Request headers, forwarded as message headers.
            idempotency_key: Message ID used by consumers for deduplication.

        Returns:
            True if the message was handed to the broker.
        """
        if headers.get("X-PYTEST-ENABLED") == "1":
            log.debug("Pytest in progress, skipping queue.")
            return False

        channel_pool = getattr(self._state, "mq_channel_pool", None)
        if channel_pool is None:
            log.debug("No RabbitMQ channel pool configured, skipping '%s'.", routing_key)
            return False

        message_body = msgspec.json.encode(RabbitMessageBody(type=routing_key, data=data))
        message_id = idempotency_key or str(uuid.uuid4())
        log.info("[→] Publishing '%s' (message_id=%s)", routing_key, message_id)

        try:
            async with channel_pool.acquire() as channel:
                message = aio_pika.Message(
                    message_body,
                    message_id=message_id,
                    content_type="application/json",
                    delivery_mode=aio_pika.DeliveryMode.PERSISTENT,
                    headers={"x-request-id": headers.get("x-request-id", "")},
                )
                await channel.default_exchange.publish(message, routing_key=routing_key)
        except aio_pika.exceptions.AMQPError as e:
            log.exception("[!] Failed to publish message to RabbitMQ queue '%s'", routing_key)
            sentry_sdk.capture_exception(e)
            return False

        log.info("[✓] Published RabbitMQ message to queue '%s'", routing_key)
        return True
