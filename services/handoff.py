"""Handoff channels: how a composed order leaves the engine.

Every channel implements the same deliver() interface so the ordering
session does not care whether the order ends up as a messaging deep link,
a POST to the order endpoint or a local order record.
"""

import asyncio
import logging
import re
from abc import ABC, abstractmethod
from urllib.parse import quote

import aiohttp
from sqlalchemy.ext.asyncio import async_sessionmaker

import config
from db import get_db_session
from enums.handoff_channel import HandoffChannelType
from exceptions.handoff import MissingDestinationException, OrderSubmissionException
from models.order import BusinessProfile, ComposedOrder, HandoffResult
from repositories.order import OrderRepository

logger = logging.getLogger(__name__)

_DESTINATION_NOISE = re.compile(r"[\s\-()]")


def normalize_destination(destination: str | None) -> str:
    """Strip whitespace, hyphens and parentheses: "+90 (532) 123-45-67" -> "+905321234567"."""
    return _DESTINATION_NOISE.sub("", destination or "")


class HandoffChannel(ABC):
    """Delivers a composed order to an external system."""

    channel_type: HandoffChannelType

    @abstractmethod
    async def deliver(self, order: ComposedOrder, profile: BusinessProfile, message: str) -> HandoffResult:
        """Hand the order over.

        Args:
            order: The immutable composed order
            profile: Business the order belongs to
            message: Rendered order message

        Returns:
            HandoffResult with a channel specific reference
        """
        pass


class MessagingHandoffChannel(HandoffChannel):
    """Builds a messaging deep link carrying the rendered message.

    Opening the link is left to the caller (browser, webview, bot reply).
    """

    channel_type = HandoffChannelType.MESSAGING

    def __init__(self, provider_host: str | None = None):
        self.provider_host = provider_host or config.MESSAGING_PROVIDER_HOST

    def build_deep_link(self, business_id: str, destination: str | None, message: str) -> str:
        clean_destination = normalize_destination(destination)
        if not clean_destination:
            raise MissingDestinationException(business_id)
        # Same escaping as JavaScript's encodeURIComponent
        text = quote(message, safe="!*'()")
        return f"https://{self.provider_host}/{clean_destination}?text={text}"

    async def deliver(self, order: ComposedOrder, profile: BusinessProfile, message: str) -> HandoffResult:
        link = self.build_deep_link(profile.id, profile.messaging_address, message)
        logger.info(f"Messaging handoff prepared for business {profile.id} ({order.item_count} items)")
        return HandoffResult(channel=self.channel_type, reference=link)


class OrderEndpointHandoffChannel(HandoffChannel):
    """POSTs the structured order to the order-persistence endpoint.

    Expected response: {"success": true, "orderNumber": "FF-1042"}
    """

    channel_type = HandoffChannelType.ORDER_ENDPOINT

    def __init__(self, url: str | None = None, *, timeout: float | None = None):
        self.url = url or config.ORDER_API_URL
        self._timeout = aiohttp.ClientTimeout(total=timeout or config.HTTP_TIMEOUT_SECONDS)

    async def deliver(self, order: ComposedOrder, profile: BusinessProfile, message: str) -> HandoffResult:
        payload = order.to_payload()
        try:
            async with aiohttp.ClientSession(timeout=self._timeout) as session:
                async with session.post(self.url, json=payload) as response:
                    try:
                        body = await response.json(content_type=None)
                    except ValueError:
                        body = None
                    status = response.status
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise OrderSubmissionException(order.business_id, str(e) or e.__class__.__name__) from e

        if status >= 400:
            error = body.get("error") if isinstance(body, dict) else None
            raise OrderSubmissionException(order.business_id, error or f"HTTP {status}", status_code=status)
        if not isinstance(body, dict) or not body.get("success"):
            raise OrderSubmissionException(order.business_id, "endpoint did not confirm the order", status_code=status)

        order_number = body.get("orderNumber") or body.get("orderId")
        if not order_number:
            raise OrderSubmissionException(order.business_id, "response has no order number", status_code=status)

        logger.info(f"Order {order_number} submitted for business {order.business_id}")
        return HandoffResult(channel=self.channel_type, reference=str(order_number))


class OrderRecordHandoffChannel(HandoffChannel):
    """Stores the order as a local order record (SQLAlchemy)."""

    channel_type = HandoffChannelType.ORDER_RECORD

    def __init__(self, maker: async_sessionmaker | None = None):
        self._maker = maker

    async def deliver(self, order: ComposedOrder, profile: BusinessProfile, message: str) -> HandoffResult:
        async with get_db_session(self._maker) as session:
            record_id = await OrderRepository.create(order, session)
        return HandoffResult(channel=self.channel_type, reference=str(record_id))
