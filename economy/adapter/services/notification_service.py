"""Notification Service Implementations

Provides concrete implementations for publishing ledger deltas.
"""

import logging
from typing import Optional
import httpx
from economy.app.services.notification_service import LedgerEvent, NotificationService

logger = logging.getLogger(__name__)


class LoggingNotificationService(NotificationService):
    """
    Notification service that logs ledger events

    Useful for development and testing, or as a fallback.
    """

    async def send_ledger_event(self, event: LedgerEvent) -> bool:
        logger.info(
            f"[LEDGER] User: {event.user_id}, "
            f"Kind: {event.kind.value}, "
            f"Amount: {event.amount:+d}, "
            f"Event: {event.event_type}, "
            f"Related: {event.related_entity_id or '-'}"
        )
        return True


class WebhookNotificationService(NotificationService):
    """
    Notification service that POSTs ledger events to a webhook

    Sends JSON payload to configured webhook URL.
    """

    def __init__(
        self,
        webhook_url: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport = None,
    ):
        """
        Initialize webhook notification service

        Args:
            webhook_url: URL to POST events to
            timeout: Request timeout in seconds
            transport: Optional httpx transport override
        """
        self.webhook_url = webhook_url
        self.timeout = timeout
        self.transport = transport

    async def send_ledger_event(self, event: LedgerEvent) -> bool:
        """
        Send ledger event via webhook

        Args:
            event: LedgerEvent to publish

        Returns:
            True if webhook call succeeded, False otherwise
        """
        payload = {"type": "ledger_entry", **event.model_dump(mode="json")}

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(
                    self.webhook_url,
                    json=payload,
                    headers={"Content-Type": "application/json"},
                )
                response.raise_for_status()
                logger.info(f"Webhook notification sent for ledger entry {event.entry_id}")
                return True
        except httpx.HTTPError as e:
            logger.error(f"Failed to send webhook notification for ledger entry {event.entry_id}: {e}")
            return False


class CompositeNotificationService(NotificationService):
    """
    Notification service that delegates to multiple services

    Useful for sending to multiple channels (e.g., log + webhook).
    """

    def __init__(self, services: list[NotificationService]):
        self.services = services

    async def send_ledger_event(self, event: LedgerEvent) -> bool:
        """
        Returns:
            True if at least one service succeeded, False otherwise
        """
        success = False
        for service in self.services:
            try:
                if await service.send_ledger_event(event):
                    success = True
            except Exception as e:
                logger.error(f"Notification service {type(service).__name__} failed: {e}")
        return success


def create_notification_service(webhook_url: Optional[str] = None) -> NotificationService:
    """
    Factory function to create appropriate notification service

    Args:
        webhook_url: Optional webhook URL. If provided, creates composite
                     service with logging + webhook. Otherwise, just logging.

    Returns:
        Configured NotificationService
    """
    services: list[NotificationService] = [LoggingNotificationService()]

    if webhook_url:
        services.append(WebhookNotificationService(webhook_url))

    if len(services) == 1:
        return services[0]

    return CompositeNotificationService(services)
