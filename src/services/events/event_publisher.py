"""
Azure Service Bus event publishing for payment reconciliation events.

Enables downstream systems to react to reconciliation:
- Accounting systems can book verified payments
- Audit systems can track which advice image settled which invoices
"""

import json
from datetime import datetime, UTC
from typing import Optional
from dataclasses import dataclass, asdict, field
from loguru import logger


@dataclass
class PaymentVerifiedEvent:
    """Event published when a payment advice image is matched to an invoice."""

    invoice_id: str
    invoice_number: str
    remark: str
    amount: float
    bank: str
    file_url: str
    event_type: str = "PaymentVerified"
    timestamp: Optional[str] = None

    def __post_init__(self):
        """Set timestamp if not provided"""
        if self.timestamp is None:
            self.timestamp = datetime.now(UTC).isoformat()

    def to_dict(self) -> dict:
        return asdict(self)

    def to_json(self) -> str:
        return json.dumps(self.to_dict())


@dataclass
class InvoicesPaidEvent:
    """Event published when an invoice group is marked paid."""

    reference_number: str
    invoice_numbers: list[str] = field(default_factory=list)
    updated_count: int = 0
    event_type: str = "InvoicesPaid"
    timestamp: Optional[str] = None

    def __post_init__(self):
        if self.timestamp is None:
            self.timestamp = datetime.now(UTC).isoformat()

    def to_dict(self) -> dict:
        return asdict(self)

    def to_json(self) -> str:
        return json.dumps(self.to_dict())


class EventPublisher:
    """
    Publishes events to an Azure Service Bus queue.

    Usage:
        from azure.servicebus import ServiceBusClient
        client = ServiceBusClient.from_connection_string(conn_str)
        sender = client.get_queue_sender(queue_name="payment-events")
        publisher = EventPublisher(service_bus_sender=sender)

        # Disabled mode (no Service Bus configured)
        publisher = EventPublisher(service_bus_sender=None)
    """

    def __init__(
        self,
        service_bus_sender: Optional[object] = None,
        entity_name: str = "payment-events"
    ):
        """
        Initialize event publisher.

        Args:
            service_bus_sender: Azure Service Bus sender (ServiceBusSender) or None to disable
            entity_name: Service Bus queue name (default: payment-events)
        """
        self.service_bus_sender = service_bus_sender
        self.entity_name = entity_name

    @property
    def enabled(self) -> bool:
        return self.service_bus_sender is not None

    def publish(self, event) -> None:
        """
        Publish an event to Service Bus.

        Note:
            When the publisher is not enabled, this is a no-op.
        """
        if not self.enabled:
            return

        from azure.servicebus import ServiceBusMessage

        message = ServiceBusMessage(
            event.to_json(),
            content_type="application/json",
            subject=event.event_type,
        )
        self.service_bus_sender.send_messages(message)
        logger.info(f"Published {event.event_type} event", queue=self.entity_name)


def create_event_publisher(settings) -> EventPublisher:
    """Build a publisher from settings; disabled when Service Bus is not configured."""
    if not settings.service_bus_connection_string:
        return EventPublisher(service_bus_sender=None, entity_name=settings.service_bus_queue)

    from azure.servicebus import ServiceBusClient

    client = ServiceBusClient.from_connection_string(settings.service_bus_connection_string)
    sender = client.get_queue_sender(queue_name=settings.service_bus_queue)
    return EventPublisher(service_bus_sender=sender, entity_name=settings.service_bus_queue)
