"""
Tests for Service Bus event publishing.

Verifies that reconciliation events reach Azure Service Bus for downstream
accounting and audit consumers.
"""

import json
import pytest
from types import SimpleNamespace
from unittest.mock import Mock
from src.services.events.event_publisher import (
    EventPublisher,
    InvoicesPaidEvent,
    PaymentVerifiedEvent,
    create_event_publisher,
)


@pytest.fixture
def mock_service_bus_sender():
    """Create a mock Service Bus sender matching Azure SDK interface"""
    return Mock()


@pytest.fixture
def event_publisher(mock_service_bus_sender):
    return EventPublisher(service_bus_sender=mock_service_bus_sender)


def payment_verified():
    return PaymentVerifiedEvent(
        invoice_id="inv-1",
        invoice_number="REF-001",
        remark="BCA VA9988",
        amount=500.0,
        bank="BCA ",
        file_url="https://blobs.example.com/invoices/inv-1.png",
    )


def test_payment_verified_event_structure():
    event = payment_verified()

    assert event.event_type == "PaymentVerified"
    assert event.timestamp is not None
    assert json.loads(event.to_json())["remark"] == "BCA VA9988"


def test_invoices_paid_event_structure():
    event = InvoicesPaidEvent(reference_number="REF-001", invoice_numbers=["INV-A", "INV-B"], updated_count=2)

    data = event.to_dict()
    assert data["event_type"] == "InvoicesPaid"
    assert data["invoice_numbers"] == ["INV-A", "INV-B"]


def test_publish_sends_message(event_publisher, mock_service_bus_sender):
    event_publisher.publish(payment_verified())

    assert event_publisher.enabled is True
    assert mock_service_bus_sender.send_messages.called
    message = mock_service_bus_sender.send_messages.call_args[0][0]
    assert "PaymentVerified" in str(message)
    assert "BCA VA9988" in str(message)


def test_disabled_publisher_is_noop():
    publisher = EventPublisher(service_bus_sender=None)

    publisher.publish(payment_verified())

    assert publisher.enabled is False


def test_create_event_publisher_disabled_without_connection_string():
    settings = SimpleNamespace(service_bus_connection_string=None, service_bus_queue="payment-events")

    publisher = create_event_publisher(settings)

    assert publisher.enabled is False
    assert publisher.entity_name == "payment-events"
