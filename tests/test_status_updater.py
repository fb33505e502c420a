"""
Tests for bulk "paid" status updates by reference number.
"""

from unittest.mock import Mock
from conftest import make_invoice
from src.models.invoice import InvoiceStatus, VerificationRecord
from src.services.results import Outcome
from src.services.status_updater import StatusUpdater


def verified(remark="BCA VA9988") -> VerificationRecord:
    return VerificationRecord(
        remark=remark, amount=500, file_name="advice.png", bank="BCA ",
        invoice_number="REF-001", file_url="https://blobs.example.com/x", invoice_id="inv-1",
    )


def seed_group(invoice_store):
    invoice_store.add(make_invoice(id="a", invoice_number="INV-A", amount=500))
    invoice_store.add(make_invoice(id="b", invoice_number="INV-B", amount=250, remark="BCA VA9988 B"))
    invoice_store.add(make_invoice(id="c", invoice_number="INV-C", reference_number="REF-OTHER"))


def test_mark_paid_updates_whole_reference_group(invoice_store, record_store):
    seed_group(invoice_store)
    record_store.insert(verified())

    result = StatusUpdater(invoice_store, record_store).mark_paid("INV-A")

    assert result.outcome == Outcome.SUCCESS
    assert result.message == "2 invoice(s) updated to paid successfully."
    assert result.data["total_matched_invoices"] == 2
    assert result.data["total_updated_invoices"] == 2
    updated = result.data["updated_invoices"]
    assert sorted(inv["invoice_number"] for inv in updated) == ["INV-A", "INV-B"]
    assert all(inv["status"] == "paid" for inv in updated)
    assert set(updated[0]) == {"reference_number", "invoice_number", "invoice_date", "amount", "status"}

    statuses = {inv.id: inv.status for inv in invoice_store.list_all()}
    assert statuses == {"a": InvoiceStatus.PAID, "b": InvoiceStatus.PAID, "c": InvoiceStatus.UNPAID}


def test_mark_paid_reports_previously_paid_siblings(invoice_store, record_store):
    seed_group(invoice_store)
    invoice_store.add(make_invoice(id="d", invoice_number="INV-D", status=InvoiceStatus.PAID))
    record_store.insert(verified())

    result = StatusUpdater(invoice_store, record_store).mark_paid("INV-A")

    assert result.data["total_updated_invoices"] == 2
    assert len(result.data["updated_invoices"]) == 3


def test_unknown_invoice_number_is_not_found(invoice_store, record_store):
    result = StatusUpdater(invoice_store, record_store).mark_paid("INV-404")

    assert result.outcome == Outcome.NOT_FOUND
    assert result.status_code == 404


def test_unverified_remark_is_not_found_and_changes_nothing(invoice_store, record_store):
    seed_group(invoice_store)
    record_store.insert(verified(remark="BNI VA1111"))

    result = StatusUpdater(invoice_store, record_store).mark_paid("INV-A")

    assert result.outcome == Outcome.NOT_FOUND
    assert "cannot update invoice status" in result.message
    assert all(inv.status == InvoiceStatus.UNPAID for inv in invoice_store.list_all())


def test_all_paid_is_not_modified(invoice_store, record_store):
    invoice_store.add(make_invoice(id="a", invoice_number="INV-A", status=InvoiceStatus.PAID))
    invoice_store.add(make_invoice(id="b", invoice_number="INV-B", status=InvoiceStatus.PAID))
    record_store.insert(verified())

    result = StatusUpdater(invoice_store, record_store).mark_paid("INV-A")

    assert result.outcome == Outcome.NO_OP
    assert result.status_code == 304
    assert result.success is False
    assert result.data == {"matched_count": 0, "modified_count": 0}


def test_store_fault_is_reported(record_store):
    broken = Mock()
    broken.find_one.side_effect = ConnectionError("database unreachable")

    result = StatusUpdater(broken, record_store).mark_paid("INV-A")

    assert result.outcome == Outcome.FAULT
    assert result.message == "database unreachable"
