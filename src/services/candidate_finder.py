
from datetime import date, datetime, time, UTC
from typing import Optional
from loguru import logger
from ..models.invoice import Invoice, InvoiceStatus
from .storage.base import InvoiceStoreBase
from .storage.filters import Contains, Equals, Filter, Range

END_OF_DAY = time(23, 59, 59, 999000)


def start_of_day(day: date) -> datetime:
    if isinstance(day, datetime):
        day = day.date()
    return datetime.combine(day, time.min, tzinfo=UTC)


def end_of_day(day: date) -> datetime:
    """Last millisecond of the day, in UTC"""
    if isinstance(day, datetime):
        day = day.date()
    return datetime.combine(day, END_OF_DAY, tzinfo=UTC)


class CandidateFinder:
    """Narrows invoices down to those whose remark carries the located fragment."""

    def __init__(self, invoice_store: InvoiceStoreBase):
        self.invoice_store = invoice_store

    def build_filter(
        self,
        remark: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Filter:
        query = Filter(Invoice).where("remark", Contains(remark))
        if start_date is not None or end_date is not None:
            query.where(
                "value_date",
                Range(
                    gte=start_of_day(start_date) if start_date is not None else None,
                    lte=end_of_day(end_date) if end_date is not None else None,
                ),
            )
        return query

    def find_candidates(
        self,
        remark: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[Invoice]:
        """
        Find invoices whose remark contains the fragment (case-insensitive),
        optionally limited to a value-date range.

        An empty list is a normal outcome, not an error. An inverted date
        range matches nothing and is not queried.
        """
        if start_date is not None and end_date is not None and start_of_day(start_date) > end_of_day(end_date):
            logger.info("Empty value-date range", start_date=str(start_date), end_date=str(end_date))
            return []

        candidates = self.invoice_store.find(self.build_filter(remark, start_date, end_date))
        logger.info(
            "Candidate invoices found",
            remark=remark,
            start_date=str(start_date) if start_date else None,
            end_date=str(end_date) if end_date else None,
            count=len(candidates),
        )
        return candidates


def list_unpaid_invoices(invoice_store: InvoiceStoreBase, remark: Optional[str] = None) -> list[Invoice]:
    """List unpaid invoices, optionally those whose remark equals the given value"""
    query = Filter(Invoice)
    if remark:
        query.where("remark", Equals(remark))
    query.where("status", Equals(InvoiceStatus.UNPAID))
    return invoice_store.find(query)
