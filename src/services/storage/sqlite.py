"""
SQLite-backed invoice and verification-record stores.

Provides persistent storage with a UNIQUE(remark, amount) constraint on
verification records, so concurrent verifications of the same payment
cannot create duplicate records.
"""

import sqlite3
from contextlib import closing
from datetime import datetime, UTC
from enum import Enum
from typing import Any, Optional
from ...models.invoice import Invoice, VerificationRecord, as_utc
from .base import (
    DuplicateRecordError,
    InvoiceStoreBase,
    UpdateResult,
    VerificationRecordStoreBase,
    check_invoice_changes,
)
from .filters import Contains, Equals, Filter, NotEqual, Range

# Fixed-width UTC timestamps sort lexicographically in SQL comparisons
TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S.%f"

INVOICE_COLUMNS = (
    "id", "remark", "amount", "value_date", "reference_number",
    "invoice_number", "status", "invoice_date",
)
RECORD_COLUMNS = (
    "remark", "amount", "file_name", "bank", "invoice_number", "file_url", "invoice_id",
)


def to_db_value(value: Any) -> Any:
    """Convert a Python value into its SQLite column representation"""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return as_utc(value).strftime(TIMESTAMP_FORMAT)
    return value


def from_db_timestamp(value: Optional[str]) -> Optional[datetime]:
    if value is None:
        return None
    return datetime.strptime(value, TIMESTAMP_FORMAT).replace(tzinfo=UTC)


def _casefold(value: Optional[str]) -> Optional[str]:
    return value.casefold() if value is not None else None


def connect(db_path: str) -> sqlite3.Connection:
    """
    Open a connection with row factory and a casefold() SQL function.

    SQLite's lower() only folds ASCII; casefold() gives case-insensitive
    matching the same meaning as the in-memory stores.
    """
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    conn.create_function("casefold", 1, _casefold, deterministic=True)
    return conn


def build_where(query: Filter) -> tuple[str, list]:
    """
    Translate a Filter into a SQL WHERE clause with positional parameters.

    Returns:
        (clause, params) where clause is "1=1" for an empty filter
    """
    clauses = []
    params: list = []

    for fc in query.conditions:
        column = fc.field
        condition = fc.condition

        if isinstance(condition, Equals):
            if condition.value is None:
                clauses.append(f"{column} IS NULL")
            else:
                clauses.append(f"{column} = ?")
                params.append(to_db_value(condition.value))
        elif isinstance(condition, NotEqual):
            # Missing values count as "not equal", matching document-store semantics
            clauses.append(f"{column} IS NOT ?")
            params.append(to_db_value(condition.value))
        elif isinstance(condition, Contains):
            if condition.case_sensitive:
                clauses.append(f"instr({column}, ?) > 0")
                params.append(condition.text)
            else:
                clauses.append(f"instr(casefold({column}), ?) > 0")
                params.append(condition.text.casefold())
        elif isinstance(condition, Range):
            if condition.gte is not None:
                clauses.append(f"{column} >= ?")
                params.append(to_db_value(condition.gte))
            if condition.lte is not None:
                clauses.append(f"{column} <= ?")
                params.append(to_db_value(condition.lte))
        else:
            raise TypeError(f"Unsupported filter condition: {condition!r}")

    return (" AND ".join(clauses) or "1=1"), params


class SQLiteInvoiceStore(InvoiceStoreBase):
    """
    SQLite-backed invoice store.

    Features:
    - Persistent storage across application restarts
    - Status restricted to 'unpaid'/'paid' by a CHECK constraint
    - Indexes for remark and reference-number lookups
    """

    def __init__(self, db_path: str = "reconciler.db"):
        """
        Initialize store with database path.

        Args:
            db_path: Path to SQLite database file (default: reconciler.db)
        """
        self.db_path = db_path
        self._init_database()

    def _init_database(self):
        """Create invoices table if it doesn't exist"""
        with closing(sqlite3.connect(self.db_path)) as conn, conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS invoices (
                    id TEXT PRIMARY KEY,
                    remark TEXT NOT NULL,
                    amount REAL NOT NULL CHECK (amount >= 0),
                    value_date TEXT,
                    reference_number TEXT NOT NULL,
                    invoice_number TEXT NOT NULL,
                    status TEXT NOT NULL DEFAULT 'unpaid',
                    invoice_date TEXT,
                    CHECK (status IN ('unpaid', 'paid'))
                )
            """)
            conn.execute("CREATE INDEX IF NOT EXISTS idx_invoices_remark ON invoices(remark)")
            conn.execute("CREATE INDEX IF NOT EXISTS idx_invoices_reference ON invoices(reference_number)")
            conn.execute("CREATE INDEX IF NOT EXISTS idx_invoices_number ON invoices(invoice_number)")

    def _get_connection(self) -> sqlite3.Connection:
        """Get database connection with row factory"""
        return connect(self.db_path)

    @staticmethod
    def _row_to_invoice(row: sqlite3.Row) -> Invoice:
        return Invoice(
            id=row["id"],
            remark=row["remark"],
            amount=row["amount"],
            value_date=from_db_timestamp(row["value_date"]),
            reference_number=row["reference_number"],
            invoice_number=row["invoice_number"],
            status=row["status"],
            invoice_date=from_db_timestamp(row["invoice_date"]),
        )

    def add(self, invoice: Invoice) -> None:
        values = [to_db_value(getattr(invoice, c)) for c in INVOICE_COLUMNS]
        with closing(self._get_connection()) as conn, conn:
            conn.execute(
                f"INSERT OR REPLACE INTO invoices ({', '.join(INVOICE_COLUMNS)}) "
                f"VALUES ({', '.join('?' for _ in INVOICE_COLUMNS)})",
                values,
            )

    def find(self, query: Filter) -> list[Invoice]:
        where, params = build_where(query)
        with closing(self._get_connection()) as conn:
            rows = conn.execute(
                f"SELECT {', '.join(INVOICE_COLUMNS)} FROM invoices WHERE {where} ORDER BY rowid",
                params,
            ).fetchall()
        return [self._row_to_invoice(row) for row in rows]

    def find_one(self, query: Filter) -> Optional[Invoice]:
        where, params = build_where(query)
        with closing(self._get_connection()) as conn:
            row = conn.execute(
                f"SELECT {', '.join(INVOICE_COLUMNS)} FROM invoices WHERE {where} ORDER BY rowid LIMIT 1",
                params,
            ).fetchone()
        return self._row_to_invoice(row) if row is not None else None

    def update_many(self, query: Filter, changes: dict) -> UpdateResult:
        """
        Apply changes to all matching invoices in a single transaction.

        Rows whose values already equal the changes count as matched but
        not modified.
        """
        check_invoice_changes(changes)
        where, params = build_where(query)
        assignments = ", ".join(f"{name} = ?" for name in changes)
        differs = " OR ".join(f"{name} IS NOT ?" for name in changes)
        values = [to_db_value(v) for v in changes.values()]

        with closing(self._get_connection()) as conn, conn:
            # Take the write lock first so the count and the update see the same rows
            conn.execute("BEGIN IMMEDIATE")
            matched = conn.execute(
                f"SELECT COUNT(*) FROM invoices WHERE {where}", params
            ).fetchone()[0]
            cursor = conn.execute(
                f"UPDATE invoices SET {assignments} WHERE ({where}) AND ({differs})",
                values + params + values,
            )
            modified = cursor.rowcount

        return UpdateResult(matched_count=matched, modified_count=modified)


class SQLiteVerificationRecordStore(VerificationRecordStoreBase):
    """SQLite-backed verification records, unique per (remark, amount)."""

    def __init__(self, db_path: str = "reconciler.db"):
        self.db_path = db_path
        self._init_database()

    def _init_database(self):
        """Create verification_records table if it doesn't exist"""
        with closing(sqlite3.connect(self.db_path)) as conn, conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS verification_records (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    remark TEXT NOT NULL,
                    amount REAL NOT NULL,
                    file_name TEXT NOT NULL,
                    bank TEXT NOT NULL,
                    invoice_number TEXT NOT NULL,
                    file_url TEXT NOT NULL,
                    invoice_id TEXT NOT NULL,
                    created_at TEXT NOT NULL,
                    UNIQUE (remark, amount)
                )
            """)

    def _get_connection(self) -> sqlite3.Connection:
        return connect(self.db_path)

    def find_one(self, query: Filter) -> Optional[VerificationRecord]:
        where, params = build_where(query)
        with closing(self._get_connection()) as conn:
            row = conn.execute(
                f"SELECT {', '.join(RECORD_COLUMNS)} FROM verification_records "
                f"WHERE {where} ORDER BY id LIMIT 1",
                params,
            ).fetchone()
        if row is None:
            return None
        return VerificationRecord(**{c: row[c] for c in RECORD_COLUMNS})

    def insert(self, record: VerificationRecord) -> None:
        values = [getattr(record, c) for c in RECORD_COLUMNS]
        created_at = datetime.now(UTC).strftime(TIMESTAMP_FORMAT)
        try:
            with closing(self._get_connection()) as conn, conn:
                conn.execute(
                    f"INSERT INTO verification_records ({', '.join(RECORD_COLUMNS)}, created_at) "
                    f"VALUES ({', '.join('?' for _ in RECORD_COLUMNS)}, ?)",
                    values + [created_at],
                )
        except sqlite3.IntegrityError as e:
            raise DuplicateRecordError(record.remark, record.amount) from e
