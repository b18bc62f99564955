"""
Database Handler Module.

This module stores reviewed bill records in SQLite.

Features:
    - Automatic schema creation
    - Server-assigned ids and timestamps
    - Payment tracking
    - Query helpers

Connections are opened per operation, so one handler can be shared by
several threads.
"""

import re
import sqlite3
import uuid
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

from config import get_config
from bill_extractor.utils.logger import get_logger
from bill_extractor.utils.helpers import ensure_directory
from bill_extractor.utils.exceptions import ConfigurationError, DatabaseError
from bill_extractor.extraction.invoice_record import PartialInvoiceRecord, UtilityType

logger = get_logger(__name__)

RECORD_COLUMNS = (
    'customer_number',
    'invoice_number',
    'address',
    'invoice_date',
    'due_date',
    'amount',
    'is_paid',
    'utility_type',
    'file_name',
)


class DatabaseHandler:
    """
    Handles storage of bill records.

    Attributes:
        db_path: Path to the SQLite database file
        table_name: Name of the invoices table

    Example:
        >>> db = DatabaseHandler()
        >>> invoice_id = db.insert(record)
        >>> db.mark_paid(invoice_id)
        True
    """

    def __init__(self, db_path: Optional[Union[str, Path]] = None) -> None:
        """
        Initialize the database handler.

        Args:
            db_path: Path to database file. If None, uses configuration.

        Raises:
            ConfigurationError: If the configured table name is not a
                plain identifier.
            DatabaseError: If the schema cannot be created.
        """
        if db_path:
            self.db_path = Path(db_path)
        else:
            output_dir = Path(get_config("paths.output_dir", "outputs"))
            db_name = get_config("output.database.name", "invoices.db")
            self.db_path = output_dir / db_name

        self.table_name = get_config("output.database.table_name", "invoices")
        if not re.fullmatch(r'[A-Za-z_][A-Za-z0-9_]*', str(self.table_name)):
            raise ConfigurationError("output.database.table_name", "must be a plain identifier")

        ensure_directory(self.db_path.parent)
        self._create_tables()

        logger.debug(f"DatabaseHandler initialized (db: {self.db_path})")

    def _create_tables(self) -> None:
        """Create the invoices table if it doesn't exist."""
        create_sql = f"""
        CREATE TABLE IF NOT EXISTS {self.table_name} (
            id TEXT PRIMARY KEY,
            customer_number TEXT,
            invoice_number TEXT,
            address TEXT,
            invoice_date TEXT,
            due_date TEXT,
            amount REAL,
            is_paid INTEGER DEFAULT 0,
            payment_date TEXT,
            utility_type TEXT,
            file_name TEXT,
            file_path TEXT,
            created_at TEXT,
            updated_at TEXT
        )
        """

        try:
            conn = sqlite3.connect(self.db_path)
            cursor = conn.cursor()
            cursor.execute(create_sql)
            cursor.execute(f"""
                CREATE INDEX IF NOT EXISTS idx_{self.table_name}_address
                ON {self.table_name} (address)
            """)
            conn.commit()
            conn.close()
        except sqlite3.Error as e:
            raise DatabaseError("create tables", str(e))

    def _execute(self, operation: str, query: str, params: Sequence[Any] = ()) -> int:
        """Run a write statement and return the number of affected rows."""
        try:
            conn = sqlite3.connect(self.db_path)
            cursor = conn.cursor()
            cursor.execute(query, params)
            affected = cursor.rowcount
            conn.commit()
            conn.close()
            return affected
        except sqlite3.Error as e:
            raise DatabaseError(operation, str(e))

    def _fetch(self, operation: str, query: str, params: Sequence[Any] = ()) -> List[Dict[str, Any]]:
        """Run a query and return rows as dictionaries."""
        try:
            conn = sqlite3.connect(self.db_path)
            conn.row_factory = sqlite3.Row
            cursor = conn.cursor()
            cursor.execute(query, params)
            rows = [dict(row) for row in cursor.fetchall()]
            conn.close()
            return rows
        except sqlite3.Error as e:
            raise DatabaseError(operation, str(e))

    def insert(
        self,
        record: PartialInvoiceRecord,
        file_path: Optional[str] = None
    ) -> str:
        """
        Insert a record.

        Args:
            record: Record to store.
            file_path: Where the original PDF is kept, if anywhere.

        Returns:
            The id assigned to the new row.

        Raises:
            DatabaseError: If insertion fails.
        """
        invoice_id = uuid.uuid4().hex
        now = datetime.now().isoformat()
        row = record.to_db_row()

        columns = ('id',) + RECORD_COLUMNS + ('file_path', 'created_at', 'updated_at')
        values = (
            [invoice_id]
            + [int(row[c]) if c == 'is_paid' else row[c] for c in RECORD_COLUMNS]
            + [file_path, now, now]
        )
        placeholders = ', '.join('?' for _ in columns)

        self._execute(
            "insert",
            f"INSERT INTO {self.table_name} ({', '.join(columns)}) VALUES ({placeholders})",
            values
        )

        logger.debug(f"Inserted {record.file_name} as {invoice_id}")
        return invoice_id

    def insert_batch(self, records: List[PartialInvoiceRecord]) -> List[str]:
        """
        Insert multiple records.

        Returns:
            Assigned ids in input order.
        """
        ids = [self.insert(record) for record in records]
        logger.info(f"Batch insert complete: {len(ids)} inserted")
        return ids

    def get(self, invoice_id: str) -> Optional[PartialInvoiceRecord]:
        """Retrieve a record by id, or None if not found."""
        rows = self._fetch(
            "get",
            f"SELECT * FROM {self.table_name} WHERE id = ? LIMIT 1",
            (invoice_id,)
        )
        return PartialInvoiceRecord.from_dict(rows[0]) if rows else None

    def get_row(self, invoice_id: str) -> Optional[Dict[str, Any]]:
        """Retrieve the raw row (including payment and audit columns)."""
        rows = self._fetch(
            "get_row",
            f"SELECT * FROM {self.table_name} WHERE id = ? LIMIT 1",
            (invoice_id,)
        )
        return rows[0] if rows else None

    def get_all(self, limit: Optional[int] = None) -> List[PartialInvoiceRecord]:
        """
        Retrieve all records, newest first.

        Args:
            limit: Maximum number of records to retrieve.
        """
        query = f"SELECT * FROM {self.table_name} ORDER BY created_at DESC, rowid DESC"
        params: List[Any] = []
        if limit:
            query += " LIMIT ?"
            params.append(int(limit))

        return [PartialInvoiceRecord.from_dict(row) for row in self._fetch("get_all", query, params)]

    def search(
        self,
        address: Optional[str] = None,
        utility_type: Optional[Union[str, UtilityType]] = None,
        is_paid: Optional[bool] = None
    ) -> List[PartialInvoiceRecord]:
        """
        Search records with filters.

        Args:
            address: Filter by address (partial match).
            utility_type: Filter by utility type.
            is_paid: Filter by payment status.

        Returns:
            Matching records, newest first.
        """
        conditions = []
        params: List[Any] = []

        if address:
            conditions.append("address LIKE ?")
            params.append(f"%{address}%")

        if utility_type:
            conditions.append("utility_type = ?")
            params.append(UtilityType.parse(utility_type).value)

        if is_paid is not None:
            conditions.append("is_paid = ?")
            params.append(1 if is_paid else 0)

        query = f"SELECT * FROM {self.table_name}"
        if conditions:
            query += " WHERE " + " AND ".join(conditions)
        query += " ORDER BY created_at DESC, rowid DESC"

        return [PartialInvoiceRecord.from_dict(row) for row in self._fetch("search", query, params)]

    def update(self, invoice_id: str, record: PartialInvoiceRecord) -> bool:
        """
        Replace the stored fields of a record.

        Returns:
            True if a row was updated, False if the id is unknown.
        """
        row = record.to_db_row()
        assignments = ', '.join(f"{c} = ?" for c in RECORD_COLUMNS)
        values = [int(row[c]) if c == 'is_paid' else row[c] for c in RECORD_COLUMNS]

        updated = self._execute(
            "update",
            f"UPDATE {self.table_name} SET {assignments}, updated_at = ? WHERE id = ?",
            values + [datetime.now().isoformat(), invoice_id]
        ) > 0

        if updated:
            logger.debug(f"Updated record: {invoice_id}")
        return updated

    def mark_paid(self, invoice_id: str, payment_date: Optional[str] = None) -> bool:
        """
        Mark a record as paid.

        Args:
            invoice_id: Record id.
            payment_date: YYYY-MM-DD. Defaults to today.

        Returns:
            True if a row was updated.
        """
        payment_date = payment_date or date.today().isoformat()
        return self._execute(
            "mark_paid",
            f"UPDATE {self.table_name} SET is_paid = 1, payment_date = ?, updated_at = ? WHERE id = ?",
            (payment_date, datetime.now().isoformat(), invoice_id)
        ) > 0

    def delete(self, invoice_id: str) -> bool:
        """
        Delete a record by id.

        Returns:
            True if deleted, False if not found.
        """
        deleted = self._execute(
            "delete",
            f"DELETE FROM {self.table_name} WHERE id = ?",
            (invoice_id,)
        ) > 0

        if deleted:
            logger.debug(f"Deleted record: {invoice_id}")
        return deleted

    def get_count(self) -> int:
        """Get the total number of records in the database."""
        rows = self._fetch("get_count", f"SELECT COUNT(*) AS n FROM {self.table_name}")
        return rows[0]['n']
