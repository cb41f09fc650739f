"""
SQLite implementation of invoice storage.

Invoices live in `invoices` with seller/buyer as JSON columns; line items
live in `invoice_items` ordered by line_number.
"""

import json
import uuid
from datetime import UTC, date, datetime

import aiosqlite

from faktura.config import get_logger
from faktura.core.entities import Invoice, InvoiceItem, InvoiceParty, InvoiceStatus
from faktura.core.interfaces import IInvoiceStore
from faktura.infrastructure.storage.sqlite.connection import get_connection, get_transaction

logger = get_logger(__name__)


class SQLiteInvoiceStore(IInvoiceStore):
    """SQLite implementation of invoice storage."""

    async def create_invoice(self, invoice: Invoice) -> Invoice:
        """Insert invoice and its items; assigns a uuid when id is unset."""
        if invoice.id is None:
            invoice.id = str(uuid.uuid4())

        async with get_transaction() as conn:
            await conn.execute(
                """
                INSERT INTO invoices (
                    id, invoice_number, issue_date, delivery_date, issue_place,
                    copy_type, seller_json, buyer_json, payment_terms, payment_type,
                    document_notes, claim_number, vehicle, template_id,
                    total_net, total_vat, total_gross, status, webhook_url,
                    webhook_completed, created_at, updated_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    invoice.id,
                    invoice.invoice_number,
                    invoice.issue_date.isoformat(),
                    invoice.delivery_date.isoformat(),
                    invoice.issue_place,
                    invoice.copy_type,
                    self._party_json(invoice.seller),
                    self._party_json(invoice.buyer),
                    invoice.payment_terms,
                    invoice.payment_type,
                    invoice.document_notes,
                    invoice.claim_number,
                    invoice.vehicle,
                    invoice.template_id,
                    invoice.total_net,
                    invoice.total_vat,
                    invoice.total_gross,
                    invoice.status.value,
                    invoice.webhook_url,
                    int(invoice.webhook_completed),
                    invoice.created_at.isoformat(),
                    invoice.updated_at.isoformat() if invoice.updated_at else None,
                ),
            )
            await self._insert_items(conn, invoice.id, invoice.items)

        logger.info("invoice_created", invoice_id=invoice.id, items=len(invoice.items))
        return invoice

    async def _insert_items(
        self,
        conn: aiosqlite.Connection,
        invoice_id: str,
        items: list[InvoiceItem],
    ) -> None:
        await conn.executemany(
            """
            INSERT INTO invoice_items (
                invoice_id, line_number, name, code, kjc, qty, uom,
                unit_net, vat_rate, net, vat, gross
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            [
                (
                    invoice_id,
                    line_number,
                    item.name,
                    item.code,
                    item.kjc,
                    item.qty,
                    item.uom,
                    item.unit_net,
                    item.vat_rate,
                    item.net,
                    item.vat,
                    item.gross,
                )
                for line_number, item in enumerate(items, start=1)
            ],
        )

    async def get_invoice(self, invoice_id: str) -> Invoice | None:
        """Get invoice by ID with items."""
        async with get_connection() as conn:
            cursor = await conn.execute("SELECT * FROM invoices WHERE id = ?", (invoice_id,))
            row = await cursor.fetchone()
            if row is None:
                return None

            items = await self._load_items(conn, invoice_id)
            return self._row_to_invoice(row, items)

    async def _load_items(self, conn: aiosqlite.Connection, invoice_id: str) -> list[InvoiceItem]:
        cursor = await conn.execute(
            "SELECT * FROM invoice_items WHERE invoice_id = ? ORDER BY line_number",
            (invoice_id,),
        )
        return [self._row_to_item(r) for r in await cursor.fetchall()]

    async def list_invoices(
        self,
        limit: int = 100,
        offset: int = 0,
        status: InvoiceStatus | None = None,
    ) -> list[Invoice]:
        """List invoices, newest first."""
        async with get_connection() as conn:
            if status is not None:
                cursor = await conn.execute(
                    """
                    SELECT * FROM invoices
                    WHERE status = ?
                    ORDER BY created_at DESC
                    LIMIT ? OFFSET ?
                    """,
                    (status.value, limit, offset),
                )
            else:
                cursor = await conn.execute(
                    """
                    SELECT * FROM invoices
                    ORDER BY created_at DESC
                    LIMIT ? OFFSET ?
                    """,
                    (limit, offset),
                )

            rows = await cursor.fetchall()
            return [
                self._row_to_invoice(row, await self._load_items(conn, row["id"]))
                for row in rows
            ]

    async def count_invoices(self, status: InvoiceStatus | None = None) -> int:
        """Count invoices."""
        async with get_connection() as conn:
            if status is not None:
                cursor = await conn.execute(
                    "SELECT COUNT(*) FROM invoices WHERE status = ?", (status.value,)
                )
            else:
                cursor = await conn.execute("SELECT COUNT(*) FROM invoices")
            row = await cursor.fetchone()
            return row[0] if row else 0

    async def update_invoice(self, invoice: Invoice) -> Invoice:
        """Overwrite the invoice row and replace its items."""
        invoice.updated_at = datetime.now(UTC)
        async with get_transaction() as conn:
            await conn.execute(
                """
                UPDATE invoices SET
                    invoice_number = ?, issue_date = ?, delivery_date = ?, issue_place = ?,
                    copy_type = ?, seller_json = ?, buyer_json = ?, payment_terms = ?,
                    payment_type = ?, document_notes = ?, claim_number = ?, vehicle = ?,
                    template_id = ?, total_net = ?, total_vat = ?, total_gross = ?,
                    status = ?, webhook_url = ?, webhook_completed = ?, updated_at = ?
                WHERE id = ?
                """,
                (
                    invoice.invoice_number,
                    invoice.issue_date.isoformat(),
                    invoice.delivery_date.isoformat(),
                    invoice.issue_place,
                    invoice.copy_type,
                    self._party_json(invoice.seller),
                    self._party_json(invoice.buyer),
                    invoice.payment_terms,
                    invoice.payment_type,
                    invoice.document_notes,
                    invoice.claim_number,
                    invoice.vehicle,
                    invoice.template_id,
                    invoice.total_net,
                    invoice.total_vat,
                    invoice.total_gross,
                    invoice.status.value,
                    invoice.webhook_url,
                    int(invoice.webhook_completed),
                    invoice.updated_at.isoformat(),
                    invoice.id,
                ),
            )
            await conn.execute("DELETE FROM invoice_items WHERE invoice_id = ?", (invoice.id,))
            await self._insert_items(conn, invoice.id, invoice.items)

        logger.info("invoice_updated", invoice_id=invoice.id, status=invoice.status.value)
        return invoice

    async def set_webhook_completed(self, invoice_id: str, completed: bool = True) -> None:
        """Flip the delivery flag without touching the rest of the record."""
        async with get_transaction() as conn:
            await conn.execute(
                "UPDATE invoices SET webhook_completed = ?, updated_at = ? WHERE id = ?",
                (int(completed), datetime.now(UTC).isoformat(), invoice_id),
            )

    async def delete_invoice(self, invoice_id: str) -> bool:
        """Delete invoice (cascades to items)."""
        async with get_transaction() as conn:
            cursor = await conn.execute("DELETE FROM invoices WHERE id = ?", (invoice_id,))
            deleted = cursor.rowcount > 0

        if deleted:
            logger.info("invoice_deleted", invoice_id=invoice_id)
        return deleted

    # Conversion helpers

    @staticmethod
    def _party_json(party: InvoiceParty) -> str:
        return json.dumps(party.model_dump(), ensure_ascii=False)

    def _row_to_invoice(self, row: aiosqlite.Row, items: list[InvoiceItem]) -> Invoice:
        """Convert database row to Invoice entity."""
        return Invoice(
            id=row["id"],
            invoice_number=row["invoice_number"],
            issue_date=date.fromisoformat(row["issue_date"]),
            delivery_date=date.fromisoformat(row["delivery_date"]),
            issue_place=row["issue_place"],
            copy_type=row["copy_type"],
            seller=InvoiceParty(**json.loads(row["seller_json"])),
            buyer=InvoiceParty(**json.loads(row["buyer_json"])),
            items=items,
            payment_terms=row["payment_terms"],
            payment_type=row["payment_type"],
            document_notes=row["document_notes"],
            claim_number=row["claim_number"],
            vehicle=row["vehicle"],
            template_id=row["template_id"],
            total_net=row["total_net"],
            total_vat=row["total_vat"],
            total_gross=row["total_gross"],
            status=InvoiceStatus(row["status"]),
            webhook_url=row["webhook_url"],
            webhook_completed=bool(row["webhook_completed"]),
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]) if row["updated_at"] else None,
        )

    def _row_to_item(self, row: aiosqlite.Row) -> InvoiceItem:
        """Convert database row to InvoiceItem entity."""
        return InvoiceItem(
            name=row["name"],
            code=row["code"],
            kjc=row["kjc"],
            qty=row["qty"],
            uom=row["uom"],
            unit_net=row["unit_net"],
            vat_rate=row["vat_rate"],
            net=row["net"],
            vat=row["vat"],
            gross=row["gross"],
        )
