"""Storage infrastructure implementations."""

from faktura.infrastructure.storage.sqlite import (
    SQLiteInvoiceStore,
    close_pool,
    get_connection,
    get_invoice_store,
    get_pool,
    get_transaction,
)

__all__ = [
    # SQLite stores
    "SQLiteInvoiceStore",
    "get_invoice_store",
    # Connection pool
    "get_pool",
    "close_pool",
    "get_connection",
    "get_transaction",
]
