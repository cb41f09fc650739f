"""Infrastructure layer implementations."""

from faktura.infrastructure import storage, webhooks

__all__ = ["storage", "webhooks"]
