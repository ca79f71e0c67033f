"""Background workers for the travel social service."""

from .inventory_audit_worker import InventoryAuditWorker

__all__ = ["InventoryAuditWorker"]
