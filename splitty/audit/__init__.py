"""Audit logging package."""

from splitty.audit.storage import AuditStorageInterface, InMemoryAuditStorage
from splitty.audit.logger import AuditLogger, create_correlation_id

__all__ = [
    "AuditLogger",
    "AuditStorageInterface",
    "InMemoryAuditStorage",
    "create_correlation_id",
]
