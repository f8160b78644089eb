"""
Core — Audit Service

Provides methods for writing audit log entries from any app.

@file core/services.py
"""

from typing import Any

from core.models import AuditLog


class AuditService:
    """Centralised audit logging for every write operation."""

    @staticmethod
    def log(
        *,
        actor,
        action: str,
        model_name: str,
        object_id: str,
        old_values: dict[str, Any] | None = None,
        new_values: dict[str, Any] | None = None,
    ) -> AuditLog:
        # Anonymous request users are not persisted as actors.
        if actor is not None and not getattr(actor, 'pk', None):
            actor = None
        return AuditLog.objects.create(
            actor=actor,
            action=action,
            model_name=model_name,
            object_id=str(object_id),
            old_values=old_values,
            new_values=new_values,
        )
