"""
Audit Logging Service

This module records administrative actions:
- Member deletion by an admin (with the size of the cascade)
- Role changes made with scripts/create_admin.py

The entry is added to the caller's session but not committed, so it is
saved only if the audited action commits as well.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from borohub.models import AuditLog
import json


async def log_action(
    db: AsyncSession,
    action: str,
    actor_handle: str,
    details: dict | str | None = None
):
    """
    Record an action in the audit log.

    Args:
        db: Database session (transaction will be committed by caller)
        action: Name of the action (e.g., "member_deleted")
        actor_handle: Handle of the member performing the action
        details: Optional context, dicts are stored as JSON

    Example:
        await log_action(db, "member_deleted", "admin", {"member_id": 12})
        await db.commit()
    """
    details_str = None
    if details:
        if isinstance(details, dict):
            details_str = json.dumps(details)
        else:
            details_str = str(details)

    db.add(AuditLog(action=action, actor_handle=actor_handle, details=details_str))


async def recent_actions(db: AsyncSession, limit: int = 50) -> list[AuditLog]:
    """Most recent audit entries first."""
    result = await db.execute(
        select(AuditLog).order_by(AuditLog.created_at.desc(), AuditLog.id.desc()).limit(limit)
    )
    return list(result.scalars().all())
