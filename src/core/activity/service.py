from datetime import datetime
from enum import StrEnum
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.core.activity.models import UserActivity


class ActivityAction(StrEnum):
    """Standard activity types."""

    LOGIN = "LOGIN"
    REGISTER = "REGISTER"
    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    CHANGE_ROLE = "CHANGE_ROLE"

    # Finance actions
    RECORD_SPP_PAYMENT = "RECORD_SPP_PAYMENT"
    SAVINGS_DEPOSIT = "SAVINGS_DEPOSIT"
    SAVINGS_WITHDRAWAL = "SAVINGS_WITHDRAWAL"
    RECORD_CASH = "RECORD_CASH"
    RECORD_EXPENSE = "RECORD_EXPENSE"
    RECORD_DONATION = "RECORD_DONATION"
    RECORD_SALARY = "RECORD_SALARY"
    EXPORT_REPORT = "EXPORT_REPORT"


class ActivityService:
    """Service for writing and reading the user activity trail."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def log(
        self,
        action: str | ActivityAction,
        module: str | None = None,
        user_id: int | None = None,
        description: str | None = None,
        details: dict[str, Any] | None = None,
        ip_address: str | None = None,
    ) -> UserActivity:
        """Record an activity entry."""
        activity = UserActivity(
            user_id=user_id,
            action_type=str(action),
            module=module,
            description=description,
            details=details,
            ip_address=ip_address,
        )

        self.db.add(activity)
        await self.db.flush()

        return activity

    async def list_activities(
        self,
        *,
        user_id: int | None = None,
        module: str | None = None,
        action_type: str | None = None,
        date_from: datetime | None = None,
        date_to: datetime | None = None,
    ) -> list[UserActivity]:
        """Activities matching the filters, newest first."""
        q = select(UserActivity).order_by(UserActivity.created_at.desc(), UserActivity.id.desc())
        if user_id is not None:
            q = q.where(UserActivity.user_id == user_id)
        if module is not None:
            q = q.where(UserActivity.module == module)
        if action_type is not None:
            q = q.where(UserActivity.action_type == action_type)
        if date_from is not None:
            q = q.where(UserActivity.created_at >= date_from)
        if date_to is not None:
            q = q.where(UserActivity.created_at <= date_to)

        result = await self.db.execute(q)
        return list(result.scalars().all())
