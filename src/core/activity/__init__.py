from src.core.activity.models import UserActivity
from src.core.activity.service import ActivityAction, ActivityService

__all__ = ["UserActivity", "ActivityAction", "ActivityService"]
