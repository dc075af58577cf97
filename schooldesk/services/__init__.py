"""Services layer - ビジネスロジック"""

from schooldesk.services.auth import AuthService, SessionRegistry
from schooldesk.services.dashboard import DashboardService, DashboardView
from schooldesk.services.record_store import RecordStore
from schooldesk.services.schedule_service import ScheduleInput, ScheduleService
from schooldesk.services.shortcut_service import ShortcutService
from schooldesk.services.training_board import TrainingBoardService, TrainingInput
from schooldesk.services.user_admin import UserAdminService

__all__ = [
    "RecordStore",
    "AuthService",
    "SessionRegistry",
    "ScheduleService",
    "ScheduleInput",
    "TrainingBoardService",
    "TrainingInput",
    "ShortcutService",
    "UserAdminService",
    "DashboardService",
    "DashboardView",
]
