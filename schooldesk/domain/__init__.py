"""Domain layer - 外部依存なしのドメインモデルとインターフェース定義"""

from schooldesk.domain.errors import (
    AuthenticationError,
    ConfirmationRequiredError,
    ImportFormatError,
    PermissionDeniedError,
    RecordNotFoundError,
    RemoteStoreError,
    SchoolDeskError,
    ValidationError,
    WeatherUnavailableError,
)
from schooldesk.domain.models import (
    CalendarMode,
    DayCell,
    Holiday,
    ImportResult,
    MonthlyExportRow,
    RegisteredUser,
    Role,
    Schedule,
    ScheduleCategory,
    SessionContext,
    Shortcut,
    TrainingPost,
    ViewContext,
    ViewMode,
    WeatherCondition,
    WeatherReport,
    WeeklyExportRow,
)
from schooldesk.domain.ports import (
    CalendarFeedRenderer,
    ExportRenderer,
    LocalCache,
    PasswordHasher,
    RemoteRecordStore,
    WeatherSource,
)

__all__ = [
    # Models
    "ScheduleCategory",
    "Role",
    "ViewMode",
    "CalendarMode",
    "WeatherCondition",
    "Schedule",
    "TrainingPost",
    "Shortcut",
    "RegisteredUser",
    "Holiday",
    "SessionContext",
    "ViewContext",
    "DayCell",
    "WeeklyExportRow",
    "MonthlyExportRow",
    "WeatherReport",
    "ImportResult",
    # Errors
    "SchoolDeskError",
    "RemoteStoreError",
    "ValidationError",
    "AuthenticationError",
    "PermissionDeniedError",
    "RecordNotFoundError",
    "ConfirmationRequiredError",
    "WeatherUnavailableError",
    "ImportFormatError",
    # Ports
    "RemoteRecordStore",
    "LocalCache",
    "WeatherSource",
    "ExportRenderer",
    "CalendarFeedRenderer",
    "PasswordHasher",
]
