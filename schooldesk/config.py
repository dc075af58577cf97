"""設定管理 - 環境変数の型安全な読み込み"""

import os
from dataclasses import dataclass
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv


@dataclass(frozen=True)
class AppConfig:
    """アプリケーション設定"""

    admin_email: str
    admin_password_hash: str
    project_id: str = ""  # 空の場合はリモートストアなし（ローカルキャッシュのみ）
    cache_dir: str = ".schooldesk_cache"
    weather_latitude: float = 36.1398
    weather_longitude: float = 128.1136
    weather_location_name: str = "김천시 다수동"
    default_user_password: str = "123456"
    timezone: str = "Asia/Seoul"  # 「今日」の判定に使う IANA タイムゾーン
    local_mode: bool = False

    @classmethod
    def from_env(cls) -> "AppConfig":
        """環境変数から設定を読み込む"""
        load_dotenv()

        admin_email = os.getenv("ADMIN_EMAIL")
        if not admin_email:
            raise ValueError("ADMIN_EMAIL is not set in environment")

        admin_password_hash = os.getenv("ADMIN_PASSWORD_HASH")
        if not admin_password_hash:
            raise ValueError("ADMIN_PASSWORD_HASH is not set in environment")

        try:
            latitude = float(os.getenv("WEATHER_LATITUDE", "36.1398"))
            longitude = float(os.getenv("WEATHER_LONGITUDE", "128.1136"))
        except ValueError as e:
            raise ValueError(f"WEATHER_LATITUDE/WEATHER_LONGITUDE must be numbers: {e}") from e

        timezone = os.getenv("TIMEZONE", "Asia/Seoul")
        try:
            ZoneInfo(timezone)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"TIMEZONE is not a valid IANA time zone: {timezone}") from e

        return cls(
            admin_email=admin_email,
            admin_password_hash=admin_password_hash,
            project_id=os.getenv("PROJECT_ID", ""),
            cache_dir=os.getenv("CACHE_DIR", ".schooldesk_cache"),
            weather_latitude=latitude,
            weather_longitude=longitude,
            weather_location_name=os.getenv("WEATHER_LOCATION_NAME", "김천시 다수동"),
            default_user_password=os.getenv("DEFAULT_USER_PASSWORD", "123456"),
            timezone=timezone,
            local_mode=bool(os.getenv("LOCAL_MODE")),
        )
