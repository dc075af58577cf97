"""SchoolDesk のログ設定

API サーバー（cli serve）・CLI コマンドの両方が起動時に setup_logging() を1回呼ぶ。
uvicorn は log_config=None で起動するため、uvicorn / uvicorn.access のログも
ここで設定したルートロガーのハンドラから出力される。

出力形式:
    - Cloud Run 上（K_SERVICE / CLOUD_RUN_JOB あり）または LOG_FORMAT=json: 1行1件の JSON
    - それ以外: "2026-03-02 08:30:00 [INFO] schooldesk.services.user_admin: ..." のテキスト

環境変数:
    LOG_LEVEL: ルートロガーのレベル デフォルト: INFO
    LOG_FORMAT: "json" でローカルでも JSON 出力
"""

import json
import logging
import os

# リクエストごとに INFO を出す HTTP / 認証ライブラリ（天気取得・Firestore 接続）
_QUIET_LOGGERS = ("httpx", "httpcore", "urllib3", "google.auth")

_TEXT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


class CloudLoggingFormatter(logging.Formatter):
    """Cloud Logging が読める JSON 形式

    `severity` に Python のレベル名を入れる（未知のレベルは DEFAULT）。
    同期警告などに付加情報を載せる場合は extra={"extra_fields": {...}} を使う。
    """

    SEVERITIES = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})

    def format(self, record: logging.LogRecord) -> str:
        severity = record.levelname if record.levelname in self.SEVERITIES else "DEFAULT"
        log_entry: dict = {
            "severity": severity,
            "message": record.getMessage(),
            "logger": record.name,
            "timestamp": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
        }
        if record.exc_info and record.exc_info[0]:
            log_entry["exception"] = self.formatException(record.exc_info)
        extra_fields = getattr(record, "extra_fields", None)
        if isinstance(extra_fields, dict):
            log_entry.update(extra_fields)
        return json.dumps(log_entry, ensure_ascii=False)


def _use_json() -> bool:
    if os.getenv("LOG_FORMAT", "").lower() == "json":
        return True
    return bool(os.getenv("K_SERVICE") or os.getenv("CLOUD_RUN_JOB"))


def setup_logging() -> None:
    """ルートロガーのハンドラを1つに置き換え、HTTP クライアント系を WARNING に絞る"""
    root_logger = logging.getLogger()
    root_logger.setLevel(
        getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO)
    )

    handler = logging.StreamHandler()
    if _use_json():
        handler.setFormatter(CloudLoggingFormatter())
    else:
        handler.setFormatter(logging.Formatter(_TEXT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))

    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
