#!/usr/bin/env python3
"""CLI Entrypoint - コマンドラインから実行

使い方:
    python -m schooldesk.entrypoints.cli export-weekly --date 2026-03-02 -o weekly.xlsx
    python -m schooldesk.entrypoints.cli export-monthly --year 2026 --month 3 -o monthly.xlsx
    python -m schooldesk.entrypoints.cli import-users users.csv
    python -m schooldesk.entrypoints.cli hash-password
    python -m schooldesk.entrypoints.cli serve --port 8080

環境変数:
    LOG_LEVEL: ログレベル (DEBUG, INFO, WARNING, ERROR) デフォルト: INFO
    PORT: serve の待ち受けポート（Cloud Run が設定する）デフォルト: 8080
    ADMIN_EMAIL / ADMIN_PASSWORD_HASH 等は schooldesk.config を参照
"""

from __future__ import annotations

import argparse
import getpass
import logging
import os
import sys
from datetime import date

import uvicorn

from schooldesk.adapters.password_hasher import Pbkdf2PasswordHasher
from schooldesk.domain.errors import SchoolDeskError
from schooldesk.entrypoints.factory import create_portal
from schooldesk.logging_config import setup_logging
from schooldesk.services.export_projector import monthly_title, weekly_title

logger = logging.getLogger(__name__)


def _parse_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"invalid date: {value}") from e


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="schooldesk", description="SchoolDesk 管理コマンド"
    )
    sub = parser.add_subparsers(dest="command", required=True)

    weekly = sub.add_parser("export-weekly", help="週間日程を xlsx に出力")
    weekly.add_argument("--date", type=_parse_date, default=None, help="基準日 (YYYY-MM-DD)")
    weekly.add_argument("-o", "--output", default=None, help="出力ファイル")

    monthly = sub.add_parser("export-monthly", help="月間日程を xlsx に出力")
    monthly.add_argument("--year", type=int, required=True)
    monthly.add_argument("--month", type=int, required=True, choices=range(1, 13))
    monthly.add_argument("-o", "--output", default=None, help="出力ファイル")

    import_users = sub.add_parser("import-users", help="CSV からアカウントを一括登録")
    import_users.add_argument("csv_path")

    sub.add_parser("hash-password", help="ADMIN_PASSWORD_HASH 用のハッシュを生成")

    serve = sub.add_parser("serve", help="API サーバーを起動")
    serve.add_argument("--host", default="0.0.0.0")
    serve.add_argument("--port", type=int, default=int(os.getenv("PORT", "8080")))
    return parser


def _export_weekly(args: argparse.Namespace) -> int:
    portal = create_portal()
    reference = args.date or portal.today()
    title = weekly_title(reference)
    content = portal.export_renderer.render_weekly(
        title, portal.schedules.weekly_export(reference)
    )
    output = args.output or f"{title}.xlsx"
    with open(output, "wb") as f:
        f.write(content)
    logger.info("Weekly export written: %s (%d bytes)", output, len(content))
    return 0


def _export_monthly(args: argparse.Namespace) -> int:
    portal = create_portal()
    title = monthly_title(args.year, args.month)
    content = portal.export_renderer.render_monthly(
        title, portal.schedules.monthly_export(args.year, args.month)
    )
    output = args.output or f"{title}.xlsx"
    with open(output, "wb") as f:
        f.write(content)
    logger.info("Monthly export written: %s (%d bytes)", output, len(content))
    return 0


def _import_users(args: argparse.Namespace) -> int:
    portal = create_portal()
    with open(args.csv_path, encoding="utf-8-sig") as f:
        result = portal.users.import_csv(f.read())

    for email in (u.email for u in result.added):
        logger.info("Added: %s", email)
    logger.info(
        "Import complete: added=%d, duplicates=%d, malformed=%d",
        len(result.added),
        result.skipped_duplicates,
        result.skipped_malformed,
    )
    warnings = portal.users.drain_warnings()
    for warning in warnings:
        logger.warning("%s", warning)
    return 1 if warnings else 0


def _hash_password(args: argparse.Namespace) -> int:
    password = getpass.getpass("Password: ")
    if password != getpass.getpass("Confirm: "):
        logger.error("Passwords do not match")
        return 1
    print(Pbkdf2PasswordHasher().hash(password))
    return 0


def _serve(args: argparse.Namespace) -> int:
    # ログは setup_logging の設定を使う（uvicorn 独自の設定で上書きしない）
    uvicorn.run(
        "schooldesk.entrypoints.api.app:app",
        host=args.host,
        port=args.port,
        log_config=None,
    )
    return 0


_COMMANDS = {
    "export-weekly": _export_weekly,
    "export-monthly": _export_monthly,
    "import-users": _import_users,
    "hash-password": _hash_password,
    "serve": _serve,
}


def main(argv: list[str] | None = None) -> None:
    """メインエントリーポイント"""
    setup_logging()
    args = build_parser().parse_args(argv)

    try:
        code = _COMMANDS[args.command](args)

    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        sys.exit(130)

    except (SchoolDeskError, ValueError, OSError) as e:
        logger.error("%s failed: %s", args.command, e)
        sys.exit(1)

    sys.exit(code)


if __name__ == "__main__":
    main()
