"""Excel Export Renderer Adapter

ExportRenderer ABC の openpyxl を使った実装。

レイアウト:
  1行目      タイトル（全列を結合）
  2行目      ヘッダー
  3行目以降  データ行（全セル罫線付き、休日・日曜日の行は赤字）
"""

from __future__ import annotations

import io
import logging

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.worksheet.worksheet import Worksheet

from schooldesk.domain.models import MonthlyExportRow, WeeklyExportRow
from schooldesk.domain.ports import ExportRenderer

logger = logging.getLogger(__name__)

_WEEKLY_HEADERS = ("날짜", "계기교육", "주요 일정", "작성자")
_WEEKLY_WIDTHS = (14, 24, 60, 18)

_MONTHLY_HEADERS = ("일", "요일", "계기교육", "주요 일정", "작성자")
_MONTHLY_WIDTHS = (6, 6, 28, 60, 18)

_THIN = Side(style="thin", color="000000")
_BORDER = Border(left=_THIN, right=_THIN, top=_THIN, bottom=_THIN)
_HEADER_FILL = PatternFill(fill_type="solid", start_color="DDEBF7", end_color="DDEBF7")
_HOLIDAY_FONT = Font(color="FF0000")
_WRAP = Alignment(vertical="center", wrap_text=True)
_CENTER = Alignment(horizontal="center", vertical="center", wrap_text=True)


class XlsxExportRenderer(ExportRenderer):
    """openpyxl でエクスポート行を .xlsx に変換する実装"""

    def render_weekly(self, title: str, rows: list[WeeklyExportRow]) -> bytes:
        """週間表を .xlsx のバイト列に変換"""
        wb = Workbook()
        ws = wb.active
        ws.title = "주간"
        self._write_frame(ws, title, _WEEKLY_HEADERS, _WEEKLY_WIDTHS)
        for offset, row in enumerate(rows):
            values = (row.label, row.observance, row.others, row.authors)
            self._write_row(ws, 3 + offset, values, row.is_public_holiday, centered=(1,))
        logger.info("Rendered weekly workbook: rows=%d", len(rows))
        return self._to_bytes(wb)

    def render_monthly(self, title: str, rows: list[MonthlyExportRow]) -> bytes:
        """月間表を .xlsx のバイト列に変換"""
        wb = Workbook()
        ws = wb.active
        ws.title = "월간"
        self._write_frame(ws, title, _MONTHLY_HEADERS, _MONTHLY_WIDTHS)
        for offset, row in enumerate(rows):
            values = (row.day, row.weekday, row.observance, row.others, row.authors)
            self._write_row(
                ws, 3 + offset, values, row.is_public_holiday, centered=(1, 2)
            )
        logger.info("Rendered monthly workbook: rows=%d", len(rows))
        return self._to_bytes(wb)

    # ── 共通ヘルパー ──────────────────────────────────────────────────────────

    @staticmethod
    def _write_frame(
        ws: Worksheet,
        title: str,
        headers: tuple[str, ...],
        widths: tuple[int, ...],
    ) -> None:
        """タイトル行（結合）・ヘッダー行・列幅を設定"""
        ws.merge_cells(start_row=1, start_column=1, end_row=1, end_column=len(headers))
        title_cell = ws.cell(row=1, column=1, value=title)
        title_cell.font = Font(bold=True, size=14)
        title_cell.alignment = _CENTER
        ws.row_dimensions[1].height = 28

        for col, header in enumerate(headers, start=1):
            cell = ws.cell(row=2, column=col, value=header)
            cell.font = Font(bold=True)
            cell.fill = _HEADER_FILL
            cell.border = _BORDER
            cell.alignment = _CENTER

        for col, width in enumerate(widths, start=1):
            ws.column_dimensions[ws.cell(row=2, column=col).column_letter].width = width

    @staticmethod
    def _write_row(
        ws: Worksheet,
        row_index: int,
        values: tuple,
        highlight: bool,
        centered: tuple[int, ...] = (),
    ) -> None:
        for col, value in enumerate(values, start=1):
            cell = ws.cell(row=row_index, column=col, value=value)
            cell.border = _BORDER
            cell.alignment = _CENTER if col in centered else _WRAP
            if highlight:
                cell.font = _HOLIDAY_FONT

    @staticmethod
    def _to_bytes(wb: Workbook) -> bytes:
        buf = io.BytesIO()
        wb.save(buf)
        return buf.getvalue()
