"""
Aurora Backend: Report Formatter
Cosmetic styling for the generated workbooks

Formatting is a post-processing step on a workbook that has already been
written. It never changes cell values, and a failure here leaves the data
file as it was: the error is logged as a warning and the report still
counts as written.
"""

import logging
from pathlib import Path
from typing import Callable, Optional, Union

from openpyxl import load_workbook
from openpyxl.styles import Font, PatternFill, Border, Side
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from ..core.config import get_config

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class ReportFormatter:
    """
    Apply header, total row and border styling to report workbooks.

    Mirrors the spreadsheet styling used by the reports:
    - Auto-fit column widths
    - Bold header on a gray background
    - Bold total row on a yellow background (breakdowns)
    - Thin borders around the data range
    """

    # Color scheme
    COLORS = {
        "header": "C0C0C0",     # Gray
        "total": "FFFF00",      # Yellow
    }

    MIN_COLUMN_WIDTH = 8
    MAX_COLUMN_WIDTH = 80

    def __init__(self, enabled: bool = True):
        self.enabled = enabled

    def available(self, file_path: PathLike) -> bool:
        """Rich formatting runs only when enabled and the workbook exists"""
        return self.enabled and Path(file_path).is_file()

    def format_breakdown(self, file_path: PathLike, sheet_name: str) -> bool:
        """Style a breakdown sheet whose last row is the TOTAL row"""
        def apply(wb):
            ws = wb[sheet_name]
            total_row = ws.max_row
            last_col = get_column_letter(ws.max_column)

            self._autofit(ws)
            self._style_header(ws, f"A1:{last_col}1")

            total_fill = self._fill(self.COLORS["total"])
            for row in ws[f"A{total_row}:{last_col}{total_row}"]:
                for cell in row:
                    cell.font = Font(bold=True)
                    cell.fill = total_fill

            self._add_borders(ws, f"A1:{last_col}{total_row}")

        return self._apply(file_path, apply)

    def format_occurrence_export(self, file_path: PathLike) -> bool:
        """Style the Summary and Properties sheets of an occurrence export"""
        def apply(wb):
            summary = wb["Summary"]
            self._autofit(summary)
            self._style_header(summary, "A1:D1")
            self._add_borders(summary, f"A1:D{summary.max_row}")

            properties = wb["Properties"]
            self._autofit(properties)
            self._style_header(properties, "A1:D1")

        return self._apply(file_path, apply)

    def _apply(self, file_path: PathLike, callback: Callable) -> bool:
        """Open, style and save a workbook; the workbook is closed on every path"""
        if not self.available(file_path):
            logger.debug(f"Skipping formatting for {file_path}")
            return False

        wb = None
        try:
            wb = load_workbook(file_path)
            callback(wb)
            wb.save(file_path)
            return True
        except Exception as e:
            logger.warning(f"Could not apply Excel formatting: {e}")
            return False
        finally:
            if wb is not None:
                wb.close()

    def _autofit(self, ws: Worksheet) -> None:
        """Approximate Excel's AutoFit from the longest value in each column"""
        for col_idx, column in enumerate(ws.iter_cols(), 1):
            longest = max((len(str(cell.value)) for cell in column if cell.value is not None), default=0)
            width = min(max(longest + 2, self.MIN_COLUMN_WIDTH), self.MAX_COLUMN_WIDTH)
            ws.column_dimensions[get_column_letter(col_idx)].width = width

    def _style_header(self, ws: Worksheet, cell_range: str) -> None:
        header_fill = self._fill(self.COLORS["header"])
        for row in ws[cell_range]:
            for cell in row:
                cell.font = Font(bold=True)
                cell.fill = header_fill

    @staticmethod
    def _add_borders(ws: Worksheet, cell_range: str) -> None:
        thin_border = Border(
            left=Side(style='thin'),
            right=Side(style='thin'),
            top=Side(style='thin'),
            bottom=Side(style='thin')
        )
        for row in ws[cell_range]:
            for cell in row:
                cell.border = thin_border

    @staticmethod
    def _fill(color: str) -> PatternFill:
        return PatternFill(start_color=color, end_color=color, fill_type="solid")


def create_report_formatter(enabled: Optional[bool] = None) -> ReportFormatter:
    """Formatter honoring the configured formatting switch"""
    if enabled is None:
        enabled = get_config().reports.enable_formatting
    return ReportFormatter(enabled=enabled)
