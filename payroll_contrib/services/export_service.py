"""Excel export of result listings."""
from __future__ import annotations

import io
from datetime import datetime
from typing import Sequence

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter

from payroll_contrib.core.log import get_logger
from payroll_contrib.repositories.results_repository import ResultRow

LOGGER = get_logger(__name__)

XLSX_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

# (attribute, header, width, money column)
EXPORT_COLUMNS: tuple[tuple[str, str, int, bool], ...] = (
    ("employee_name", "Employee", 20, False),
    ("city_name", "City", 14, False),
    ("year", "Year", 8, False),
    ("avg_salary", "Average salary", 16, True),
    ("contribution_base", "Contribution base", 18, True),
    ("company_fee", "Company fee", 14, True),
)


class ExportService:
    """Render result rows as an ``.xlsx`` workbook."""

    sheet_title = "Results"

    def results_workbook(self, rows: Sequence[ResultRow]) -> bytes:
        workbook = Workbook()
        sheet = workbook.active
        sheet.title = self.sheet_title

        header_font = Font(bold=True)
        header_fill = PatternFill(start_color="E0E0E0", end_color="E0E0E0", fill_type="solid")
        for col_idx, (_, header, width, _) in enumerate(EXPORT_COLUMNS, start=1):
            cell = sheet.cell(row=1, column=col_idx, value=header)
            cell.font = header_font
            cell.fill = header_fill
            cell.alignment = Alignment(horizontal="center")
            sheet.column_dimensions[get_column_letter(col_idx)].width = width

        for row_idx, row in enumerate(rows, start=2):
            for col_idx, (attribute, _, _, money) in enumerate(EXPORT_COLUMNS, start=1):
                value = getattr(row, attribute)
                cell = sheet.cell(row=row_idx, column=col_idx, value=float(value) if money else value)
                if money:
                    cell.number_format = "#,##0.00"

        sheet.freeze_panes = "A2"

        output = io.BytesIO()
        workbook.save(output)
        LOGGER.info("Exported %d result rows to xlsx", len(rows))
        return output.getvalue()

    @staticmethod
    def filename(now: datetime | None = None) -> str:
        stamp = (now or datetime.now()).strftime("%Y%m%d_%H%M%S")
        return f"contribution_results_{stamp}.xlsx"
