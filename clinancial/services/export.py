"""
Export service for ledger data.

Provides functionality to export the registers of a date period to XLSX and
CSV formats.
"""

import csv
import io
from datetime import datetime
from enum import Enum
from typing import cast

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from clinancial.config import MAX_EXPORT_ENTRIES
from clinancial.errors import ValidationError
from clinancial.models import FinancialRegister

from .ledger import LedgerService

HEADERS = ["ID", "Date", "Time", "Name", "Value", "From", "To"]


class ExportFormat(str, Enum):
    """Supported export formats."""

    CSV = "csv"
    XLSX = "xlsx"


class ExportService:
    """Service for exporting registers to various formats."""

    def __init__(self, ledger: LedgerService):
        """
        Initialize the export service.

        Args:
            ledger: Ledger service the registers are read from
        """
        self.ledger = ledger

    def export(self, format: ExportFormat, start: datetime, end: datetime) -> io.BytesIO:
        """Export registers strictly between ``start`` and ``end`` in ``format``."""
        if format == ExportFormat.CSV:
            return self.export_to_csv(start, end)
        return self.export_to_xlsx(start, end)

    def export_to_csv(self, start: datetime, end: datetime) -> io.BytesIO:
        """
        Export registers to CSV format.

        Args:
            start: Exclusive start of the period
            end: Exclusive end of the period

        Returns:
            BytesIO buffer containing the CSV data
        """
        registers = self._get_registers(start, end)

        buffer = io.BytesIO()
        text_buffer = io.StringIO()

        writer = csv.writer(text_buffer)
        writer.writerow(HEADERS)

        for register in registers:
            writer.writerow(self._row(register))

        buffer.write(text_buffer.getvalue().encode("utf-8-sig"))  # BOM for Excel
        buffer.seek(0)

        return buffer

    def export_to_xlsx(self, start: datetime, end: datetime) -> io.BytesIO:
        """
        Export registers to XLSX format with formatting.

        Args:
            start: Exclusive start of the period
            end: Exclusive end of the period

        Returns:
            BytesIO buffer containing the XLSX data
        """
        registers = self._get_registers(start, end)

        wb = Workbook()
        ws = cast(Worksheet, wb.active)
        ws.title = "Registers"

        header_font = Font(bold=True, color="FFFFFF")
        header_fill = PatternFill(
            start_color="4472C4", end_color="4472C4", fill_type="solid"
        )
        income_fill = PatternFill(
            start_color="C6EFCE", end_color="C6EFCE", fill_type="solid"
        )
        expense_fill = PatternFill(
            start_color="FFC7CE", end_color="FFC7CE", fill_type="solid"
        )

        for col, header in enumerate(HEADERS, 1):
            cell = ws.cell(row=1, column=col, value=header)
            cell.font = header_font
            cell.fill = header_fill
            cell.alignment = Alignment(horizontal="center")

        for row_idx, register in enumerate(registers, 2):
            for col, value in enumerate(self._row(register), 1):
                ws.cell(row=row_idx, column=col, value=value)

            # Money entering or leaving the tracked accounts
            if register.from_account is None:
                fill = income_fill
            elif register.to_account is None:
                fill = expense_fill
            else:
                fill = None

            if fill:
                for col in range(1, len(HEADERS) + 1):
                    ws.cell(row=row_idx, column=col).fill = fill

            ws.cell(row=row_idx, column=5).number_format = "#,##0.00"

        column_widths = [8, 12, 10, 30, 15, 20, 20]
        for col, width in enumerate(column_widths, 1):
            ws.column_dimensions[get_column_letter(col)].width = width

        ws.freeze_panes = "A2"

        self._add_summary_sheet(wb, registers, start, end)

        buffer = io.BytesIO()
        wb.save(buffer)
        buffer.seek(0)

        return buffer

    def _add_summary_sheet(
        self,
        wb: Workbook,
        registers: list[FinancialRegister],
        start: datetime,
        end: datetime,
    ):
        """Add a per-account summary sheet to the workbook."""
        ws = wb.create_sheet(title="Summary")

        header_font = Font(bold=True)
        title_font = Font(bold=True, size=14)

        ws.cell(row=1, column=1, value="Register Summary").font = title_font
        ws.cell(
            row=2,
            column=1,
            value=f"Period: {start.strftime('%Y-%m-%d')} to {end.strftime('%Y-%m-%d')}",
        )
        ws.cell(
            row=3,
            column=1,
            value=f"Generated: {datetime.now().strftime('%Y-%m-%d %H:%M')}",
        )

        totals: dict[str, list[float]] = {}
        for register in registers:
            if register.to_account:
                totals.setdefault(register.to_account.name, [0.0, 0.0])[0] += register.value
            if register.from_account:
                totals.setdefault(register.from_account.name, [0.0, 0.0])[1] += register.value

        summary_start = 5
        for col, header in enumerate(["Account", "Received", "Sent", "Net"], 1):
            ws.cell(row=summary_start, column=col, value=header).font = header_font

        for row, (name, (received, sent)) in enumerate(sorted(totals.items()), summary_start + 1):
            ws.cell(row=row, column=1, value=name)
            ws.cell(row=row, column=2, value=received)
            ws.cell(row=row, column=3, value=sent)
            ws.cell(row=row, column=4, value=received - sent)
            for col in range(2, 5):
                ws.cell(row=row, column=col).number_format = "#,##0.00"

        ws.column_dimensions["A"].width = 20
        for letter in ("B", "C", "D"):
            ws.column_dimensions[letter].width = 15

    def _row(self, register: FinancialRegister) -> list:
        return [
            register.id,
            register.time.strftime("%Y-%m-%d"),
            register.time.strftime("%H:%M:%S"),
            register.name,
            register.value,
            register.from_account.name if register.from_account else "",
            register.to_account.name if register.to_account else "",
        ]

    def _get_registers(self, start: datetime, end: datetime) -> list[FinancialRegister]:
        registers = self.ledger.get_registers_by_date_period(start, end)
        if len(registers) > MAX_EXPORT_ENTRIES:
            raise ValidationError(
                f"{len(registers)} registers in period, export limit is {MAX_EXPORT_ENTRIES}"
            )
        return registers

    def get_filename(
        self,
        format: ExportFormat,
        start: datetime,
        end: datetime,
    ) -> str:
        """
        Generate a filename for the export.

        Args:
            format: Export format
            start: Start of the exported period
            end: End of the exported period

        Returns:
            Suggested filename
        """
        date_str = datetime.now().strftime("%Y%m%d")
        date_range = f"_{start.strftime('%Y%m%d')}-{end.strftime('%Y%m%d')}"
        return f"clinancial_{date_str}{date_range}.{format.value}"
