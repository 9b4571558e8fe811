"""
Export functionality for approval items.
Supports JSON, CSV and Excel formats for review outside the queue.
"""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

import pandas as pd
from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

from .approval_workflow import ApprovalItem, ApprovalStatus

logger = logging.getLogger(__name__)

HEADER_FONT = Font(bold=True, color="FFFFFF")
HEADER_FILL = PatternFill(start_color="366092", end_color="366092", fill_type="solid")
THIN_BORDER = Border(
    left=Side(style='thin'),
    right=Side(style='thin'),
    top=Side(style='thin'),
    bottom=Side(style='thin')
)
STATUS_FILLS = {
    ApprovalStatus.APPROVED: PatternFill(start_color="C6EFCE", end_color="C6EFCE", fill_type="solid"),
    ApprovalStatus.REJECTED: PatternFill(start_color="FFC7CE", end_color="FFC7CE", fill_type="solid"),
    ApprovalStatus.PENDING: PatternFill(start_color="FFEB9C", end_color="FFEB9C", fill_type="solid"),
    ApprovalStatus.UNDER_REVIEW: PatternFill(start_color="DDEBF7", end_color="DDEBF7", fill_type="solid"),
}


class ApprovalExporter:
    """Export approval items to JSON, CSV and Excel."""

    def __init__(self, output_dir: Optional[Path] = None):
        """
        Initialize the exporter.

        Args:
            output_dir: Directory for export files
        """
        self.output_dir = Path(output_dir) if output_dir else Path("outputs/exports")
        self.output_dir.mkdir(parents=True, exist_ok=True)

    def export_to_json(self, items: List[ApprovalItem], filename: str, pretty: bool = True) -> Path:
        output_path = self.output_dir / f"{filename}.json"
        with open(output_path, 'w', encoding='utf-8') as f:
            json.dump(
                [item.to_dict() for item in items],
                f,
                indent=2 if pretty else None,
                ensure_ascii=False,
                default=str
            )
        logger.info(f"Exported to JSON: {output_path}")
        return output_path

    def export_to_csv(self, items: List[ApprovalItem], filename: str) -> Path:
        """One row per item, one column per mapped field."""
        output_path = self.output_dir / f"{filename}.csv"
        df = pd.DataFrame([self._flatten_item(item) for item in items])
        df.to_csv(output_path, index=False, encoding='utf-8')
        logger.info(f"Exported to CSV: {output_path}")
        return output_path

    def export_to_excel(self, items: List[ApprovalItem], filename: str) -> Path:
        """
        Export items to a formatted workbook.

        Sheets: Summary, Approval Items, Mapped Fields.
        """
        output_path = self.output_dir / f"{filename}.xlsx"

        wb = Workbook()
        if 'Sheet' in wb.sheetnames:
            wb.remove(wb['Sheet'])

        self._create_summary_sheet(wb, items)
        self._create_items_sheet(wb, items)
        self._create_fields_sheet(wb, items)

        wb.save(output_path)
        logger.info(f"Exported to Excel: {output_path}")
        return output_path

    def items_dataframe(self, items: List[ApprovalItem]) -> pd.DataFrame:
        return pd.DataFrame([self._flatten_item(item) for item in items])

    @staticmethod
    def _flatten_item(item: ApprovalItem) -> Dict[str, Any]:
        row = {
            'id': item.id,
            'document_id': item.document_id,
            'document_type': item.document_type,
            'form_id': item.form_id,
            'status': item.status.value,
            'priority': item.priority.value,
            'overall_confidence': round(item.overall_confidence, 4),
            'assigned_to': item.assigned_to,
            'reviewer': item.reviewer or '',
            'unmapped_fields': ', '.join(item.unmapped_fields),
            'created_at': item.created_at.isoformat(),
        }
        for mapped in item.mapped_fields:
            row[f"field_{mapped.field_id}"] = mapped.mapped_value
        return row

    def _create_summary_sheet(self, wb: Workbook, items: List[ApprovalItem]) -> None:
        ws = wb.create_sheet("Summary", 0)
        ws.cell(row=1, column=1, value="Approval Summary").font = Font(bold=True, size=14)

        ws.cell(row=3, column=1, value="Metric").font = Font(bold=True)
        ws.cell(row=3, column=2, value="Value").font = Font(bold=True)

        total = len(items)
        average = sum(i.overall_confidence for i in items) / total if total else 0.0
        metrics = [("Items", total)]
        metrics.extend(
            (status.value.replace('_', ' ').title(), sum(1 for i in items if i.status == status))
            for status in ApprovalStatus
        )
        metrics.extend([
            ("Average Confidence", f"{average:.2f}"),
            ("Export Date", datetime.now().strftime("%Y-%m-%d %H:%M:%S")),
        ])

        for offset, (metric, value) in enumerate(metrics):
            ws.cell(row=4 + offset, column=1, value=metric)
            ws.cell(row=4 + offset, column=2, value=value)

        ws.column_dimensions['A'].width = 25
        ws.column_dimensions['B'].width = 25

    def _create_items_sheet(self, wb: Workbook, items: List[ApprovalItem]) -> None:
        ws = wb.create_sheet("Approval Items")
        headers = ['ID', 'Document', 'Type', 'Form', 'Status', 'Priority',
                   'Confidence', 'Assigned To', 'Unmapped Fields']
        self._write_header(ws, headers)

        for row_idx, item in enumerate(items, 2):
            values = [
                item.id,
                item.document_id,
                item.document_type,
                item.form_id,
                item.status.value,
                item.priority.value,
                round(item.overall_confidence, 2),
                item.assigned_to,
                ', '.join(item.unmapped_fields),
            ]
            for col_idx, value in enumerate(values, 1):
                cell = ws.cell(row=row_idx, column=col_idx, value=value)
                cell.border = THIN_BORDER
            ws.cell(row=row_idx, column=5).fill = STATUS_FILLS[item.status]

        self._autofit(ws)

    def _create_fields_sheet(self, wb: Workbook, items: List[ApprovalItem]) -> None:
        ws = wb.create_sheet("Mapped Fields")
        headers = ['Item', 'Field', 'Value', 'Original', 'Confidence', 'Status', 'Source']
        self._write_header(ws, headers)

        row_idx = 2
        for item in items:
            for mapped in item.mapped_fields + item.suggested_mappings:
                values = [
                    item.id,
                    mapped.field_id,
                    mapped.mapped_value,
                    mapped.original_value,
                    round(mapped.confidence, 2),
                    mapped.status.value,
                    mapped.source.value,
                ]
                for col_idx, value in enumerate(values, 1):
                    cell = ws.cell(row=row_idx, column=col_idx, value=value)
                    cell.border = THIN_BORDER
                    cell.alignment = Alignment(wrap_text=True, vertical='top')
                row_idx += 1

        self._autofit(ws)

    @staticmethod
    def _write_header(ws, headers: List[str]) -> None:
        for col, header in enumerate(headers, 1):
            cell = ws.cell(row=1, column=col, value=header)
            cell.font = HEADER_FONT
            cell.fill = HEADER_FILL
            cell.border = THIN_BORDER
            cell.alignment = Alignment(horizontal='center')

    @staticmethod
    def _autofit(ws) -> None:
        for column in ws.columns:
            cells = list(column)
            max_length = max((len(str(c.value)) for c in cells if c.value is not None), default=0)
            ws.column_dimensions[get_column_letter(cells[0].column)].width = min(max_length + 2, 50)
