#!/usr/bin/env python3
"""
Tests for exporting the approval queue to JSON, CSV and Excel.
"""

import json

import pandas as pd
import pytest
from openpyxl import load_workbook

from legal_extraction.exporters import ApprovalExporter


@pytest.fixture
def queue(pipeline, french_decree, low_confidence_text):
    pipeline.process_text(french_decree)
    pipeline.process_text(low_confidence_text)
    return pipeline.approval_service.get_queue_items()


def test_export_to_json(tmp_path, queue):
    path = ApprovalExporter(tmp_path).export_to_json(queue, "queue")

    assert path == tmp_path / "queue.json"
    data = json.loads(path.read_text(encoding='utf-8'))
    assert [d['status'] for d in data] == ['approved', 'pending']
    assert data[0]['mapped_fields'][3]['mapped_value'] == "Ministère de la Justice"


def test_export_to_csv(tmp_path, queue):
    path = ApprovalExporter(tmp_path).export_to_csv(queue, "queue")

    df = pd.read_csv(path, dtype=str, keep_default_na=False)
    assert list(df['status']) == ['approved', 'pending']
    assert df.loc[0, 'field_document_number'] == "23-145"
    assert df.loc[1, 'field_document_number'] == ""
    assert df.loc[1, 'unmapped_fields'] == "document_type, document_number, date_emission, institution"


def test_items_dataframe(tmp_path, queue):
    df = ApprovalExporter(tmp_path).items_dataframe(queue)

    assert len(df) == 2
    assert {'id', 'document_id', 'form_id', 'overall_confidence', 'field_content'} <= set(df.columns)


def test_export_to_excel(tmp_path, queue):
    path = ApprovalExporter(tmp_path).export_to_excel(queue, "queue")

    wb = load_workbook(path)
    assert wb.sheetnames == ["Summary", "Approval Items", "Mapped Fields"]

    summary = {row[0]: row[1] for row in wb["Summary"].iter_rows(min_row=4, values_only=True)}
    assert summary["Items"] == 2
    assert summary["Approved"] == 1
    assert summary["Pending"] == 1

    items = wb["Approval Items"]
    assert items.cell(row=1, column=1).value == "ID"
    assert items.cell(row=1, column=1).font.bold
    assert items.cell(row=2, column=5).value == "approved"
    assert items.max_row == 3

    fields = wb["Mapped Fields"]
    # 5 fields for the decree, 1 for the low-confidence text
    assert fields.max_row == 1 + 5 + 1


def test_empty_export(tmp_path):
    exporter = ApprovalExporter(tmp_path / "exports")

    path = exporter.export_to_excel([], "vide")
    summary = {row[0]: row[1] for row in load_workbook(path)["Summary"].iter_rows(min_row=4, values_only=True)}
    assert summary["Items"] == 0
    assert summary["Average Confidence"] == "0.00"
