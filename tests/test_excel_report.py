"""Tests for the Excel report writer."""

from datetime import date

import pytest
from openpyxl import load_workbook

from dropship_manager.engine.analyzer import aggregate
from dropship_manager.engine.settlement import settle_order
from dropship_manager.models.analytics import AggregationSpec
from dropship_manager.writers.excel_report import generate_report


@pytest.fixture
def report_inputs(records):
    spec = AggregationSpec(window_start=date(2025, 1, 1), window_end=date(2025, 1, 3))
    result = aggregate(spec, records)
    settled = [line for order in records["orders"] for line in settle_order(order)]
    return result, settled, records["orders"]


def test_report_sheets(tmp_path, report_inputs):
    path = generate_report(*report_inputs, tmp_path / "out" / "rapor.xlsx")

    wb = load_workbook(path)

    assert wb.sheetnames == ["OZET", "HESAPLASMA", "DURUMLAR"]
    assert wb["OZET"]["A1"].value == "Pazaryeri - Analiz Raporu"


def test_settlement_sheet_has_line_per_item_and_totals(tmp_path, report_inputs):
    _, settled, _ = report_inputs
    path = generate_report(*report_inputs, tmp_path / "rapor.xlsx")

    ws = load_workbook(path)["HESAPLASMA"]

    assert ws.cell(row=1, column=1).value == "Sipariş"
    assert ws.cell(row=2, column=1).value == "o-1"
    total_row = len(settled) + 2
    assert ws.cell(row=total_row, column=1).value == "TOPLAM"
    assert ws.cell(row=total_row, column=7).value == pytest.approx(490.0)
