"""
Excel pazaryeri raporu yazıcı.
3 sayfa: OZET, HESAPLASMA, DURUMLAR
"""
from __future__ import annotations

from datetime import date
from pathlib import Path

from openpyxl import Workbook
from openpyxl.chart import BarChart, LineChart, PieChart, Reference
from openpyxl.chart.label import DataLabelList
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

from dropship_manager.config.settings import REPORT_DATE_FORMAT
from dropship_manager.engine.analyzer import round_for_display
from dropship_manager.engine.settlement import summarize_settlement
from dropship_manager.engine.timeseries import format_bucket_label
from dropship_manager.models.analytics import AggregationResult, Metric
from dropship_manager.models.ledger import SettledLineItem

# ── Stil Sabitleri ────────────────────────────────────────
HEADER_FILL = PatternFill(start_color="2E86AB", end_color="2E86AB", fill_type="solid")
HEADER_FONT = Font(name="Calibri", bold=True, color="FFFFFF", size=11)
TITLE_FONT = Font(name="Calibri", bold=True, size=14, color="2E86AB")
SUBTITLE_FONT = Font(name="Calibri", bold=True, size=11, color="444444")
NORMAL_FONT = Font(name="Calibri", size=10)
MONEY_FORMAT = '#,##0.00 $'
PERCENT_FORMAT = '0.0%'
THIN_BORDER = Border(
    left=Side(style="thin", color="CCCCCC"),
    right=Side(style="thin", color="CCCCCC"),
    top=Side(style="thin", color="CCCCCC"),
    bottom=Side(style="thin", color="CCCCCC"),
)
TOTAL_FILL = PatternFill(start_color="E0E0E0", end_color="E0E0E0", fill_type="solid")
NEGATIVE_FILL = PatternFill(start_color="FFCDD2", end_color="FFCDD2", fill_type="solid")

# KPI kartları için renkler
KPI_FILLS = {
    "green": PatternFill(start_color="E8F5E9", end_color="E8F5E9", fill_type="solid"),
    "blue": PatternFill(start_color="E3F2FD", end_color="E3F2FD", fill_type="solid"),
    "orange": PatternFill(start_color="FFF3E0", end_color="FFF3E0", fill_type="solid"),
}


def _apply_header_row(ws, row: int, col_start: int, col_end: int):
    """Başlık satırına stil uygular."""
    for col in range(col_start, col_end + 1):
        cell = ws.cell(row=row, column=col)
        cell.font = HEADER_FONT
        cell.fill = HEADER_FILL
        cell.alignment = Alignment(horizontal="center", vertical="center")
        cell.border = THIN_BORDER


def _apply_data_row(ws, row: int, col_start: int, col_end: int):
    for col in range(col_start, col_end + 1):
        cell = ws.cell(row=row, column=col)
        cell.font = NORMAL_FONT
        cell.border = THIN_BORDER
        cell.alignment = Alignment(vertical="center")


def _write_headers(ws, row: int, headers: list[str]):
    for i, h in enumerate(headers, 1):
        ws.cell(row=row, column=i, value=h)
    _apply_header_row(ws, row, 1, len(headers))


def _auto_width(ws, min_width: int = 10, max_width: int = 40):
    """Sütun genişliklerini otomatik ayarlar."""
    for col_cells in ws.columns:
        max_len = min_width
        col_letter = get_column_letter(col_cells[0].column)
        for cell in col_cells:
            if cell.value:
                cell_len = len(str(cell.value))
                if cell_len > max_len:
                    max_len = min(cell_len + 2, max_width)
        ws.column_dimensions[col_letter].width = max_len


def generate_report(
    result: AggregationResult,
    settled: list[SettledLineItem],
    orders: list,
    output_path: Path,
    title: str = "Pazaryeri",
) -> Path:
    """
    Excel raporu oluşturur.

    Returns: oluşturulan dosya yolu
    """
    wb = Workbook()

    _write_summary_sheet(wb, result, title)
    _write_settlement_sheet(wb, settled, orders)
    _write_status_sheet(wb, result)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    wb.save(output_path)
    return output_path


# ══════════════════════════════════════════════════════════
#  SAYFA 1: ÖZET
# ══════════════════════════════════════════════════════════
def _write_summary_sheet(wb, result: AggregationResult, title: str):
    ws = wb.active
    ws.title = "OZET"
    ws.sheet_properties.tabColor = "2E86AB"

    spec = result.spec
    stats = round_for_display(result.stats)

    ws.merge_cells("A1:F1")
    ws["A1"] = f"{title} - Analiz Raporu"
    ws["A1"].font = TITLE_FONT
    ws["A1"].alignment = Alignment(horizontal="center")

    ws.merge_cells("A2:F2")
    ws["A2"] = (
        f"Rapor Tarihi: {date.today().strftime(REPORT_DATE_FORMAT)} | "
        f"Dönem: {spec.window_start.strftime(REPORT_DATE_FORMAT)} - "
        f"{spec.window_end.strftime(REPORT_DATE_FORMAT)}"
    )
    ws["A2"].font = SUBTITLE_FONT
    ws["A2"].alignment = Alignment(horizontal="center")

    # ── KPI Kartları ──
    row = 4
    kpis = [
        ("Toplam Sipariş", stats.total_orders, stats.orders_change, "green", None),
        ("Ciro", stats.total_revenue, stats.revenue_change, "blue", MONEY_FORMAT),
        ("Ort. Sipariş Değeri", stats.avg_order_value, stats.avg_change, "orange", MONEY_FORMAT),
        ("Yeni Kullanıcı", stats.new_users, None, "green", None),
        ("Aktif Vendor", stats.active_vendors, None, "blue", None),
        ("Aktif Tedarikçi", stats.active_suppliers, None, "orange", None),
        ("Ödemeler", stats.total_payouts, None, "green", MONEY_FORMAT),
    ]
    _write_headers(ws, row, ["Metrik", "Bu Dönem", "Değişim"])

    for metric_name, value, change, color, fmt in kpis:
        row += 1
        ws.cell(row=row, column=1, value=metric_name)
        ws.cell(row=row, column=1).font = Font(name="Calibri", bold=True, size=10)
        cell_value = ws.cell(row=row, column=2, value=value)
        if fmt:
            cell_value.number_format = fmt

        if change is None:
            ws.cell(row=row, column=3, value="-")
        else:
            cell_change = ws.cell(row=row, column=3, value=change / 100)
            cell_change.number_format = PERCENT_FORMAT
            if change > 0:
                cell_change.font = Font(name="Calibri", color="2E7D32", bold=True)
            elif change < 0:
                cell_change.font = Font(name="Calibri", color="C62828", bold=True)

        for col in range(1, 4):
            ws.cell(row=row, column=col).fill = KPI_FILLS[color]
            ws.cell(row=row, column=col).border = THIN_BORDER

    # ── Sıralamalar ──
    value_header = "Sipariş" if spec.metric == Metric.ORDER_COUNT else "Gelir"
    for heading, ranking in (
        ("En İyi Vendorlar", result.top_vendors),
        ("En İyi Tedarikçiler", result.top_suppliers),
        ("En Çok Satan Ürünler", result.top_products),
    ):
        row += 2
        ws.cell(row=row, column=1, value=heading)
        ws.cell(row=row, column=1).font = SUBTITLE_FONT
        row += 1
        _write_headers(ws, row, ["#", "Ad", value_header])
        for rank, entry in enumerate(ranking, 1):
            row += 1
            ws.cell(row=row, column=1, value=rank)
            ws.cell(row=row, column=2, value=entry.name[:50])
            cell = ws.cell(row=row, column=3, value=entry.value)
            if spec.metric == Metric.REVENUE:
                cell.number_format = MONEY_FORMAT
            _apply_data_row(ws, row, 1, 3)

    # ── Trend Grafiği ──
    row += 2
    ws.cell(row=row, column=1, value="Gelir ve Sipariş Trendi")
    ws.cell(row=row, column=1).font = SUBTITLE_FONT

    row += 1
    chart_start_row = row
    _write_headers(ws, row, ["Dönem", "Gelir ($)", "Sipariş"])
    for rev, vol in zip(result.revenue_trend, result.order_volume_trend):
        row += 1
        ws.cell(row=row, column=1, value=format_bucket_label(rev.key))
        ws.cell(row=row, column=2, value=rev.value)
        ws.cell(row=row, column=2).number_format = MONEY_FORMAT
        ws.cell(row=row, column=3, value=vol.value)
        _apply_data_row(ws, row, 1, 3)

    if row > chart_start_row:
        chart = LineChart()
        chart.title = "Gelir Trendi"
        chart.style = 10
        chart.y_axis.title = "Gelir ($)"
        chart.x_axis.title = "Dönem"
        chart.width = 25
        chart.height = 12

        data_ref = Reference(ws, min_col=2, min_row=chart_start_row, max_row=row)
        cats_ref = Reference(ws, min_col=1, min_row=chart_start_row + 1, max_row=row)
        chart.add_data(data_ref, titles_from_data=True)
        chart.set_categories(cats_ref)
        chart.series[0].graphicalProperties.line.width = 25000

        ws.add_chart(chart, f"E{chart_start_row}")

    _auto_width(ws)


# ══════════════════════════════════════════════════════════
#  SAYFA 2: HESAPLAŞMA DEFTERİ
# ══════════════════════════════════════════════════════════
def _write_settlement_sheet(wb, settled: list[SettledLineItem], orders: list):
    ws = wb.create_sheet("HESAPLASMA")
    ws.sheet_properties.tabColor = "4CAF50"

    headers = [
        "Sipariş", "Tarih", "Vendor", "Ürün", "Tedarikçi", "Adet",
        "Perakende", "Tedarikçi Fiyatı", "Komisyon %", "Platform Ücreti",
        "İşlem Ücreti", "Vendor Ücret Payı", "Tedarikçi Ücret Payı",
        "Vendor Net", "Tedarikçi Net",
    ]
    _write_headers(ws, 1, headers)

    order_dates = {o.order_id: o.created_at for o in orders}

    row_idx = 1
    for line in settled:
        row_idx += 1
        created = order_dates.get(line.order_id)
        values = [
            line.order_id,
            created.strftime("%d.%m.%Y %H:%M") if created else "-",
            line.vendor_id,
            line.product_id,
            line.supplier_id or "-",
            line.quantity,
            line.retail_total,
            line.supplier_price_total,
            line.commission_rate,
            line.platform_fee_total,
            line.processor_fee_total,
            line.processor_fee_vendor_total,
            line.processor_fee_supplier_total,
            line.vendor_profit_total,
            line.supplier_net_total,
        ]
        for col, val in enumerate(values, 1):
            cell = ws.cell(row=row_idx, column=col, value=val)
            cell.font = NORMAL_FONT
            cell.border = THIN_BORDER

        for col in [7, 8, 10, 11, 12, 13, 14, 15]:
            ws.cell(row=row_idx, column=col).number_format = MONEY_FORMAT
        ws.cell(row=row_idx, column=9).number_format = PERCENT_FORMAT

        # Negatif vendor kârı görünür olsun
        if line.vendor_profit < 0:
            ws.cell(row=row_idx, column=14).fill = NEGATIVE_FILL

    # Toplam satırı
    totals = summarize_settlement(settled)
    total_row = row_idx + 1
    ws.cell(row=total_row, column=1, value="TOPLAM")
    ws.cell(row=total_row, column=6, value=sum(s.quantity for s in settled))
    for col, key in ((7, "retail"), (10, "platform_fee"), (11, "processor_fee"),
                     (14, "vendor_profit"), (15, "supplier_net")):
        ws.cell(row=total_row, column=col, value=totals[key])
        ws.cell(row=total_row, column=col).number_format = MONEY_FORMAT

    for col in range(1, len(headers) + 1):
        cell = ws.cell(row=total_row, column=col)
        cell.font = Font(name="Calibri", bold=True)
        cell.border = THIN_BORDER
        cell.fill = TOTAL_FILL

    if settled:
        ws.auto_filter.ref = f"A1:{get_column_letter(len(headers))}{total_row - 1}"
    ws.freeze_panes = "A2"
    _auto_width(ws)


# ══════════════════════════════════════════════════════════
#  SAYFA 3: DURUM DAĞILIMLARI
# ══════════════════════════════════════════════════════════
def _write_status_sheet(wb, result: AggregationResult):
    ws = wb.create_sheet("DURUMLAR")
    ws.sheet_properties.tabColor = "9C27B0"

    row = 1
    charts_at = []
    for heading, distribution in (
        ("Sipariş Durumları", result.order_status),
        ("Ödeme Durumları", result.payout_status),
        ("Kullanıcı Tipleri", result.user_type),
    ):
        ws.cell(row=row, column=1, value=heading)
        ws.cell(row=row, column=1).font = SUBTITLE_FONT
        row += 1
        header_row = row
        _write_headers(ws, row, ["Durum", "Adet", "Pay %"])

        total = sum(entry.value for entry in distribution)
        for entry in distribution:
            row += 1
            ws.cell(row=row, column=1, value=entry.name)
            ws.cell(row=row, column=2, value=entry.value)
            ws.cell(row=row, column=3, value=entry.value / total if total > 0 else 0)
            ws.cell(row=row, column=3).number_format = PERCENT_FORMAT
            _apply_data_row(ws, row, 1, 3)

        if len(distribution) > 1:
            charts_at.append((heading, header_row, row))
        row += 2

    anchor_row = 1
    for heading, header_row, last_row in charts_at:
        chart = PieChart()
        chart.title = heading
        chart.width = 14
        chart.height = 9

        data_ref = Reference(ws, min_col=2, min_row=header_row, max_row=last_row)
        cats_ref = Reference(ws, min_col=1, min_row=header_row + 1, max_row=last_row)
        chart.add_data(data_ref, titles_from_data=True)
        chart.set_categories(cats_ref)

        chart.dataLabels = DataLabelList()
        chart.dataLabels.showPercent = True
        chart.dataLabels.showVal = False

        ws.add_chart(chart, f"E{anchor_row}")
        anchor_row += 18

    # Kullanıcı kayıt trendi
    if result.user_registration:
        row += 1
        ws.cell(row=row, column=1, value="Kullanıcı Kayıtları")
        ws.cell(row=row, column=1).font = SUBTITLE_FONT
        row += 1
        reg_header = row
        _write_headers(ws, row, ["Dönem", "Yeni Kullanıcı"])
        for point in result.user_registration:
            row += 1
            ws.cell(row=row, column=1, value=format_bucket_label(point.key))
            ws.cell(row=row, column=2, value=point.value)
            _apply_data_row(ws, row, 1, 2)

        chart = BarChart()
        chart.type = "col"
        chart.title = "Kullanıcı Kayıtları"
        chart.width = 20
        chart.height = 10
        data_ref = Reference(ws, min_col=2, min_row=reg_header, max_row=row)
        cats_ref = Reference(ws, min_col=1, min_row=reg_header + 1, max_row=row)
        chart.add_data(data_ref, titles_from_data=True)
        chart.set_categories(cats_ref)
        ws.add_chart(chart, f"E{anchor_row}")

    _auto_width(ws)
