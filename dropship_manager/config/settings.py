"""
Proje ayarları ve sabit değerler.
"""
import os
from pathlib import Path

# ── Dizinler ──────────────────────────────────────────────
# Çalışma dizinine göre; kurulu paket dizini salt okunur olabilir
DATA_DIR = Path(os.environ.get("DROPSHIP_DATA_DIR", "data"))
MARKETPLACE_DATA_DIR = DATA_DIR / "marketplace"
REPORTS_DIR = Path("reports")
LOG_DIR = DATA_DIR / "logs"

# ── Platform Komisyon Oranları ────────────────────────────
DEFAULT_COMMISSION_RATE = 0.15     # vendor için ayar yoksa %15

PROCESSOR_FEE = {
    "percentage": 0.029,           # %2.9 ödeme işleme
    "fixed": 0.30,                 # sabit işlem ücreti ($)
}

# Para karşılaştırmalarında kabul edilen fark
MONEY_TOLERANCE = 1e-6

# ── Zaman Dilimi ──────────────────────────────────────────
# Gün/ay kovaları bu dilimde hesaplanır
DISPLAY_TIMEZONE = os.environ.get("DROPSHIP_DISPLAY_TZ", "UTC")

# ── Durum Görünen Adları ──────────────────────────────────
ORDER_STATUS_DISPLAY = {
    "pending": "Pending",
    "processing": "Processing",
    "shipped": "Shipped",
    "delivered": "Delivered",
    "cancelled": "Cancelled",
}

PAYOUT_STATUS_DISPLAY = {
    "pending": "Pending",
    "processing": "Processing",
    "completed": "Completed",
    "failed": "Failed",
    "cancelled": "Cancelled",
}

STATUS_COLORS = {
    "Delivered": "#10b981",
    "Shipped": "#6366f1",
    "Processing": "#06b6d4",
    "Pending": "#f59e0b",
    "Cancelled": "#ef4444",
    "Completed": "#10b981",
    "Failed": "#ef4444",
}
DEFAULT_STATUS_COLOR = "#6b7280"

USER_TYPE_COLORS = {
    "Customers": "#6366f1",
    "Vendors": "#06b6d4",
    "Suppliers": "#10b981",
}

# ── Analiz Ayarları ───────────────────────────────────────
DEFAULT_PERIOD_DAYS = 30
DEFAULT_TOP_N = 5

# ── Rapor Ayarları ────────────────────────────────────────
REPORT_DATE_FORMAT = "%d.%m.%Y"
EXCEL_DATE_FORMAT = "DD.MM.YYYY"
CURRENCY_SYMBOL = "$"
