"""
Test için örnek pazaryeri CSV dosyaları oluşturur (kullanıcılar, siparişler, ödemeler).
"""
import csv
import random
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Optional

from dropship_manager.config.settings import MARKETPLACE_DATA_DIR
from dropship_manager.parsers.marketplace_csv import ORDER_HEADERS, PAYOUT_HEADERS, USER_HEADERS

# ── Örnek katılımcılar ────────────────────────────────────

VENDORS = [
    ("v-001", "Ayla Demir", "Urban Nest Home", ""),
    ("v-002", "Kerem Yilmaz", "Trail & Peak Outfitters", "0.12"),
    ("v-003", "Sofia Russo", "Glow Theory Beauty", ""),
    ("v-004", "Marcus Lee", "Pixel Desk Supply", "0.18"),
]

SUPPLIERS = [
    ("s-001", "Han Wei", "Shenzhen Bright Electronics"),
    ("s-002", "Elif Kaya", "Anatolia Textile Co."),
    ("s-003", "Diego Alvarez", "Pacific Home Goods"),
]

# (ürün id, ad, perakende fiyat, tedarikçi id, tedarikçi maliyeti)
PRODUCTS = [
    ("p-1001", "LED Desk Lamp with USB Charging", 32.50, "s-001", 14.20),
    ("p-1002", "Portable Phone Charger 10000mAh", 27.50, "s-001", 11.80),
    ("p-1003", "Wireless Earbuds Pro", 59.00, "s-001", 24.00),
    ("p-2001", "Organic Cotton Tote Bag - 5 Pack", 22.00, "s-002", 8.50),
    ("p-2002", "Linen Throw Blanket", 48.00, "s-002", 21.00),
    ("p-3001", "Bamboo Cutting Board Set (3 Pack)", 28.99, "s-003", 12.40),
    ("p-3002", "Ceramic Coffee Mug - Handmade", 18.00, "s-003", 6.75),
    ("p-9001", "Custom Pet Portrait Digital", 35.00, None, 0.0),
    ("p-9002", "Handmade Soy Candle", 16.50, None, 0.0),
]

ORDER_STATUSES = ["pending", "processing", "shipped", "delivered", "delivered", "delivered", "cancelled"]
FIRST_NAMES = ["Emma", "James", "Sarah", "Michael", "Lisa", "David", "Anna", "John", "Maria", "Robert"]
LAST_NAMES = ["Smith", "Johnson", "Williams", "Brown", "Jones", "Miller", "Davis", "Wilson", "Taylor", "Clark"]


def random_date(days_back: int = 90) -> datetime:
    start = datetime.now(timezone.utc) - timedelta(days=days_back)
    return start + timedelta(
        days=random.randint(0, days_back),
        hours=random.randint(0, 23),
        minutes=random.randint(0, 59),
    )


def random_name() -> str:
    return f"{random.choice(FIRST_NAMES)} {random.choice(LAST_NAMES)}"


def _write_csv(filepath: Path, headers: list[str], rows: list[dict]) -> None:
    with open(filepath, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=headers)
        writer.writeheader()
        writer.writerows(rows)


def generate_users(out_dir: Path, customers: int = 40) -> list[str]:
    """Kullanıcı CSV'si oluşturur; müşteri id'lerini döndürür."""
    rows = [{
        "user_id": "a-001", "name": "Platform Admin", "role": "admin",
        "created_at": random_date(180).isoformat(), "email": "admin@example.com",
        "business_name": "", "commission_rate": "",
    }]
    for uid, name, business, rate in VENDORS:
        rows.append({
            "user_id": uid, "name": name, "role": "vendor",
            "created_at": random_date(180).isoformat(),
            "email": f"{uid}@example.com", "business_name": business,
            "commission_rate": rate,
        })
    for uid, name, business in SUPPLIERS:
        rows.append({
            "user_id": uid, "name": name, "role": "supplier",
            "created_at": random_date(180).isoformat(),
            "email": f"{uid}@example.com", "business_name": business,
            "commission_rate": "",
        })

    customer_ids = []
    for i in range(customers):
        uid = f"c-{i + 1:03d}"
        customer_ids.append(uid)
        rows.append({
            "user_id": uid, "name": random_name(), "role": "customer",
            "created_at": random_date(90).isoformat(),
            "email": f"{uid}@example.com", "business_name": "",
            "commission_rate": "",
        })

    filepath = out_dir / "users.csv"
    _write_csv(filepath, USER_HEADERS, rows)
    print(f"  Kullanicilar: {filepath} ({len(rows)} kullanici)")
    return customer_ids


def generate_orders(out_dir: Path, customer_ids: list[str], count: int = 150) -> None:
    """Sipariş CSV'si oluşturur (kalem başına bir satır)."""
    rows = []
    for i in range(count):
        vendor = random.choice(VENDORS)
        date = random_date()
        order_id = f"o-{10000 + i}"
        shipping = random.choice([0, 0, 3.99, 5.99])
        status = random.choice(ORDER_STATUSES)
        payment = "refunded" if status == "cancelled" else random.choice(["paid", "paid", "paid", "pending"])

        line_count = random.choices([1, 2, 3], weights=[65, 25, 10])[0]
        for n, product in enumerate(random.sample(PRODUCTS, line_count), 1):
            qty = random.choices([1, 2, 3], weights=[70, 20, 10])[0]
            rows.append({
                "order_id": order_id,
                "order_number": f"ORD-{date.strftime('%Y%m%d')}-{i:05d}",
                "created_at": date.isoformat(),
                "store_id": f"st-{vendor[0][2:]}",
                "vendor_id": vendor[0],
                "customer_id": random.choice(customer_ids),
                "status": status,
                "payment_status": payment,
                "shipping": f"{shipping:.2f}",
                "tax": f"{product[2] * qty * 0.08:.2f}" if n == 1 else "0.00",
                "line_id": f"{order_id}-{n}",
                "product_id": product[0],
                "product_name": product[1],
                "quantity": str(qty),
                "price": f"{product[2]:.2f}",
                "supplier_id": product[3] or "",
                "supplier_cost": f"{product[4]:.2f}",
            })

    filepath = out_dir / "orders.csv"
    _write_csv(filepath, ORDER_HEADERS, rows)
    print(f"  Siparisler:   {filepath} ({count} siparis, {len(rows)} kalem)")


def generate_payouts(out_dir: Path, count: int = 12) -> None:
    """Ödeme CSV'si oluşturur. Tutarlar küçük tutulur ki bakiyeyi aşmasın."""
    recipients = [v[0] for v in VENDORS] + [s[0] for s in SUPPLIERS]
    rows = []
    for i in range(count):
        created = random_date(60)
        status = random.choice(["completed", "completed", "processing", "pending", "failed"])
        amount = round(random.uniform(10, 60), 2)
        rows.append({
            "payout_id": f"po-{i + 1:04d}",
            "user_id": random.choice(recipients),
            "amount": f"{amount:.2f}",
            "method": random.choice(["bank_transfer", "stripe_connect"]),
            "status": status,
            "created_at": created.isoformat(),
            "processed_at": (created + timedelta(days=2)).isoformat() if status == "completed" else "",
            "net_amount": "",
        })

    filepath = out_dir / "payouts.csv"
    _write_csv(filepath, PAYOUT_HEADERS, rows)
    print(f"  Odemeler:     {filepath} ({count} odeme)")


def main(out_dir: Optional[Path] = None, seed: Optional[int] = None):
    if seed is not None:
        random.seed(seed)
    out_dir = out_dir or MARKETPLACE_DATA_DIR
    out_dir.mkdir(parents=True, exist_ok=True)

    print("Ornek veri olusturuluyor...\n")
    customer_ids = generate_users(out_dir)
    generate_orders(out_dir, customer_ids)
    generate_payouts(out_dir)
    print(f"\nTamamlandi! '{out_dir}' klasorunu kontrol edin.")


if __name__ == "__main__":
    main()
