"""
dropship_manager CLI - Pazaryeri hesaplaşma ve analiz sistemi.

Kullanım:
    python -m dropship_manager sample     → Örnek veri oluştur
    python -m dropship_manager settle     → Siparişleri hesaplaş, ödeme bakiyelerini göster
    python -m dropship_manager analyze    → Dönem analizini göster
    python -m dropship_manager report     → Excel rapor oluştur
"""
from __future__ import annotations

import argparse
import sys
from datetime import date, datetime, timedelta
from pathlib import Path


def _window(args) -> tuple[date, date]:
    from dropship_manager.engine.timeseries import local_date

    end = date.fromisoformat(args.date_to) if args.date_to else local_date(datetime.now().astimezone())
    if args.date_from:
        start = date.fromisoformat(args.date_from)
    else:
        start = end - timedelta(days=args.days - 1)
    return start, end


def _load(args) -> dict[str, list]:
    from dropship_manager.parsers.marketplace_csv import load_marketplace

    data_dir = Path(args.data_dir)
    records = load_marketplace(data_dir)
    if not any(records.values()):
        print("\n  Veri bulunamadi!")
        print("  Once 'python -m dropship_manager sample' ile ornek veri olusturun.")
        print(f"  Veya CSV dosyalarinizi su klasore koyun: {data_dir}")
    return records


def _resolver(args, users):
    from dropship_manager.engine.fees import commission_resolver_from_users, make_commission_resolver

    if args.commission is not None:
        return make_commission_resolver(default=args.commission)
    return commission_resolver_from_users(users)


def settle_all(orders, users, resolver):
    from dropship_manager.engine.settlement import settle_order

    settled = []
    for order in orders:
        settled.extend(settle_order(order, None, resolver))
    return settled


def cmd_sample(args):
    """Örnek veri oluşturur."""
    from dropship_manager.scripts.generate_sample import main as generate
    generate(Path(args.data_dir), seed=args.seed)


def cmd_settle(args):
    """Siparişleri hesaplaşır, vendor/tedarikçi bakiyelerini gösterir."""
    from dropship_manager.engine.payouts import payable_summary, unpaid_balance
    from dropship_manager.engine.settlement import summarize_settlement
    from dropship_manager.models.user import UserRole

    records = _load(args)
    orders, users, payouts = records["orders"], records["users"], records["payouts"]
    if not orders:
        return

    settled = settle_all(orders, users, _resolver(args, users))
    paid_ids = {o.order_id for o in orders if o.is_paid}
    totals = summarize_settlement(settled)

    print(f"\n{'='*60}")
    print(f"  HESAPLASMA OZETI ({len(orders)} siparis, {len(settled)} kalem)")
    print(f"{'='*60}")
    print(f"  Perakende:       ${totals['retail']:,.2f}")
    print(f"  Platform ucreti: ${totals['platform_fee']:,.2f}")
    print(f"  Islem ucreti:    ${totals['processor_fee']:,.2f}")
    print(f"  Vendor net:      ${totals['vendor_profit']:,.2f}")
    print(f"  Tedarikci net:   ${totals['supplier_net']:,.2f}")

    print(f"\n{'─'*60}")
    print(f"  ODEME BAKIYELERI (odenmis siparisler)")
    print(f"{'─'*60}")
    for user in users:
        if user.role not in (UserRole.VENDOR, UserRole.SUPPLIER):
            continue
        summary = payable_summary(user, settled, paid_ids)
        balance = unpaid_balance(user, settled, payouts, paid_ids)
        flag = "  ⚠ negatif" if summary.net_amount < 0 else ""
        print(f"  {user.display_name[:28]:28s} {user.role.value:9s} "
              f"net ${summary.net_amount:>10,.2f}  kalan ${balance:>10,.2f}{flag}")
    print()


def cmd_analyze(args):
    """Dönem analizini ekrana yazdırır."""
    from dropship_manager.engine.analyzer import aggregate, round_for_display
    from dropship_manager.engine.timeseries import format_bucket_label
    from dropship_manager.models.analytics import AggregationSpec

    records = _load(args)
    if not any(records.values()):
        return

    start, end = _window(args)
    spec = AggregationSpec(
        window_start=start, window_end=end,
        bucket_unit=args.bucket, top_n=args.top, metric=args.metric,
    )
    result = aggregate(spec, records)
    stats = round_for_display(result.stats)

    print(f"\n{'='*60}")
    print(f"  PAZARYERI ANALIZ RAPORU  {start} - {end}")
    print(f"{'='*60}\n")
    print(f"  Siparis:      {stats.total_orders} ({stats.orders_change:+.1f}%)")
    print(f"  Ciro:         ${stats.total_revenue:,.2f} ({stats.revenue_change:+.1f}%)")
    print(f"  Ort. Siparis: ${stats.avg_order_value:,.2f} ({stats.avg_change:+.1f}%)")
    print(f"  Kullanici:    {stats.total_users} (yeni: {stats.new_users})")
    print(f"  Aktif vendor: {stats.active_vendors}  Aktif tedarikci: {stats.active_suppliers}")
    print(f"  Odemeler:     ${stats.total_payouts:,.2f}")

    print(f"\n  Trend ({result.spec.metric.value}, {result.spec.bucket_unit.value}):")
    for point in result.trend():
        print(f"    {format_bucket_label(point.key):10s} {point.value:>12,.2f}")

    print(f"\n  Siparis Durumlari:")
    for entry in result.order_status:
        print(f"    {entry.name}: {entry.value}")

    for title, ranking in (
        ("En Iyi Vendorlar", result.top_vendors),
        ("En Iyi Tedarikciler", result.top_suppliers),
        ("En Cok Satan Urunler", result.top_products),
    ):
        if ranking:
            print(f"\n  {title}:")
            for i, entry in enumerate(ranking, 1):
                print(f"    {i}. {entry.name[:40]:40s} {entry.value:>12,.2f}")
    print()


def cmd_report(args):
    """Excel rapor oluşturur."""
    from dropship_manager.config.settings import REPORTS_DIR
    from dropship_manager.engine.analyzer import aggregate
    from dropship_manager.models.analytics import AggregationSpec
    from dropship_manager.writers.excel_report import generate_report

    records = _load(args)
    if not records["orders"]:
        return

    start, end = _window(args)
    spec = AggregationSpec(
        window_start=start, window_end=end,
        bucket_unit=args.bucket, top_n=args.top, metric=args.metric,
    )
    result = aggregate(spec, records)
    settled = settle_all(records["orders"], records["users"], _resolver(args, records["users"]))

    output = Path(args.output) if args.output else REPORTS_DIR / f"pazaryeri_raporu_{end.isoformat()}.xlsx"
    path = generate_report(result, settled, records["orders"], output)
    print(f"  Rapor olusturuldu: {path}")


def main(argv=None):
    from dropship_manager.config.settings import DEFAULT_PERIOD_DAYS, DEFAULT_TOP_N, MARKETPLACE_DATA_DIR
    from dropship_manager.engine.errors import DropshipError
    from dropship_manager.utils.logger import setup_logger

    parser = argparse.ArgumentParser(
        prog="dropship_manager",
        description="Dropshipping Pazaryeri Hesaplasma ve Analiz Sistemi",
    )
    parser.add_argument("--data-dir", default=str(MARKETPLACE_DATA_DIR), help="CSV klasoru")
    sub = parser.add_subparsers(dest="command", help="Komutlar")

    sample = sub.add_parser("sample", help="Ornek veri olustur")
    sample.add_argument("--seed", type=int, default=None)

    settle = sub.add_parser("settle", help="Siparisleri hesaplas")
    settle.add_argument("--commission", type=float, default=None, help="Tum vendorlar icin oran (0.15)")

    for name, help_text in (("analyze", "Verileri analiz et"), ("report", "Excel rapor olustur")):
        p = sub.add_parser(name, help=help_text)
        p.add_argument("--from", dest="date_from", default=None, help="YYYY-MM-DD")
        p.add_argument("--to", dest="date_to", default=None, help="YYYY-MM-DD")
        p.add_argument("--days", type=int, default=DEFAULT_PERIOD_DAYS)
        p.add_argument("--bucket", choices=["day", "month"], default="day")
        p.add_argument("--metric", choices=["revenue", "orderCount"], default="revenue")
        p.add_argument("--top", type=int, default=DEFAULT_TOP_N)
        if name == "report":
            p.add_argument("--commission", type=float, default=None)
            p.add_argument("--output", default=None)

    args = parser.parse_args(argv)
    setup_logger()

    commands = {
        "sample": cmd_sample,
        "settle": cmd_settle,
        "analyze": cmd_analyze,
        "report": cmd_report,
    }
    command = commands.get(args.command)
    if command is None:
        parser.print_help()
        return

    try:
        command(args)
    except DropshipError as exc:
        print(f"  Hata: {exc}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
