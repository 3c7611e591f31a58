"""
Dropshipping Pazaryeri Yönetim Dashboard'u
Çalıştır: streamlit run dropship_manager/dashboard.py
"""
from __future__ import annotations

from datetime import date, timedelta

import plotly.express as px
import plotly.graph_objects as go
import streamlit as st

from dropship_manager.config.settings import MARKETPLACE_DATA_DIR, USER_TYPE_COLORS
from dropship_manager.engine.analyzer import aggregate, round_for_display, scope_records, status_color
from dropship_manager.engine.errors import DropshipError
from dropship_manager.engine.fees import commission_resolver_from_users
from dropship_manager.engine.payouts import payable_summary, unpaid_balance
from dropship_manager.engine.settlement import settle_order
from dropship_manager.engine.timeseries import format_bucket_label
from dropship_manager.models.analytics import AggregationSpec
from dropship_manager.models.user import UserRole
from dropship_manager.parsers.marketplace_csv import load_marketplace

# ── Sayfa Ayarları ────────────────────────────────────────
st.set_page_config(
    page_title="Pazaryeri Yönetim Paneli",
    page_icon="📊",
    layout="wide",
    initial_sidebar_state="expanded",
)


# ── Veri Yükleme (cache'li) ──────────────────────────────
@st.cache_data(ttl=300)
def load_all_data():
    """Tüm CSV dosyalarını yükler ve parse eder."""
    return load_marketplace(MARKETPLACE_DATA_DIR)


def main():
    records = load_all_data()

    if not any(records.values()):
        st.error("Veri bulunamadı! Önce `python3 -m dropship_manager sample` çalıştırın.")
        return

    users = records["users"]
    vendors = [u for u in users if u.role == UserRole.VENDOR]
    suppliers = [u for u in users if u.role == UserRole.SUPPLIER]

    # ── Sidebar ───────────────────────────────────────────
    with st.sidebar:
        st.title("📊 Pazaryeri Paneli")
        st.divider()

        page = st.radio("Sayfa", ["Ana Panel", "Hesaplaşma"], index=0)

        st.divider()

        scope = st.selectbox(
            "Kapsam",
            ["Platform"]
            + [f"Vendor: {v.display_name}" for v in vendors]
            + [f"Tedarikçi: {s.display_name}" for s in suppliers],
        )

        period_days = st.selectbox(
            "Dönem",
            [7, 14, 30, 90, 180, 365],
            index=2,
            format_func=lambda x: f"Son {x} gün",
        )
        bucket = st.radio("Kova", ["day", "month"], format_func=lambda x: "Gün" if x == "day" else "Ay")

        st.divider()
        st.caption(f"Toplam {len(records['orders'])} sipariş | {len(users)} kullanıcı")
        if st.button("Verileri Yenile"):
            st.cache_data.clear()
            st.rerun()

    # Kapsam filtresi uygula
    scoped = records
    if scope.startswith("Vendor: "):
        vendor = next(v for v in vendors if f"Vendor: {v.display_name}" == scope)
        scoped = scope_records(records, vendor_id=vendor.user_id)
    elif scope.startswith("Tedarikçi: "):
        supplier = next(s for s in suppliers if f"Tedarikçi: {s.display_name}" == scope)
        scoped = scope_records(records, supplier_id=supplier.user_id)

    if page == "Ana Panel":
        render_main_dashboard(scoped, period_days, bucket, scope)
    else:
        render_settlement(records)


def _aggregate_or_none(spec, records):
    """Hata olursa bileşen "veri yok" durumunu gösterir, panel çökmez."""
    try:
        return aggregate(spec, records)
    except DropshipError as exc:
        st.warning(f"Veri kullanılamıyor: {exc}")
        return None


# ══════════════════════════════════════════════════════════
#  ANA PANEL
# ══════════════════════════════════════════════════════════
def render_main_dashboard(records, period_days, bucket, scope):
    st.title("Ana Panel")
    st.caption(f"Kapsam: {scope} | Son {period_days} gün")

    today = date.today()
    spec = AggregationSpec(
        window_start=today - timedelta(days=period_days - 1),
        window_end=today,
        bucket_unit=bucket,
        top_n=5,
    )
    result = _aggregate_or_none(spec, records)
    if result is None:
        return
    stats = round_for_display(result.stats)

    # ── KPI Kartları ──────────────────────────────────────
    col1, col2, col3, col4 = st.columns(4)
    with col1:
        st.metric("Sipariş Sayısı", stats.total_orders, delta=f"{stats.orders_change:+.1f}%")
    with col2:
        st.metric("Ciro", f"${stats.total_revenue:,.2f}", delta=f"{stats.revenue_change:+.1f}%")
    with col3:
        st.metric("Ort. Sipariş", f"${stats.avg_order_value:,.2f}", delta=f"{stats.avg_change:+.1f}%")
    with col4:
        st.metric("Aktif Vendor / Tedarikçi", f"{stats.active_vendors} / {stats.active_suppliers}")

    st.divider()

    # ── Grafikler ─────────────────────────────────────────
    col_left, col_right = st.columns([2, 1])

    with col_left:
        st.subheader("Gelir Trendi")
        labels = [format_bucket_label(p.key) for p in result.revenue_trend]
        fig = go.Figure()
        fig.add_trace(go.Scatter(
            x=labels,
            y=[p.value for p in result.revenue_trend],
            mode="lines+markers",
            name="Gelir",
            fill="tozeroy",
            line=dict(color="#4CAF50", width=2),
            marker=dict(size=4),
        ))
        fig.add_trace(go.Bar(
            x=labels,
            y=[p.value for p in result.order_volume_trend],
            name="Sipariş",
            yaxis="y2",
            marker_color="#6366f1",
            opacity=0.4,
        ))
        fig.update_layout(
            yaxis=dict(title="Gelir ($)"),
            yaxis2=dict(title="Sipariş", overlaying="y", side="right"),
            height=350,
            margin=dict(l=20, r=20, t=20, b=20),
            hovermode="x unified",
        )
        st.plotly_chart(fig, use_container_width=True)

    with col_right:
        st.subheader("Sipariş Durumları")
        if result.order_status:
            fig_pie = px.pie(
                names=[s.name for s in result.order_status],
                values=[s.value for s in result.order_status],
                hole=0.4,
                color=[s.name for s in result.order_status],
                color_discrete_map={s.name: status_color(s.name) for s in result.order_status},
            )
            fig_pie.update_layout(height=350, margin=dict(l=20, r=20, t=20, b=20))
            st.plotly_chart(fig_pie, use_container_width=True)
        else:
            st.info("Bu dönemde sipariş yok.")

    # ── Sıralamalar ───────────────────────────────────────
    st.divider()
    col_a, col_b, col_c = st.columns(3)
    for col, title, ranking in (
        (col_a, "En İyi Vendorlar", result.top_vendors),
        (col_b, "En İyi Tedarikçiler", result.top_suppliers),
        (col_c, "En Çok Satan Ürünler", result.top_products),
    ):
        with col:
            st.subheader(title)
            if ranking:
                st.dataframe(
                    [{"#": i, "Ad": e.name[:30], "Gelir": f"${e.value:,.2f}"}
                     for i, e in enumerate(ranking, 1)],
                    use_container_width=True,
                    hide_index=True,
                )
            else:
                st.caption("Veri yok")

    # ── Kullanıcılar ──────────────────────────────────────
    st.divider()
    col_users, col_reg = st.columns([1, 2])
    with col_users:
        st.subheader("Kullanıcı Tipleri")
        fig_users = px.pie(
            names=[u.name for u in result.user_type],
            values=[u.value for u in result.user_type],
            color=[u.name for u in result.user_type],
            color_discrete_map=USER_TYPE_COLORS,
        )
        fig_users.update_layout(height=300, margin=dict(l=20, r=20, t=20, b=20))
        st.plotly_chart(fig_users, use_container_width=True)
    with col_reg:
        st.subheader("Kullanıcı Kayıtları")
        fig_reg = px.bar(
            x=[format_bucket_label(p.key) for p in result.user_registration],
            y=[p.value for p in result.user_registration],
            labels={"x": "Dönem", "y": "Yeni Kullanıcı"},
        )
        fig_reg.update_layout(height=300, margin=dict(l=20, r=20, t=20, b=20))
        st.plotly_chart(fig_reg, use_container_width=True)


# ══════════════════════════════════════════════════════════
#  HESAPLAŞMA
# ══════════════════════════════════════════════════════════
def render_settlement(records):
    st.title("Hesaplaşma")

    orders, users, payouts = records["orders"], records["users"], records["payouts"]
    resolver = commission_resolver_from_users(users)

    settled = []
    rejected = []
    for order in orders:
        try:
            settled.extend(settle_order(order, None, resolver))
        except DropshipError as exc:
            rejected.append((order.order_id, str(exc)))

    if rejected:
        st.error(f"{len(rejected)} sipariş hesaplaşılamadı")
        st.dataframe(
            [{"Sipariş": oid, "Hata": msg} for oid, msg in rejected],
            use_container_width=True,
            hide_index=True,
        )

    paid_ids = {o.order_id for o in orders if o.is_paid}

    st.subheader("Ödeme Bakiyeleri")
    rows = []
    for user in users:
        if user.role not in (UserRole.VENDOR, UserRole.SUPPLIER):
            continue
        summary = payable_summary(user, settled, paid_ids)
        rows.append({
            "Kullanıcı": user.display_name,
            "Rol": user.role.value,
            "Brüt": f"${summary.base_amount:,.2f}",
            "İşlem Ücreti": f"${summary.processor_fee:,.2f}",
            "Platform Ücreti": f"${summary.platform_fee:,.2f}",
            "Net": f"${summary.net_amount:,.2f}",
            "Ödenmemiş": f"${unpaid_balance(user, settled, payouts, paid_ids):,.2f}",
        })
    st.dataframe(rows, use_container_width=True, hide_index=True)

    negative = [s for s in settled if s.vendor_profit < 0]
    if negative:
        st.warning(f"**NEGATİF KÂR:** {len(negative)} kalemde vendor zarar ediyor. Fiyatlandırmayı kontrol edin.")

    st.subheader("Kalem Defteri")
    st.dataframe(
        [{
            "Sipariş": s.order_id,
            "Ürün": s.product_id,
            "Adet": s.quantity,
            "Perakende": round(s.retail_total, 2),
            "Platform": round(s.platform_fee_total, 2),
            "İşlem": round(s.processor_fee_total, 2),
            "Vendor Net": round(s.vendor_profit_total, 2),
            "Tedarikçi Net": round(s.supplier_net_total, 2),
        } for s in settled],
        use_container_width=True,
        hide_index=True,
    )


if __name__ == "__main__":
    main()
