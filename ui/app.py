"""
Trade Journal - Streamlit Dashboard

Record daily P&L, track the running balance and review win rate by month.
"""
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

import streamlit as st
import plotly.graph_objects as go
from datetime import date
import logging

from ledger import LedgerInputError, parse_date
from journal.analytics import TradeAnalytics
from journal.controller import JournalController, EditForm
from journal.store import JournalStore
from config import journal_config, ui_config

# Setup logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Page config
st.set_page_config(
    page_title="Trade Journal",
    page_icon="📓",
    layout="wide",
    initial_sidebar_state="expanded"
)

# Custom CSS
st.markdown("""
<style>
    .main-header {
        font-size: 2.5rem;
        font-weight: bold;
        color: #1f77b4;
        margin-bottom: 1rem;
    }
    .win { color: #00cc00; font-weight: bold; }
    .loss { color: #ff0000; font-weight: bold; }
</style>
""", unsafe_allow_html=True)

CURRENCY = ui_config.currency_symbol


@st.cache_resource
def open_store():
    """Open the journal store (cached)."""
    return JournalStore()


def get_controller() -> JournalController:
    """One controller per browser session."""
    if 'journal' not in st.session_state:
        st.session_state.journal = JournalController.open(store=open_store())
        st.session_state.form = EditForm()
    return st.session_state.journal


def render_header():
    """Render page header."""
    st.markdown('<h1 class="main-header">📓 Trade Journal</h1>', unsafe_allow_html=True)
    st.markdown("---")


def render_sidebar(journal: JournalController):
    """Render starting balance control."""
    st.sidebar.header("⚙️ Settings")
    st.sidebar.subheader("💰 Account")

    value = st.sidebar.text_input(
        "Starting Balance",
        value=f"{journal.ledger.starting_balance:.2f}",
        help="Balance before the first trade"
    )
    if st.sidebar.button("Update Balance"):
        try:
            if journal.set_starting_balance(value):
                st.rerun()
            st.sidebar.warning("Enter a valid number.")
        except LedgerInputError as e:
            st.sidebar.error(str(e))

    if st.sidebar.button("Export CSV"):
        path = journal.store.export_to_csv(journal.ledger)
        st.sidebar.success(f"Exported to {path}")


def render_metrics(journal: JournalController):
    """Render key metrics."""
    view = journal.view()

    col1, col2, col3, col4 = st.columns(4)
    with col1:
        st.metric(
            "Current Balance",
            f"{CURRENCY}{view.current_balance:,.2f}",
            f"{view.current_balance - view.starting_balance:+,.2f}"
        )
    with col2:
        st.metric("Win Rate", f"{view.win_rate:.2f}%")
    with col3:
        st.metric("This Month", f"{view.monthly_win_rate:.2f}%")
    with col4:
        st.metric("Trades", len(view.trades))


def render_trade_form(journal: JournalController):
    """Render add/edit form."""
    form_values: EditForm = st.session_state.form
    editing = journal.editing_id is not None

    st.subheader("✏️ Edit Trade" if editing else "➕ Add Trade")

    with st.form("trade_form", clear_on_submit=True):
        col1, col2 = st.columns(2)
        with col1:
            profit = st.text_input("Profit / Loss", value=form_values.profit)
        with col2:
            if editing and not form_values.date:
                # Leaving the date empty keeps the trade undated
                trade_date = st.date_input("Date", value=None)
                st.caption("This trade has no valid date.")
            else:
                default_day = parse_date(form_values.date) or date.today()
                trade_date = st.date_input("Date", value=default_day)

        submitted = st.form_submit_button("Update Trade" if editing else "Add Trade", type="primary")

    if submitted:
        try:
            if journal.add_or_update(profit, trade_date):
                st.session_state.form = EditForm()
                st.rerun()
            else:
                st.warning("Enter a profit or loss amount.")
        except LedgerInputError as e:
            st.error(str(e))

    if editing and st.button("Cancel Edit"):
        journal.cancel_edit()
        st.session_state.form = EditForm()
        st.rerun()


def render_delete_prompt(journal: JournalController):
    """Render delete confirmation when one is pending."""
    trade_id = journal.pending_delete_id
    if trade_id is None:
        return

    st.warning("Delete this trade? This cannot be undone.")
    col1, col2 = st.columns(2)
    with col1:
        if st.button("Confirm Delete", type="primary"):
            journal.confirm_delete()
            st.session_state.form = EditForm()
            st.rerun()
    with col2:
        if st.button("Cancel"):
            journal.cancel_delete()
            st.rerun()


def render_trade_table(journal: JournalController):
    """Render trade history, newest first, with edit/delete actions."""
    trades = list(reversed(journal.ledger.trades))[:ui_config.max_display_trades]

    if not trades:
        st.info("No trades yet. Add your first trade above!")
        return

    header = st.columns([2, 2, 2, 1, 1])
    for col, label in zip(header, ["Date", "Profit", "Balance", "", ""]):
        col.markdown(f"**{label}**")

    for trade in trades:
        cols = st.columns([2, 2, 2, 1, 1])
        cols[0].write(trade.date.isoformat() if trade.date else "invalid date")
        css = "win" if trade.is_win else "loss"
        cols[1].markdown(f'<span class="{css}">{trade.profit:+,.2f}</span>', unsafe_allow_html=True)
        cols[2].write(f"{CURRENCY}{trade.balance:,.2f}")
        if cols[3].button("Edit", key=f"edit_{trade.id}"):
            st.session_state.form = journal.start_edit(trade)
            st.rerun()
        if cols[4].button("Delete", key=f"delete_{trade.id}"):
            journal.request_delete(trade.id)
            st.rerun()


def render_balance_chart(analytics: TradeAnalytics):
    """Render equity curve."""
    history = analytics.balance_history().dropna(subset=['date'])
    if history.empty:
        return

    fig = go.Figure(go.Scatter(
        x=history['date'],
        y=history['balance'],
        mode="lines+markers",
        line={'color': "#1f77b4"},
        name="Balance"
    ))
    fig.add_hline(y=analytics.ledger.starting_balance, line_dash="dot", line_color="gray")
    fig.update_layout(title="Balance", height=ui_config.chart_height)
    st.plotly_chart(fig, use_container_width=True)


def render_distribution_chart(distribution: dict):
    """Render win/loss pie."""
    if not distribution['wins'] and not distribution['losses']:
        return

    fig = go.Figure(go.Pie(
        labels=["Wins", "Losses"],
        values=[distribution['wins'], distribution['losses']],
        marker={'colors': ["#00cc00", "#ff0000"]},
        hole=0.4
    ))
    fig.update_layout(title="Win / Loss", height=ui_config.chart_height)
    st.plotly_chart(fig, use_container_width=True)


def render_monthly(analytics: TradeAnalytics):
    """Render monthly P&L chart and table."""
    monthly = analytics.monthly_summary_frame()
    if monthly.empty:
        return

    colors = ["#00cc00" if p > 0 else "#ff0000" for p in monthly['total_profit']]
    fig = go.Figure(go.Bar(x=monthly['month_key'], y=monthly['total_profit'], marker_color=colors))
    fig.update_layout(title="Monthly P&L", height=ui_config.chart_height)
    st.plotly_chart(fig, use_container_width=True)

    df_display = monthly.rename(columns={
        'month_key': 'Month',
        'total_profit': 'Total P&L',
        'trade_count': 'Trades',
        'win_rate': 'Win Rate'
    })
    df_display['Total P&L'] = df_display['Total P&L'].apply(lambda x: f"{CURRENCY}{x:,.2f}")
    df_display['Win Rate'] = df_display['Win Rate'].apply(lambda x: f"{x:.2f}%")
    st.dataframe(df_display, use_container_width=True, hide_index=True)


def main():
    """Main app function."""
    render_header()

    journal = get_controller()
    render_sidebar(journal)
    render_metrics(journal)

    tab1, tab2 = st.tabs(["📓 Journal", "📈 Analytics"])

    with tab1:
        render_trade_form(journal)
        st.markdown("---")
        render_delete_prompt(journal)
        render_trade_table(journal)

    with tab2:
        analytics = TradeAnalytics(journal.ledger)
        view = journal.view()

        col1, col2 = st.columns(2)
        with col1:
            render_balance_chart(analytics)
        with col2:
            render_distribution_chart(view.distribution)

        st.subheader("Monthly Summary")
        render_monthly(analytics)

        st.subheader("Performance Report")
        st.text(analytics.generate_report())

    if journal_config.strict_input:
        st.caption("Strict input validation is on.")


if __name__ == "__main__":
    main()
