"""
Streamlit Frontend for Pocketbook

The dashboard users open to see where their money went.

DESIGN PRINCIPLES:
1. Every number on screen comes from the aggregation engine
2. Empty periods are shown as zero, never hidden
3. Dirty records never break a page; they are logged and skipped
4. Clear error messages in simple language

Records are read-only here. The host's data entry forms write to the
record store; this app only reads and aggregates.
"""

import asyncio
from datetime import date

import streamlit as st

from pocketbook.analytics import (
    ALL_CATEGORIES,
    PERIOD_LABELS,
    PERIOD_PRESETS,
    WindowMode,
    debt_progress,
    distinct_categories,
    filter_debts,
    search_events,
    summarize_debts,
)
from pocketbook.audit import configure_logging
from pocketbook.config import get_settings, validate_all_settings
from pocketbook.dashboard import DashboardService, create_dashboard_service
from pocketbook.models.records import DateRange, DebtFilter, EntryKind, FinanceSnapshot
from pocketbook.models.summaries import DashboardView
from pocketbook.services.storage import StorageError


# Page configuration
st.set_page_config(
    page_title="Pocketbook",
    page_icon="💰",
    layout="wide",
    initial_sidebar_state="expanded",
)

# Custom CSS for better UX
st.markdown("""
<style>
    .stButton>button {
        width: 100%;
        margin-top: 10px;
    }
    .info-box {
        padding: 20px;
        background-color: #cce5ff;
        border-radius: 10px;
        border-left: 5px solid #004085;
        margin: 10px 0;
    }
    .big-number {
        font-size: 2.5em;
        font-weight: bold;
        color: #2c3e50;
    }
</style>
""", unsafe_allow_html=True)


WINDOW_LABELS = {
    WindowMode.LAST_7_DAYS: "Daily (last 7 days)",
    WindowMode.LAST_30_DAYS: "Daily (last 30 days)",
    WindowMode.LAST_12_WEEKS: "Weekly (last 12 weeks)",
    WindowMode.LAST_12_MONTHS: "Monthly (last 12 months)",
    WindowMode.LAST_5_YEARS: "Yearly (last 5 years)",
    WindowMode.LAST_6_MONTHS: "Recent months (legacy)",
}


def run_async(coro):
    """Helper to run async functions in Streamlit."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


@st.cache_resource
def get_service() -> DashboardService:
    """Get or create the dashboard service (cached)."""
    configure_logging(get_settings().app.log_level)
    try:
        return create_dashboard_service(use_store=True)
    except Exception as e:
        st.error(f"Failed to initialize: {e}")
        return create_dashboard_service(use_store=False)


def money(amount) -> str:
    symbol = get_settings().analytics.currency_symbol
    return f"{symbol}{amount:,.2f}"


def load_snapshot(service: DashboardService) -> FinanceSnapshot:
    """Fetch records, showing an error and empty data on failure."""
    try:
        return run_async(service.load_snapshot())
    except StorageError as e:
        st.error(f"Could not load your records: {e}")
        return FinanceSnapshot()


def main():
    """Main application entry point."""
    service = get_service()

    # Sidebar navigation
    st.sidebar.title("💰 Pocketbook")
    st.sidebar.markdown("---")

    page = st.sidebar.radio(
        "Navigate to:",
        [
            "📊 Dashboard",
            "💵 Incomes",
            "🧾 Expenses",
            "🤝 Debts",
            "🎯 Savings & Budgets",
            "⚙️ Settings",
        ],
        index=0,
    )

    st.sidebar.markdown("---")
    st.sidebar.markdown(
        """
        **Tips:**
        - Pick a period to change the totals
        - Switch the chart between days, weeks, months and years
        - Download the dashboard as a JSON report
        """
    )

    if page == "⚙️ Settings":
        render_settings_page()
        return

    snapshot = load_snapshot(service)

    # Route to appropriate page
    if page == "📊 Dashboard":
        render_dashboard_page(service, snapshot)
    elif page == "💵 Incomes":
        render_entries_page(snapshot, EntryKind.INCOME)
    elif page == "🧾 Expenses":
        render_entries_page(snapshot, EntryKind.EXPENSE)
    elif page == "🤝 Debts":
        render_debts_page(snapshot)
    elif page == "🎯 Savings & Budgets":
        render_savings_page(service, snapshot)


def render_dashboard_page(service: DashboardService, snapshot: FinanceSnapshot):
    """Render the main dashboard."""
    st.title("📊 Dashboard")

    col1, col2 = st.columns(2)
    with col1:
        presets = list(PERIOD_PRESETS) + ["custom"]
        period = st.selectbox(
            "Period",
            options=presets,
            index=presets.index(service.settings.default_period),
            format_func=lambda p: PERIOD_LABELS[p],
        )
    with col2:
        modes = list(WindowMode)
        window = st.selectbox(
            "Cash flow chart",
            options=modes,
            index=modes.index(WindowMode(service.settings.default_window)),
            format_func=lambda m: WINDOW_LABELS[m],
        )

    date_range = None
    if period == "custom":
        picked = st.date_input("Date range", value=[date.today(), date.today()])
        if len(picked) != 2:
            st.info("Pick a start and an end date.")
            return
        date_range = DateRange(start=picked[0], end=picked[1])

    try:
        view = service.build_view(
            snapshot,
            period=period,
            window=window,
            date_range=date_range,
        )
    except ValueError as e:
        st.error(f"Could not build the dashboard: {e}")
        return

    render_overview(view)
    st.markdown("---")
    render_cash_flow(view)
    st.markdown("---")

    col1, col2 = st.columns(2)
    with col1:
        st.subheader("Spending by Category")
        render_category_table(view.spending_by_category)
    with col2:
        st.subheader("Recent Transactions")
        render_recent(view)

    st.download_button(
        "⬇️ Download report (JSON)",
        data=view.to_report_json(),
        file_name=f"pocketbook-report-{view.generated_for.isoformat()}.json",
        mime="application/json",
    )


def render_overview(view: DashboardView):
    overview = view.overview
    cols = st.columns(5)
    cols[0].metric("Income", money(overview.total_income))
    cols[1].metric("Expenses", money(overview.total_expenses))
    cols[2].metric("Balance", money(overview.balance))
    cols[3].metric("Remaining Debt", money(overview.remaining_debt))
    cols[4].metric("Saved", money(overview.total_saved))


def render_cash_flow(view: DashboardView):
    st.subheader("Cash Flow")
    if not view.cash_flow:
        st.info("No dated transactions yet.")
        return
    st.bar_chart(
        {
            "Period": [bucket.key for bucket in view.cash_flow],
            "Income": [float(bucket.total_income) for bucket in view.cash_flow],
            "Expenses": [float(bucket.total_expense) for bucket in view.cash_flow],
        },
        x="Period",
        y=["Income", "Expenses"],
        stack=False,
    )


def render_category_table(totals):
    if not totals:
        st.info("Nothing to show for this period.")
        return
    st.dataframe(
        [
            {
                "Category": item.category,
                "Total": money(item.total),
                # Round only for display
                "Share": f"{item.percentage_of_whole:.1f}%",
            }
            for item in totals
        ],
        hide_index=True,
        use_container_width=True,
    )


def render_recent(view: DashboardView):
    if not view.recent_transactions:
        st.info("No transactions in this period.")
        return
    for item in view.recent_transactions:
        sign = "+" if item.kind is EntryKind.INCOME else "-"
        st.markdown(
            f"**{item.description or item.category or 'Untitled'}** "
            f"{sign}{money(item.amount)}  \n"
            f"<small>{item.date or 'No date'} · {item.category or 'Uncategorized'}</small>",
            unsafe_allow_html=True,
        )


def render_entries_page(snapshot: FinanceSnapshot, kind: EntryKind):
    """Render the incomes or expenses list page."""
    is_income = kind is EntryKind.INCOME
    st.title("💵 Incomes" if is_income else "🧾 Expenses")

    events = snapshot.income_events() if is_income else snapshot.expense_events()

    col1, col2 = st.columns(2)
    with col1:
        search = st.text_input("Search", placeholder="Description or category")
    with col2:
        category = st.selectbox(
            "Category",
            options=distinct_categories(events, kind),
            index=0,
        )

    results = search_events(events, search=search, category=category, kind=kind)
    total = sum(event.amount for event in results)
    st.markdown(
        f'<div class="info-box">{len(results)} entries · '
        f'<span class="big-number">{money(total)}</span></div>',
        unsafe_allow_html=True,
    )

    if not results:
        st.info(
            "No entries match your filters."
            if search or category != ALL_CATEGORIES
            else "Nothing recorded yet."
        )
        return

    st.dataframe(
        [
            {
                "Date": event.occurred_on or "",
                "Description": event.description or "",
                "Category": event.category or "",
                "Amount": money(event.amount),
            }
            for event in results
        ],
        hide_index=True,
        use_container_width=True,
    )


def render_debts_page(snapshot: FinanceSnapshot):
    """Render the debts page."""
    st.title("🤝 Debts")

    summary = summarize_debts(snapshot.debts)
    cols = st.columns(4)
    cols[0].metric("Borrowed", money(summary.total_borrowed))
    cols[1].metric("Lent", money(summary.total_lent))
    cols[2].metric("Net", money(summary.net_balance))
    cols[3].metric("Overdue", summary.overdue_debts)

    col1, col2, col3 = st.columns(3)
    with col1:
        search = st.text_input("Search by name")
    with col2:
        status = st.selectbox("Status", ["all", "active", "overdue", "cleared"])
    with col3:
        debt_type = st.selectbox("Type", ["all", "borrowed", "lent"])

    debts = filter_debts(
        snapshot.debts,
        DebtFilter(search=search, status=status, debt_type=debt_type),
    )
    if not debts:
        st.info("No debts match your filters.")
        return

    for debt in sorted(debts, key=lambda d: d.due_date):
        progress = debt_progress(debt)
        st.markdown(
            f"**{progress.name}** ({progress.debt_type.value}, "
            f"{progress.status.value}) · due {progress.due_date.isoformat()}"
        )
        st.progress(
            progress.display_percentage / 100,
            text=f"{money(progress.paid_amount)} of {money(progress.amount)} paid",
        )


def render_savings_page(service: DashboardService, snapshot: FinanceSnapshot):
    """Render savings goals and budgets."""
    st.title("🎯 Savings & Budgets")
    view = service.build_view(snapshot, period="all_time")

    st.subheader("Savings Goals")
    st.metric(
        "Saved so far",
        money(view.savings.total_saved),
        help=f"Across all goals, target {money(view.savings.total_target)}",
    )
    if not view.savings.goals:
        st.info("No savings goals yet.")
    for goal in view.savings.goals:
        st.progress(
            min(goal.progress, 100.0) / 100,
            text=f"{goal.name}: {money(goal.current_amount)} of {money(goal.target_amount)}",
        )

    st.markdown("---")
    st.subheader("Budgets")
    if not view.budgets:
        st.info("No budgets yet.")
    for budget in view.budgets:
        label = f"{budget.category}: {money(budget.spent)} of {money(budget.amount)}"
        if budget.is_over_budget:
            label += " (over budget)"
        st.progress(min(budget.progress, 100.0) / 100, text=label)


def render_settings_page():
    """Render the settings page."""
    st.title("⚙️ Settings")

    st.markdown("### Connection Status")

    status = validate_all_settings()

    sections = [
        ("Analytics", "analytics"),
        ("Record Store", "record_store"),
        ("Application", "app"),
    ]

    for name, key in sections:
        if status.get(key, False):
            st.success(f"✅ {name} - Configured")
        else:
            error = status.get(f"{key}_error", "Not configured")
            st.error(f"❌ {name} - {error}")

    st.markdown("---")
    st.markdown("### Configuration")
    st.markdown(
        "To configure the application, create a `.env` file with your backend "
        "URL and API key. See `.env.example` for the required variables."
    )


if __name__ == "__main__":
    main()
