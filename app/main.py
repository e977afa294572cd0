"""
Streamlit Frontend for the Cash-Flow Analyzer

This is the user interface a small business owner uses at the end of
the month: paste a note, get tables, balances and a report back.

DESIGN PRINCIPLES:
1. Simple, clear interface
2. Every number shown is computed by the engine, never by the model
3. Clear error messages in simple language
4. A failed request keeps the previous report on screen
5. Exports are plain text, ready to paste into a spreadsheet or chat
"""

import asyncio
import html

import streamlit as st

from cashflow_analyzer.agents import ExtractionError
from cashflow_analyzer.config import validate_all_settings
from cashflow_analyzer.demo import DEMO_TEXT
from cashflow_analyzer.export import format_amount
from cashflow_analyzer.models.analysis import FinancialStatus, ReportSectionId
from cashflow_analyzer.orchestrator import (
    AnalysisFlow,
    AnalysisResult,
    AnalysisSession,
    create_app_components,
)
from cashflow_analyzer.validation import RecordValidator


# Page configuration
st.set_page_config(
    page_title="Cash-Flow Analyzer",
    page_icon="💰",
    layout="wide",
    initial_sidebar_state="expanded",
)

st.markdown("""
<style>
    .stButton>button {
        width: 100%;
        margin-top: 10px;
    }
    .error-box {
        padding: 20px;
        background-color: #f8d7da;
        border-radius: 10px;
        border-left: 5px solid #dc3545;
        margin: 10px 0;
    }
    .info-box {
        padding: 20px;
        background-color: #cce5ff;
        border-radius: 10px;
        border-left: 5px solid #004085;
        margin: 10px 0;
    }
</style>
""", unsafe_allow_html=True)


STATUS_ICONS = {
    FinancialStatus.DEFICIT: "🔴",
    FinancialStatus.NEAR_BREAK_EVEN: "🟡",
    FinancialStatus.SURPLUS: "🟢",
}


def error_box_html(title: str, message: str, hint: str = "") -> str:
    """Error box markup. The message may echo user text, so it is escaped."""
    hint_html = f"<p>{html.escape(hint)}</p>" if hint else ""
    return (
        f'<div class="error-box"><h4>{html.escape(title)}</h4>'
        f"<p>{html.escape(message)}</p>{hint_html}</div>"
    )


def run_async(coro):
    """Helper to run async functions in Streamlit."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


@st.cache_resource
def get_components():
    """Get or create application components (cached)."""
    flow, _ = create_app_components()
    return flow


def get_session(flow: AnalysisFlow) -> AnalysisSession:
    """One AnalysisSession per browser session, preloaded with the demo."""
    if "analysis_session" not in st.session_state:
        session = AnalysisSession(flow)
        run_async(session.load_demo())
        st.session_state.analysis_session = session
    return st.session_state.analysis_session


def main():
    """Main application entry point."""
    flow = get_components()
    session = get_session(flow)

    st.sidebar.title("💰 Cash-Flow Analyzer")
    st.sidebar.markdown("---")

    page = st.sidebar.radio(
        "Navigate to:",
        ["📝 Analyze", "⚙️ Settings"],
        index=0,
    )

    st.sidebar.markdown("---")
    st.sidebar.markdown(
        """
        **How to use:**
        1. Paste this month's income and spending notes
        2. Click Analyze
        3. Copy the tables or reports you need

        Mark each line as 生意 (business) or 生活 (personal)
        for the clearest split.
        """
    )

    if page == "📝 Analyze":
        render_analyze_page(session)
    elif page == "⚙️ Settings":
        render_settings_page()


def render_analyze_page(session: AnalysisSession):
    """Render the input box and the latest analysis."""
    st.title("📝 Monthly Cash-Flow Analysis")

    text = st.text_area(
        "Describe this month's income and spending:",
        value=DEMO_TEXT,
        height=300,
    )

    col1, col2 = st.columns(2)
    with col1:
        if st.button("🔍 Analyze", type="primary"):
            with st.spinner("Reading your notes..."):
                try:
                    run_async(session.analyze_text(text))
                except ExtractionError as e:
                    st.markdown(
                        error_box_html(
                            "❌ Analysis Failed",
                            str(e),
                            "The previous report is still shown below.",
                        ),
                        unsafe_allow_html=True,
                    )
                except Exception as e:
                    run_async(session.flow.audit_logger.log_error(
                        error_type=type(e).__name__,
                        error_message=str(e),
                    ))
                    st.error(f"Error: {str(e)}")
    with col2:
        if st.button("☕ Load Demo"):
            run_async(session.load_demo())

    result = session.current
    if result is None:
        return

    if result.source == "demo":
        st.markdown("""
        <div class="info-box">Showing the demo coffee-shop month.</div>
        """, unsafe_allow_html=True)

    if result.validation.issues:
        st.warning(RecordValidator().get_user_friendly_summary(result.validation))

    tabs = st.tabs(["收入明細", "支出明細", "現金流分析", "財務月報表"])
    with tabs[0]:
        render_records_tab(session.flow, result, "income")
    with tabs[1]:
        render_records_tab(session.flow, result, "expense")
    with tabs[2]:
        render_cash_flow_tab(session.flow, result)
    with tabs[3]:
        render_report_tab(session.flow, result)


def render_records_tab(flow: AnalysisFlow, result: AnalysisResult, kind: str):
    if kind == "income":
        records = result.extraction.incomes
    else:
        records = result.extraction.expenses

    if not records:
        st.info("No records of this kind were found.")
        return

    st.dataframe(
        [record.model_dump(by_alias=True) for record in records],
        use_container_width=True,
    )
    with st.expander("📋 Copy as table"):
        render_export(flow, result, f"{kind}_table")


def render_export(flow: AnalysisFlow, result: AnalysisResult, kind: str):
    """Show export text; only the download button counts as an export."""
    text = result.export_text(kind)
    st.code(text, language=None)
    st.download_button(
        "⬇️ Download",
        data=text,
        file_name=f"{kind}.txt",
        mime="text/plain",
        key=f"download_{kind}",
        on_click=lambda: run_async(flow.export(result, kind)),
    )


def render_status_metric(label: str, assessment):
    icon = STATUS_ICONS[assessment.status]
    st.metric(
        label=f"{icon} {label}",
        value=format_amount(assessment.balance),
        delta=assessment.label,
        delta_color="off",
    )


def render_cash_flow_tab(flow: AnalysisFlow, result: AnalysisResult):
    accounts = result.analysis.accounts
    margin = result.analysis.margin
    fund = result.analysis.emergency_fund

    col1, col2, col3 = st.columns(3)
    with col1:
        render_status_metric("總帳", accounts.total_status)
    with col2:
        render_status_metric("生活帳", accounts.personal_status)
    with col3:
        if accounts.has_business_activity:
            render_status_metric("營業帳", accounts.business_status)

    if accounts.has_business_activity:
        st.markdown("### 營業分析")
        col1, col2, col3 = st.columns(3)
        col1.metric("營業成本", format_amount(margin.business_cost))
        col2.metric("毛利", format_amount(margin.gross_profit))
        col3.metric("毛利率", f"{margin.gross_margin_percent:.2f}%")

    st.markdown("### 緊急預備金建議")
    col1, col2 = st.columns(2)
    col1.metric("最低建議(3個月)", format_amount(fund.minimum))
    col2.metric("理想目標(6個月)", format_amount(fund.maximum))

    with st.expander("📋 Copy analysis"):
        render_export(flow, result, "cash_flow_analysis")


def render_report_tab(flow: AnalysisFlow, result: AnalysisResult):
    report = result.analysis.report

    for section in report.sections:
        st.markdown(f"### {section.title}")
        rows = [{"項目": line.label, "金額": line.amount} for line in section.lines]
        st.table(rows)
        if section.details:
            st.caption(" / ".join(
                f"{line.label}: {format_amount(line.amount)}" for line in section.details
            ))
        if section.section_id != ReportSectionId.SUMMARY:
            st.markdown(f"**合計: {format_amount(section.total)}**")

    with st.expander("📋 Copy monthly report"):
        render_export(flow, result, "monthly_report")


def render_settings_page():
    """Render the settings page."""
    st.title("⚙️ Settings")

    st.markdown("### Connection Status")

    status = validate_all_settings()

    services = [
        ("Gemini (Extraction)", "gemini"),
        ("Application", "app"),
    ]

    for name, key in services:
        if status.get(key, False):
            st.success(f"✅ {name} - Configured")
        else:
            error = status.get(f"{key}_error", "Not configured")
            st.error(f"❌ {name} - {error}")

    st.markdown("---")
    st.markdown("### Configuration")
    st.markdown(
        "Set `GEMINI_API_KEY` in the environment or a `.env` file. "
        "The demo analysis works without it."
    )


if __name__ == "__main__":
    main()
