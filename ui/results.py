import streamlit as st

from core.rules import RuleResult, has_blocking
from core.utils import format_currency, format_dscr, format_percentage
from dscr_calc.calculators import dscr_band, results_frame, summary_csv
from dscr_calc.models import CalculatorInputs, CalculatorResults


def render_results():
    """Render DSCR, message, warnings, breakdown and the shareable link."""
    data = st.session_state.get("results")
    if not data:
        return
    results = CalculatorResults(**data)
    inputs = CalculatorInputs(**st.session_state["inputs"])
    rules = [RuleResult(**r) for r in st.session_state.get("rules", [])]

    st.header("Results")
    _, color = dscr_band(results.dscr)
    st.markdown(
        f"<div style='font-size:1.6rem;font-weight:700;color:{color}'>DSCR: {format_dscr(results.dscr)}</div>",
        unsafe_allow_html=True,
    )
    st.write(results.dscr_message)

    for r in rules:
        if r.severity == "critical":
            st.error(f"[{r.code}] {r.message}")
        elif r.severity == "warn":
            st.warning(f"[{r.code}] {r.message}")
        else:
            st.info(f"[{r.code}] {r.message}")
    if has_blocking(rules):
        st.caption("Contact our office to discuss options for this scenario.")

    with st.expander("Details", expanded=True):
        cols = st.columns(3)
        cols[0].metric("Total Monthly Expenses", format_currency(results.total_monthly_expenses))
        cols[1].metric("Gross Rental Income", format_currency(results.gross_rental_income))
        cols[2].metric("Mortgage Payment", format_currency(results.monthly_mortgage_payment))
        terms = f"{format_percentage(inputs.interest_rate)} for {inputs.term_years} years"
        if inputs.is_interest_only:
            terms += ", interest only"
        st.caption(f"Loan: {format_currency(inputs.loan_amount, 0)} at {terms}")
        table = results_frame(results)
        table["Monthly"] = table["Monthly"].map(format_currency)
        st.table(table)

    st.subheader("Share")
    st.caption("Copy this link to reload the same scenario.")
    st.code(st.session_state.get("share_url", ""), language=None)
    st.download_button(
        "Download CSV Summary",
        data=summary_csv(inputs, results),
        file_name="dscr_summary.csv",
        mime="text/csv",
    )
