import streamlit as st

from core.config import configure_logging
from core.state import calculate, get_rate_provider, init_state, store_inputs
from dscr_calc.models import CalculatorInputs
from dscr_calc.presets import ABOUT_DSCR, DISCLAIMER
from ui.advanced import render_advanced_options
from ui.property import render_loan_section, render_property_section, render_rental_section
from ui.results import render_results
from ui.topbar import render_topbar


def render_calculator(provider):
    render_loan_section(provider)
    st.divider()
    render_property_section()
    st.divider()
    render_rental_section()
    render_advanced_options()
    # validate inputs via Pydantic
    store_inputs(CalculatorInputs(**st.session_state["inputs"]))

    clicked = st.button("Calculate DSCR", type="primary")
    if clicked or st.session_state.get("auto_calculate"):
        calculate(provider)
    render_results()


def main(provider=None):
    st.set_page_config(page_title="DSCR Loan Calculator", layout="centered")
    provider = provider or get_rate_provider()
    init_state(provider)
    render_topbar()
    render_calculator(provider)
    with st.expander("About DSCR Loans"):
        st.markdown(ABOUT_DSCR)
    st.caption(DISCLAIMER)


if __name__ == "__main__":
    configure_logging()
    main()
