import streamlit as st

from core.utils import format_currency
from dscr_calc.models import TERM_OPTIONS
from ui.property import currency_input, percentage_input


def render_advanced_options():
    """Rate, term and the monthly expense inputs."""
    i = st.session_state["inputs"]
    value = i.get("property_value", 0.0)
    with st.expander("Advanced Options", expanded=True):
        c1, c2 = st.columns(2)
        i["interest_rate"] = c1.number_input(
            "Interest Rate %",
            min_value=0.0,
            max_value=100.0,
            value=float(i.get("interest_rate", 0.0)),
            step=0.125,
            format="%.3f",
        )
        i["term_years"] = c2.selectbox(
            "Loan Term",
            list(TERM_OPTIONS),
            index=list(TERM_OPTIONS).index(int(i.get("term_years", 30))),
            format_func=lambda y: f"{y} years",
        )
        i["is_interest_only"] = st.toggle("Interest Only", value=bool(i.get("is_interest_only", False)))

        st.toggle("Enter taxes as annual amount", key="show_taxes_amount")
        if st.session_state["show_taxes_amount"]:
            i["taxes_amount"] = currency_input("Annual Property Taxes", i.get("taxes_amount", 0.0))
        else:
            i["taxes_percent"] = percentage_input(
                "Property Taxes % (annual)",
                i.get("taxes_percent", 0.0),
                help="Defaults to the selected state's average effective rate",
            )
            if i["taxes_percent"] > 0:
                st.caption(f"Annual taxes: {format_currency(value * i['taxes_percent'] / 100, 0)}")

        st.toggle("Enter insurance as annual amount", key="show_insurance_amount")
        if st.session_state["show_insurance_amount"]:
            i["insurance_amount"] = currency_input("Annual Insurance", i.get("insurance_amount", 0.0))
        else:
            i["insurance_percent"] = percentage_input(
                "Insurance % (annual)",
                i.get("insurance_percent", 0.0),
                help="Defaults to the selected state's average premium rate",
            )
            if i["insurance_percent"] > 0:
                st.caption(f"Annual insurance: {format_currency(value * i['insurance_percent'] / 100, 0)}")

        i["hoa_fees"] = currency_input("Monthly HOA Fees", i.get("hoa_fees", 0.0))
