import streamlit as st

from core.state import apply_state_rates
from core.utils import format_currency, parse_currency_input, parse_percentage_input
from dscr_calc.calculators import derive_loan_terms
from dscr_calc.models import MAX_UNITS
from dscr_calc.presets import US_STATES


def currency_input(label, value, key=None, help=None, disabled=False):
    """Text box that accepts ``$1,250``-style input.

    Cents are shown only when the value has them, so reruns never round.
    """
    v = float(value or 0)
    if not v:
        shown = ""
    elif v.is_integer():
        shown = format_currency(v, 0)
    elif round(v, 2) == v:
        shown = format_currency(v)
    else:
        shown = f"${v:,}"
    raw = st.text_input(label, value=shown, key=key, help=help, disabled=disabled, placeholder="0")
    return parse_currency_input(raw)


def percentage_input(label, value, key=None, help=None):
    shown = f"{value:g}" if value else ""
    raw = st.text_input(label, value=shown, key=key, help=help, placeholder="0")
    return parse_percentage_input(raw)


def render_loan_section(provider):
    i = st.session_state["inputs"]
    st.subheader("Loan Information")
    c1, c2 = st.columns(2)
    purpose = c1.radio(
        "Loan Purpose",
        ["Purchase", "Refinance"],
        index=1 if i.get("is_refi") else 0,
        horizontal=True,
    )
    i["is_refi"] = purpose == "Refinance"

    codes = list(US_STATES)
    current = i.get("property_state", "CA")
    st.session_state.setdefault("property_state_select", current)

    def _on_state_change():
        apply_state_rates(provider, st.session_state["property_state_select"])

    c2.selectbox(
        "Property State",
        codes,
        format_func=lambda code: f"{US_STATES[code]} ({code})",
        key="property_state_select",
        on_change=_on_state_change,
    )


def render_property_section():
    i = st.session_state["inputs"]
    refi = i.get("is_refi", False)
    st.subheader("Property Value")
    i["property_value"] = currency_input(
        "Appraised Value" if refi else "Purchase Price", i.get("property_value", 0.0)
    )
    dp_label = "Equity" if refi else "Down Payment"
    use_amount = st.toggle(f"{dp_label} as amount", key="use_dp_amount")
    if use_amount:
        i["down_payment_amount"] = currency_input(dp_label, i.get("down_payment_amount", 0.0))
    else:
        i["down_payment_percent"] = percentage_input(f"{dp_label} %", i.get("down_payment_percent", 0.0))
    pct, amount, loan = derive_loan_terms(
        i["property_value"], i.get("down_payment_percent", 0.0), i.get("down_payment_amount", 0.0), use_amount
    )
    i["down_payment_percent"] = min(100.0, pct)
    i["down_payment_amount"] = amount
    i["loan_amount"] = loan
    if use_amount and pct > 0:
        st.caption(f"Percentage: {pct:.2f}%")
    elif not use_amount and amount > 0:
        st.caption(f"Amount: {format_currency(amount, 0)}")
    st.caption(f"Base Loan Amount: {format_currency(loan, 0)}")


def render_rental_section():
    i = st.session_state["inputs"]
    st.subheader("Rental Income")
    units = st.selectbox(
        "Number of Units",
        list(range(1, MAX_UNITS + 1)),
        index=int(i.get("number_of_units", 1)) - 1,
        format_func=lambda n: f"{n} Unit" if n == 1 else f"{n} Units",
    )
    i["number_of_units"] = units
    if units > 1:
        method = st.radio(
            "Income Entry Method",
            ["total", "perUnit"],
            index=1 if i.get("rental_income_method") == "perUnit" else 0,
            format_func=lambda m: "Total Rent" if m == "total" else "Per Unit",
            horizontal=True,
        )
        i["rental_income_method"] = method
    if i.get("rental_income_method") == "total" or units == 1:
        i["total_rental_income"] = currency_input(
            "Total Monthly Rental Income", i.get("total_rental_income", 0.0)
        )
    else:
        incomes = list(i.get("unit_incomes", [0.0] * MAX_UNITS))
        cols = st.columns(2)
        for n in range(units):
            with cols[n % 2]:
                incomes[n] = currency_input(f"Unit {n + 1} Monthly Rent", incomes[n])
        i["unit_incomes"] = incomes
