"""Streamlit session state for the calculator.

Only the current inputs, the UI mode toggles and the last results live in
``st.session_state``; nothing is written to disk. The shareable URL is the
only way a scenario outlives the session.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

import streamlit as st

from core import config
from core.rates import RateProvider
from core.rules import evaluate_rules
from core.url_params import build_shareable_url, decode_params, encode_params, merge_params
from dscr_calc.calculators import compute_results, sync_down_payment, zero_unused_units
from dscr_calc.models import CalculatorInputs
from dscr_calc.presets import DEFAULT_INPUTS, DEFAULT_STATE

logger = logging.getLogger(__name__)

# UI toggles selecting which of two paired fields is authoritative.
TOGGLE_KEYS = ("use_dp_amount", "show_taxes_amount", "show_insurance_amount")


@st.cache_resource
def get_rate_provider() -> RateProvider:
    """One provider, and so one document cache, per server process."""
    return RateProvider()


def default_inputs() -> CalculatorInputs:
    return CalculatorInputs(**DEFAULT_INPUTS)


def init_state(provider: RateProvider, query: Optional[Mapping[str, Any]] = None) -> None:
    """Seed session state on the first run of a session.

    A link carrying parameters is merged onto the defaults and queued for an
    automatic calculation; a bare link loads current rates instead.
    """
    ss = st.session_state
    for key in TOGGLE_KEYS:
        ss.setdefault(key, False)
    ss.setdefault("results", None)
    ss.setdefault("rules", [])
    ss.setdefault("share_url", "")
    ss.setdefault("auto_calculate", False)
    if ss.get("initialized"):
        return

    decoded = decode_params(query if query is not None else st.query_params.to_dict())
    if decoded:
        inputs = merge_params(default_inputs(), decoded)
        if "down_payment_amount" in decoded:
            # links carry the amount, not the percent
            inputs = sync_down_payment(inputs, use_amount=True)
        ss["auto_calculate"] = True
        logger.info("Loaded %d fields from link parameters", len(decoded))
    else:
        inputs = load_initial_rates(provider, default_inputs())
    store_inputs(inputs)
    ss["initialized"] = True


def load_initial_rates(provider: RateProvider, inputs: CalculatorInputs) -> CalculatorInputs:
    rate = provider.get_default_interest_rate()
    state_rates = provider.get_state_rates(DEFAULT_STATE)
    return inputs.model_copy(
        update={
            "interest_rate": rate,
            "taxes_percent": state_rates["taxes"],
            "insurance_percent": state_rates["insurance"],
        }
    )


def current_inputs() -> CalculatorInputs:
    return CalculatorInputs.model_validate(st.session_state["inputs"])


def store_inputs(inputs: CalculatorInputs) -> None:
    st.session_state["inputs"] = inputs.model_dump()


def apply_state_rates(provider: RateProvider, state_code: str) -> CalculatorInputs:
    """Switch the property state and refresh the percent-mode cost rates.

    Widget callbacks run one after another for a session, so when the user
    changes state twice the later selection is the one that sticks.
    """
    ss = st.session_state
    rates = provider.get_state_rates(state_code)
    update = {"property_state": state_code}
    if not ss.get("show_taxes_amount"):
        update["taxes_percent"] = rates["taxes"]
    if not ss.get("show_insurance_amount"):
        update["insurance_percent"] = rates["insurance"]
    inputs = current_inputs().model_copy(update=update)
    store_inputs(inputs)
    return inputs


def prepare_inputs(inputs: CalculatorInputs, use_dp_amount: bool) -> CalculatorInputs:
    """Reconcile derived fields and clear values hidden by the UI toggles."""
    inputs = sync_down_payment(inputs, use_dp_amount)
    update = {}
    if inputs.number_of_units == 1:
        update["rental_income_method"] = "total"
    if not st.session_state.get("show_taxes_amount"):
        update["taxes_amount"] = 0.0
    if not st.session_state.get("show_insurance_amount"):
        update["insurance_amount"] = 0.0
    return inputs.model_copy(update=update) if update else inputs


def calculate(provider: RateProvider, base_url: str = config.APP_URL):
    """Run the engine on the current inputs and publish results and link."""
    ss = st.session_state
    inputs = prepare_inputs(current_inputs(), ss.get("use_dp_amount", False))
    store_inputs(inputs)
    results = compute_results(zero_unused_units(inputs), provider)
    ss["results"] = results.model_dump()
    ss["rules"] = [r.model_dump() for r in evaluate_rules(inputs, results)]
    ss["share_url"] = build_shareable_url(base_url, inputs)
    st.query_params.from_dict(encode_params(inputs))
    ss["auto_calculate"] = False
    return results
