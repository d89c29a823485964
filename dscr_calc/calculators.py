"""Core DSCR calculation utilities.

Every function here is pure: inputs go in, plain numbers come out. The only
collaborator is the optional message provider passed to ``compute_results``.
"""

from __future__ import annotations

import io
import logging
import math
from typing import Iterable, Optional

import pandas as pd

from dscr_calc.models import AmountBased, CalculatorInputs, CalculatorResults, CostBasis
from dscr_calc.presets import DSCR_BANDS, DSCR_FALLBACK_LADDER

logger = logging.getLogger(__name__)


def nz(x, default=0.0):
    """Return a float for ``x`` or a fallback value.

    Values arrive from widgets, URL parameters and JSON documents where a
    missing entry shows up as ``None`` or ``NaN``. This helper mirrors the
    spreadsheet ``NZ()`` function and keeps later math from breaking when a
    value is missing.
    """

    try:
        if x is None or (isinstance(x, float) and math.isnan(x)):
            return default
        return float(x)
    except (TypeError, ValueError):
        return default


def monthly_payment(loan_amount, annual_rate_pct, term_years, interest_only=False):
    """Calculate the monthly mortgage payment.

    ``annual_rate_pct`` is the nominal yearly rate (e.g. ``6.125`` for
    6.125%). Interest-only loans pay just the accrued monthly interest; all
    other loans use the level-payment amortization formula. A zero result
    means there is nothing to finance: no balance, no rate or no term.
    """

    L = nz(loan_amount)
    rate = nz(annual_rate_pct)
    years = nz(term_years)
    if L <= 0 or rate <= 0 or years <= 0:
        return 0.0
    if interest_only:
        return L * (rate / 100) / 12
    r = rate / 100 / 12
    n = int(years * 12)
    if abs(r) < 1e-9:
        # rates this small are linear amortization for display purposes
        return L / n
    growth = (1 + r) ** n
    return L * (r * growth) / (growth - 1)


def monthly_cost(property_value, basis: CostBasis) -> float:
    """Normalize an annual tax or insurance basis to a monthly dollar amount."""

    if isinstance(basis, AmountBased):
        return nz(basis.value) / 12
    return nz(property_value) * (nz(basis.value) / 100) / 12


def monthly_taxes(property_value, taxes_percent, taxes_amount):
    """Monthly property taxes; a positive annual amount overrides the percent."""

    if nz(taxes_amount) > 0:
        return nz(taxes_amount) / 12
    return nz(property_value) * (nz(taxes_percent) / 100) / 12


def monthly_insurance(property_value, insurance_percent, insurance_amount):
    """Monthly hazard insurance with the same override rule as taxes."""

    if nz(insurance_amount) > 0:
        return nz(insurance_amount) / 12
    return nz(property_value) * (nz(insurance_percent) / 100) / 12


def total_rental_income(method, total_income, unit_incomes: Iterable):
    """Gross monthly rent for the property.

    With the ``perUnit`` method every slot is summed, including slots past
    the unit count; callers zero those first (see ``zero_unused_units``).
    """

    if method == "total":
        return nz(total_income)
    return float(sum(nz(v) for v in (unit_incomes or [])))


def dscr(gross_rental_income, total_expenses):
    """Debt service coverage ratio, ``0`` when expenses are not positive."""

    expenses = nz(total_expenses)
    if expenses <= 0:
        return 0.0
    return nz(gross_rental_income) / expenses


def fallback_dscr_message(value) -> str:
    """Qualitative message used when the remote message table is unavailable."""

    v = nz(value)
    for threshold, message in DSCR_FALLBACK_LADDER:
        if v >= threshold:
            return message
    return DSCR_FALLBACK_LADDER[-1][1]


def dscr_band(value):
    """Return ``(band, color)`` for display, e.g. ``("success", "#16a34a")``."""

    v = nz(value)
    for threshold, band, color in DSCR_BANDS:
        if v >= threshold:
            return band, color
    return DSCR_BANDS[-1][1], DSCR_BANDS[-1][2]


def derive_loan_terms(property_value, down_payment_percent, down_payment_amount, use_amount):
    """Reconcile the two down payment fields and the resulting loan amount.

    Returns ``(down_payment_percent, down_payment_amount, loan_amount)``.
    ``use_amount`` selects which of the two fields is the source of truth.
    """

    value = max(0.0, nz(property_value))
    if use_amount:
        amount = max(0.0, nz(down_payment_amount))
        pct = amount / value * 100 if value > 0 else 0.0
    else:
        pct = min(100.0, max(0.0, nz(down_payment_percent)))
        amount = value * pct / 100
    loan = max(0.0, value - amount)
    return pct, amount, loan


def sync_down_payment(inputs: CalculatorInputs, use_amount: bool) -> CalculatorInputs:
    """Return a copy of ``inputs`` with down payment and loan amount reconciled."""

    pct, amount, loan = derive_loan_terms(
        inputs.property_value,
        inputs.down_payment_percent,
        inputs.down_payment_amount,
        use_amount,
    )
    return inputs.model_copy(
        update={
            "down_payment_percent": min(100.0, pct),
            "down_payment_amount": amount,
            "loan_amount": loan,
        }
    )


def zero_unused_units(inputs: CalculatorInputs) -> CalculatorInputs:
    """Zero unit income slots at or beyond ``number_of_units``."""

    n = inputs.number_of_units
    incomes = [v if i < n else 0.0 for i, v in enumerate(inputs.unit_incomes)]
    return inputs.model_copy(update={"unit_incomes": incomes})


def compute_results(inputs: CalculatorInputs, messages=None) -> CalculatorResults:
    """Compute the full DSCR breakdown for ``inputs``.

    ``messages`` is any object with a ``get_dscr_message(value)`` method,
    normally a ``core.rates.RateProvider``. A failing or missing provider
    falls back to the fixed four-tier message ladder; it never fails the
    calculation.
    """

    payment = monthly_payment(
        inputs.loan_amount,
        inputs.interest_rate,
        inputs.term_years,
        inputs.is_interest_only,
    )
    taxes = monthly_cost(inputs.property_value, inputs.taxes_basis())
    insurance = monthly_cost(inputs.property_value, inputs.insurance_basis())
    hoa = nz(inputs.hoa_fees)
    total = payment + taxes + insurance + hoa
    gross = total_rental_income(
        inputs.rental_income_method,
        inputs.total_rental_income,
        inputs.unit_incomes,
    )
    ratio = dscr(gross, total)

    message: Optional[str] = None
    if messages is not None:
        try:
            message = messages.get_dscr_message(ratio)
        except Exception as exc:
            logger.warning("DSCR message lookup failed, using fallback ladder: %s", exc)
    if not message:
        message = fallback_dscr_message(ratio)

    return CalculatorResults(
        dscr=ratio,
        dscr_message=message,
        monthly_mortgage_payment=payment,
        monthly_taxes=taxes,
        monthly_insurance=insurance,
        monthly_hoa=hoa,
        total_monthly_expenses=total,
        gross_rental_income=gross,
    )


def results_frame(results: CalculatorResults) -> pd.DataFrame:
    """Monthly breakdown as a two-column table for display."""

    return pd.DataFrame(
        [
            {"Item": "Mortgage Payment", "Monthly": results.monthly_mortgage_payment},
            {"Item": "Property Taxes", "Monthly": results.monthly_taxes},
            {"Item": "Insurance", "Monthly": results.monthly_insurance},
            {"Item": "HOA Fees", "Monthly": results.monthly_hoa},
            {"Item": "Total Expenses", "Monthly": results.total_monthly_expenses},
            {"Item": "Gross Rental Income", "Monthly": results.gross_rental_income},
        ]
    )


def summary_csv(inputs: CalculatorInputs, results: CalculatorResults) -> bytes:
    """Single-row CSV of the scenario and its results."""

    row = {
        "State": inputs.property_state,
        "Purpose": "Refinance" if inputs.is_refi else "Purchase",
        "PropertyValue": inputs.property_value,
        "DownPayment": inputs.down_payment_amount,
        "LoanAmount": inputs.loan_amount,
        "Units": inputs.number_of_units,
        "RatePct": inputs.interest_rate,
        "TermYears": inputs.term_years,
        "InterestOnly": inputs.is_interest_only,
        "MortgagePayment": results.monthly_mortgage_payment,
        "Taxes": results.monthly_taxes,
        "Insurance": results.monthly_insurance,
        "HOA": results.monthly_hoa,
        "TotalExpenses": results.total_monthly_expenses,
        "GrossRentalIncome": results.gross_rental_income,
        "DSCR": round(results.dscr, 4),
    }
    buf = io.StringIO()
    pd.DataFrame([row]).to_csv(buf, index=False)
    return buf.getvalue().encode("utf-8")
