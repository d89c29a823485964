import os
import sys

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))

from dscr_calc.calculators import (
    compute_results,
    derive_loan_terms,
    dscr,
    dscr_band,
    fallback_dscr_message,
    monthly_cost,
    monthly_insurance,
    monthly_payment,
    monthly_taxes,
    nz,
    results_frame,
    summary_csv,
    sync_down_payment,
    total_rental_income,
    zero_unused_units,
)
from dscr_calc.models import AmountBased, CalculatorInputs, PercentBased
from dscr_calc.presets import DSCR_FALLBACK_LADDER


def scenario_inputs(**overrides):
    data = {
        "property_value": 500000,
        "down_payment_percent": 25,
        "interest_rate": 6.125,
        "term_years": 30,
        "taxes_percent": 1.25,
        "insurance_percent": 0.35,
        "total_rental_income": 3500,
    }
    data.update(overrides)
    return sync_down_payment(CalculatorInputs(**data), use_amount=False)


def test_nz_handles_missing_values():
    assert nz(None) == 0.0
    assert nz(float("nan"), 1.5) == 1.5
    assert nz("abc") == 0.0
    assert nz("2.5") == 2.5


def test_payment_guards_return_zero():
    assert monthly_payment(0, 6.0, 30) == 0.0
    assert monthly_payment(-100, 6.0, 30) == 0.0
    assert monthly_payment(100000, 0, 30) == 0.0
    assert monthly_payment(100000, 6.0, 0) == 0.0


def test_interest_only_payment():
    for L, r, t in [(375000, 6.125, 30), (100000, 7.5, 10), (1, 0.5, 15)]:
        assert monthly_payment(L, r, t, True) == pytest.approx(L * (r / 100) / 12)


def test_amortized_payment_repays_more_than_principal():
    for L, r, t in [(375000, 6.125, 30), (100000, 0.01, 10), (50000, 12.0, 15)]:
        pmt = monthly_payment(L, r, t)
        assert pmt * t * 12 > L


def test_tiny_rate_uses_linear_amortization():
    assert monthly_payment(120000, 1e-10, 10) == pytest.approx(1000.0)


def test_scenario_payment():
    pmt = monthly_payment(375000, 6.125, 30)
    assert abs(pmt - 2278.54) < 0.5


def test_taxes_and_insurance_override_rule():
    assert monthly_taxes(500000, 1.25, 0) == pytest.approx(520.8333, abs=1e-3)
    assert monthly_insurance(500000, 0.35, 0) == pytest.approx(145.8333, abs=1e-3)
    for value in (0, 100000, 5_000_000):
        for pct in (0, 1.0, 3.5):
            assert monthly_taxes(value, pct, 2400) == pytest.approx(200.0)
            assert monthly_insurance(value, pct, 1800) == pytest.approx(150.0)


def test_monthly_cost_tagged_basis():
    assert monthly_cost(500000, PercentBased(value=1.25)) == pytest.approx(monthly_taxes(500000, 1.25, 0))
    assert monthly_cost(500000, AmountBased(value=2400)) == pytest.approx(200.0)


def test_inputs_resolve_basis():
    inputs = CalculatorInputs(taxes_percent=1.0, taxes_amount=3000, insurance_percent=0.5)
    assert isinstance(inputs.taxes_basis(), AmountBased)
    assert inputs.taxes_basis().value == 3000
    assert isinstance(inputs.insurance_basis(), PercentBased)
    assert inputs.insurance_basis().value == 0.5


def test_total_rental_income_methods():
    units = [1000, 1200, 900, 0, 0, 0, 0, 0, 0, 0]
    assert total_rental_income("total", 3500, units) == 3500
    assert total_rental_income("perUnit", 3500, units) == 3100


def test_per_unit_sums_every_slot_until_zeroed():
    inputs = CalculatorInputs(
        number_of_units=2,
        rental_income_method="perUnit",
        unit_incomes=[1000, 1200, 900, 0, 0, 0, 0, 0, 0, 0],
    )
    assert total_rental_income("perUnit", 0, inputs.unit_incomes) == 3100
    zeroed = zero_unused_units(inputs)
    assert zeroed.unit_incomes[:3] == [1000, 1200, 0]
    assert total_rental_income("perUnit", 0, zeroed.unit_incomes) == 2200


def test_dscr_zero_sentinels():
    assert dscr(5000, 0) == 0.0
    assert dscr(5000, -10) == 0.0
    assert dscr(0, 2500) == 0.0
    assert dscr(3000, 2000) == pytest.approx(1.5)


def test_fallback_ladder_thresholds():
    msgs = [m for _, m in DSCR_FALLBACK_LADDER]
    assert fallback_dscr_message(1.25) == msgs[0]
    assert fallback_dscr_message(3.0) == msgs[0]
    assert fallback_dscr_message(1.2499) == msgs[1]
    assert fallback_dscr_message(1.0) == msgs[1]
    assert fallback_dscr_message(0.75) == msgs[2]
    assert fallback_dscr_message(0.7499) == msgs[3]
    assert fallback_dscr_message(0) == msgs[3]


def test_dscr_band_colors():
    assert dscr_band(1.3)[0] == "success"
    assert dscr_band(1.0)[0] == "primary"
    assert dscr_band(0.8)[0] == "warning"
    assert dscr_band(0.1)[0] == "danger"


def test_derive_loan_terms_percent_mode():
    pct, amount, loan = derive_loan_terms(500000, 25, 0, use_amount=False)
    assert pct == 25
    assert amount == 125000
    assert loan == 375000


def test_derive_loan_terms_amount_mode():
    pct, amount, loan = derive_loan_terms(400000, 0, 100000, use_amount=True)
    assert pct == pytest.approx(25.0)
    assert loan == 300000
    assert derive_loan_terms(0, 0, 5000, use_amount=True) == (0.0, 5000, 0.0)
    assert derive_loan_terms(100000, 0, 150000, use_amount=True)[2] == 0.0


def test_scenario_results():
    inputs = scenario_inputs()
    assert inputs.down_payment_amount == 125000
    assert inputs.loan_amount == 375000
    res = compute_results(inputs)
    assert abs(res.monthly_mortgage_payment - 2278.54) < 0.5
    assert res.monthly_taxes == pytest.approx(520.83, abs=0.01)
    assert res.monthly_insurance == pytest.approx(145.83, abs=0.01)
    assert res.monthly_hoa == 0
    assert abs(res.total_monthly_expenses - 2945.2) < 1.0
    assert abs(res.dscr - 1.188) < 0.002
    assert res.gross_rental_income == 3500
    assert res.total_monthly_expenses == pytest.approx(
        res.monthly_mortgage_payment + res.monthly_taxes + res.monthly_insurance + res.monthly_hoa
    )
    assert res.dscr_message == fallback_dscr_message(res.dscr)


def test_compute_results_uses_message_provider():
    class Messages:
        def get_dscr_message(self, value):
            return f"ratio {value:.2f}"

    res = compute_results(scenario_inputs(), Messages())
    assert res.dscr_message == "ratio 1.19"


def test_compute_results_survives_failing_provider():
    class Broken:
        def get_dscr_message(self, value):
            raise RuntimeError("boom")

    res = compute_results(scenario_inputs(), Broken())
    assert res.dscr > 0
    assert res.dscr_message == fallback_dscr_message(res.dscr)


def test_compute_results_without_expenses():
    res = compute_results(CalculatorInputs(total_rental_income=2000, taxes_percent=0, insurance_percent=0))
    assert res.total_monthly_expenses == 0
    assert res.dscr == 0


def test_results_frame_and_csv():
    inputs = scenario_inputs()
    res = compute_results(inputs)
    frame = results_frame(res)
    assert list(frame["Item"])[-1] == "Gross Rental Income"
    assert frame.loc[frame["Item"] == "Total Expenses", "Monthly"].iloc[0] == res.total_monthly_expenses
    csv = summary_csv(inputs, res)
    assert csv.startswith(b"State,Purpose,PropertyValue")
    assert b"CA,Purchase,500000" in csv
