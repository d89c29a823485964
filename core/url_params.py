"""Shareable-link encoding of calculator inputs.

The mapping is value-exact for every encoded field but deliberately lossy:
``downPaymentPercent``, ``taxesAmount`` and ``insuranceAmount`` are never
written, so a decoded link always comes back in percent mode for taxes and
insurance and the down payment percent has to be recomputed from the amount.
"""

from __future__ import annotations

import logging
import math
import re
from typing import Any, Dict, Mapping, Optional, Union
from urllib.parse import parse_qs, urlencode, urlsplit, urlunsplit

from pydantic import ValidationError

from dscr_calc.models import MAX_UNITS, CalculatorInputs

logger = logging.getLogger(__name__)

# Leading numeric prefix, the way a browser's parseFloat reads "12.5abc".
_NUMBER_RE = re.compile(r"^\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)")

BOOL_PARAMS = {"isRefi": "is_refi", "isInterestOnly": "is_interest_only"}
NUMBER_PARAMS = {
    "propertyValue": "property_value",
    "downPaymentAmount": "down_payment_amount",
    "loanAmount": "loan_amount",
    "numberOfUnits": "number_of_units",
    "totalRentalIncome": "total_rental_income",
    "interestRate": "interest_rate",
    "termYears": "term_years",
    "taxesPercent": "taxes_percent",
    "insurancePercent": "insurance_percent",
    "hoaFees": "hoa_fees",
}
RENTAL_METHODS = ("total", "perUnit")


def format_number(value) -> str:
    """Shortest string that parses back to the same float."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    v = float(value)
    if v.is_integer():
        return str(int(v))
    return repr(v)


def encode_params(inputs: CalculatorInputs) -> Dict[str, str]:
    params: Dict[str, str] = {
        "isRefi": format_number(inputs.is_refi),
        "propertyValue": format_number(inputs.property_value),
        "downPaymentAmount": format_number(inputs.down_payment_amount),
        "loanAmount": format_number(inputs.loan_amount),
        "numberOfUnits": format_number(inputs.number_of_units),
        "rentalIncomeMethod": inputs.rental_income_method,
        "totalRentalIncome": format_number(inputs.total_rental_income),
    }
    if inputs.rental_income_method == "perUnit":
        for i, income in enumerate(inputs.unit_incomes):
            if income > 0:
                params[f"unitIncome{i}"] = format_number(income)
    params.update(
        {
            "interestRate": format_number(inputs.interest_rate),
            "termYears": format_number(inputs.term_years),
            "isInterestOnly": format_number(inputs.is_interest_only),
            "taxesPercent": format_number(inputs.taxes_percent),
            "insurancePercent": format_number(inputs.insurance_percent),
            "hoaFees": format_number(inputs.hoa_fees),
            "propertyState": inputs.property_state,
        }
    )
    return params


def build_shareable_url(base_url: str, inputs: CalculatorInputs) -> str:
    """Replace the query string of ``base_url``; path and fragment are kept."""
    parts = urlsplit(base_url)
    return urlunsplit(
        (parts.scheme, parts.netloc, parts.path, urlencode(encode_params(inputs)), parts.fragment)
    )


def parse_bool(value: Optional[str]) -> Optional[bool]:
    if value is None:
        return None
    return value.lower() == "true"


def parse_number(value: Optional[str]) -> Optional[float]:
    if value is None:
        return None
    m = _NUMBER_RE.match(value)
    if not m:
        return None
    num = float(m.group(1))
    if math.isnan(num) or math.isinf(num):
        return None
    return num


def _single_values(query: Union[str, Mapping[str, Any]]) -> Dict[str, str]:
    if isinstance(query, str):
        parsed = parse_qs(query.lstrip("?"), keep_blank_values=True)
        return {k: v[0] for k, v in parsed.items() if v}
    out = {}
    for key, value in query.items():
        if isinstance(value, (list, tuple)):
            if not value:
                continue
            value = value[0]
        out[key] = str(value)
    return out


def decode_params(query: Union[str, Mapping[str, Any]]) -> Dict[str, Any]:
    """Parse query parameters into a partial input record.

    Keys are ``CalculatorInputs`` field names. Anything missing or
    unparseable is simply left out. ``unit_incomes`` has ten slots with
    ``None`` for indices that were not supplied.
    """
    params = _single_values(query)
    out: Dict[str, Any] = {}

    for name, field in BOOL_PARAMS.items():
        value = parse_bool(params.get(name))
        if value is not None:
            out[field] = value
    for name, field in NUMBER_PARAMS.items():
        value = parse_number(params.get(name))
        if value is not None:
            out[field] = value

    method = params.get("rentalIncomeMethod")
    if method in RENTAL_METHODS:
        out["rental_income_method"] = method

    unit_incomes = [parse_number(params.get(f"unitIncome{i}")) for i in range(MAX_UNITS)]
    if any(v is not None for v in unit_incomes):
        out["unit_incomes"] = unit_incomes

    state = params.get("propertyState")
    if state:
        out["property_state"] = state
    return out


def _field_name(loc_head) -> str:
    for name, info in CalculatorInputs.model_fields.items():
        if loc_head in (name, info.alias):
            return name
    return str(loc_head)


def merge_params(defaults: CalculatorInputs, decoded: Mapping[str, Any]) -> CalculatorInputs:
    """Overlay decoded parameters on ``defaults``.

    Unit incomes are merged slot by slot. Values that fail validation are
    dropped with a warning and the default is kept for that field.
    """
    data = defaults.model_dump()
    for key, value in decoded.items():
        if key == "unit_incomes":
            merged = list(data["unit_incomes"])
            for i, income in enumerate(value[:MAX_UNITS]):
                if income is not None:
                    merged[i] = income
            data["unit_incomes"] = merged
        elif key in data:
            data[key] = value

    try:
        return CalculatorInputs.model_validate(data)
    except ValidationError as exc:
        fallback = defaults.model_dump()
        for err in exc.errors():
            name = _field_name(err["loc"][0]) if err["loc"] else ""
            if name in fallback:
                logger.warning("Ignoring invalid parameter %s=%r: %s", name, data.get(name), err["msg"])
                data[name] = fallback[name]
    return CalculatorInputs.model_validate(data)
