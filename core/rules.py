from __future__ import annotations
from typing import Literal, List, Dict, Any
from pydantic import BaseModel, Field

from dscr_calc.models import CalculatorInputs, CalculatorResults


class RuleResult(BaseModel):
    code: str
    severity: Literal["info", "warn", "critical"]
    message: str
    context: Dict[str, Any] = Field(default_factory=dict)


def evaluate_rules(inputs: CalculatorInputs, results: CalculatorResults) -> List[RuleResult]:
    res: List[RuleResult] = []

    if results.gross_rental_income <= 0:
        res.append(
            RuleResult(
                code="NO_RENTAL_INCOME",
                severity="warn",
                message="No rental income entered; DSCR cannot be above zero.",
            )
        )

    if results.total_monthly_expenses > 0 and results.gross_rental_income > 0:
        if results.dscr < 0.75:
            res.append(
                RuleResult(
                    code="DSCR_BELOW_MINIMUM",
                    severity="critical",
                    message="DSCR below 0.75; most programs will not qualify this property.",
                    context={"dscr": round(results.dscr, 4)},
                )
            )
        elif results.dscr < 1.0:
            res.append(
                RuleResult(
                    code="DSCR_BELOW_ONE",
                    severity="warn",
                    message="Rent does not cover the full monthly payment (negative cash flow).",
                    context={"dscr": round(results.dscr, 4)},
                )
            )

    if inputs.loan_amount <= 0:
        res.append(
            RuleResult(
                code="NO_LOAN_AMOUNT",
                severity="info",
                message="Loan amount is zero; no mortgage payment is included.",
            )
        )

    if inputs.rental_income_method == "perUnit":
        extra = [v for v in inputs.unit_incomes[inputs.number_of_units:] if v > 0]
        if extra:
            res.append(
                RuleResult(
                    code="PER_UNIT_SLOTS_IGNORED",
                    severity="info",
                    message="Rent entered for units beyond the unit count is ignored.",
                    context={"ignored_slots": len(extra)},
                )
            )

    if inputs.is_interest_only:
        res.append(
            RuleResult(
                code="INTEREST_ONLY",
                severity="info",
                message="Payment is interest-only; principal is not reduced.",
            )
        )

    return res


def has_blocking(results: List[RuleResult]) -> bool:
    return any(r.severity == "critical" for r in results)
