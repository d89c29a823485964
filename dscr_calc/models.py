from __future__ import annotations

from typing import Annotated, List, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from dscr_calc.presets import US_STATES

TERM_OPTIONS = (10, 15, 20, 25, 30)
MAX_UNITS = 10


class PercentBased(BaseModel):
    """Annual cost expressed as a percentage of the property value."""

    kind: Literal["percent"] = "percent"
    value: float = Field(default=0.0, ge=0)


class AmountBased(BaseModel):
    """Annual cost entered directly in dollars."""

    kind: Literal["amount"] = "amount"
    value: float = Field(default=0.0, ge=0)


CostBasis = Annotated[Union[PercentBased, AmountBased], Field(discriminator="kind")]


def resolve_basis(percent: float, amount: float) -> Union[PercentBased, AmountBased]:
    """Pick the authoritative variant: a positive amount always wins."""
    if amount > 0:
        return AmountBased(value=amount)
    return PercentBased(value=max(0.0, percent))


class CalculatorInputs(BaseModel):
    model_config = ConfigDict(populate_by_name=True, validate_assignment=True)

    is_refi: bool = Field(default=False, alias="isRefi")
    property_state: str = Field(default="CA", alias="propertyState", min_length=2, max_length=2)
    property_value: float = Field(default=0.0, ge=0, alias="propertyValue")
    down_payment_percent: float = Field(default=25.0, ge=0, le=100, alias="downPaymentPercent")
    down_payment_amount: float = Field(default=0.0, ge=0, alias="downPaymentAmount")
    loan_amount: float = Field(default=0.0, ge=0, alias="loanAmount")
    number_of_units: int = Field(default=1, ge=1, le=MAX_UNITS, alias="numberOfUnits")
    rental_income_method: Literal["total", "perUnit"] = Field(default="total", alias="rentalIncomeMethod")
    total_rental_income: float = Field(default=0.0, ge=0, alias="totalRentalIncome")
    unit_incomes: List[Annotated[float, Field(ge=0)]] = Field(
        default_factory=lambda: [0.0] * MAX_UNITS,
        min_length=MAX_UNITS,
        max_length=MAX_UNITS,
        alias="unitIncomes",
    )
    interest_rate: float = Field(default=6.125, ge=0, le=100, alias="interestRate")
    term_years: int = Field(default=30, alias="termYears")
    is_interest_only: bool = Field(default=False, alias="isInterestOnly")
    taxes_percent: float = Field(default=1.25, ge=0, le=100, alias="taxesPercent")
    taxes_amount: float = Field(default=0.0, ge=0, alias="taxesAmount")
    insurance_percent: float = Field(default=0.35, ge=0, le=100, alias="insurancePercent")
    insurance_amount: float = Field(default=0.0, ge=0, alias="insuranceAmount")
    hoa_fees: float = Field(default=0.0, ge=0, alias="hoaFees")

    @field_validator("property_state")
    @classmethod
    def _upper_state(cls, v: str) -> str:
        v = v.upper()
        if v not in US_STATES:
            raise ValueError(f"unknown state code {v!r}")
        return v

    @field_validator("term_years")
    @classmethod
    def _known_term(cls, v: int) -> int:
        if v not in TERM_OPTIONS:
            raise ValueError(f"term must be one of {TERM_OPTIONS}")
        return v

    def taxes_basis(self) -> Union[PercentBased, AmountBased]:
        return resolve_basis(self.taxes_percent, self.taxes_amount)

    def insurance_basis(self) -> Union[PercentBased, AmountBased]:
        return resolve_basis(self.insurance_percent, self.insurance_amount)


class CalculatorResults(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    dscr: float = 0.0
    dscr_message: str = Field(default="", alias="dscrMessage")
    monthly_mortgage_payment: float = Field(default=0.0, alias="monthlyMortgagePayment")
    monthly_taxes: float = Field(default=0.0, alias="monthlyTaxes")
    monthly_insurance: float = Field(default=0.0, alias="monthlyInsurance")
    monthly_hoa: float = Field(default=0.0, alias="monthlyHOA")
    total_monthly_expenses: float = Field(default=0.0, alias="totalMonthlyExpenses")
    gross_rental_income: float = Field(default=0.0, alias="grossRentalIncome")
