DISCLAIMER = (
    "This calculator is for informational purposes only and does not guarantee loan approval. "
    "Results are estimates; lender overlays, appraisal findings, and underwriter discretion prevail."
)

ABOUT_DSCR = (
    "Debt Service Coverage Ratio (DSCR) loans are specialized mortgage products designed for real estate "
    "investors. Unlike traditional mortgages that focus on the borrower's personal income, DSCR loans "
    "primarily evaluate the property's ability to generate income relative to its expenses.\n\n"
    "The DSCR is calculated by dividing the property's gross rental income by its total debt service "
    "(mortgage payment, taxes, insurance, and HOA fees). Lenders typically look for a DSCR of 1.25 or "
    "higher, indicating that the property generates 25% more income than needed to cover its expenses."
)

DEFAULT_STATE = "CA"

# Used when the remote rate documents cannot be loaded.
FALLBACK_INTEREST_RATE = 6.125
FALLBACK_STATE_RATES = {"taxes": 1.25, "insurance": 0.35}

DEFAULT_INPUTS = {
    "is_refi": False,
    "property_state": DEFAULT_STATE,
    "property_value": 0.0,
    "down_payment_percent": 25.0,
    "down_payment_amount": 0.0,
    "loan_amount": 0.0,
    "number_of_units": 1,
    "rental_income_method": "total",
    "total_rental_income": 0.0,
    "unit_incomes": [0.0] * 10,
    "interest_rate": FALLBACK_INTEREST_RATE,
    "term_years": 30,
    "is_interest_only": False,
    "taxes_percent": FALLBACK_STATE_RATES["taxes"],
    "taxes_amount": 0.0,
    "insurance_percent": FALLBACK_STATE_RATES["insurance"],
    "insurance_amount": 0.0,
    "hoa_fees": 0.0,
}

# Lookup keys for the default rate inside the interest rate document.
DEFAULT_RATE_TYPE = "dsceInvestmentProperty"
DEFAULT_RATE_TERM = 30

NO_MESSAGE = "No message available for this DSCR value"

# Ordered high to low; the first threshold the DSCR meets wins.
DSCR_FALLBACK_LADDER = [
    (1.25, "Your ratios are as good as they get, you are in great shape to qualify"),
    (1.0, "You meet the requirements for most loans"),
    (
        0.75,
        "Your rent does not cover your payment, but we may still be able to qualify you for this loan "
        "(rates are likely going to be higher due to negative cash flow)",
    ),
    (
        float("-inf"),
        "Your rent is significantly below your mortgage payment. There is a slight chance we can still "
        "proceed, contact our office to discuss details",
    ),
]

DSCR_BANDS = [
    (1.25, "success", "#16a34a"),
    (1.0, "primary", "#2563eb"),
    (0.75, "warning", "#d97706"),
    (float("-inf"), "danger", "#dc2626"),
]

US_STATES = {
    "AL": "Alabama", "AK": "Alaska", "AZ": "Arizona", "AR": "Arkansas", "CA": "California",
    "CO": "Colorado", "CT": "Connecticut", "DE": "Delaware", "FL": "Florida", "GA": "Georgia",
    "HI": "Hawaii", "ID": "Idaho", "IL": "Illinois", "IN": "Indiana", "IA": "Iowa",
    "KS": "Kansas", "KY": "Kentucky", "LA": "Louisiana", "ME": "Maine", "MD": "Maryland",
    "MA": "Massachusetts", "MI": "Michigan", "MN": "Minnesota", "MS": "Mississippi", "MO": "Missouri",
    "MT": "Montana", "NE": "Nebraska", "NV": "Nevada", "NH": "New Hampshire", "NJ": "New Jersey",
    "NM": "New Mexico", "NY": "New York", "NC": "North Carolina", "ND": "North Dakota", "OH": "Ohio",
    "OK": "Oklahoma", "OR": "Oregon", "PA": "Pennsylvania", "RI": "Rhode Island", "SC": "South Carolina",
    "SD": "South Dakota", "TN": "Tennessee", "TX": "Texas", "UT": "Utah", "VT": "Vermont",
    "VA": "Virginia", "WA": "Washington", "WV": "West Virginia", "WI": "Wisconsin", "WY": "Wyoming",
    "DC": "District of Columbia",
}
