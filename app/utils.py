"""
Utility functions for the tax calculator front end.
"""
from typing import Optional, List, Dict, Any
from tax.models import (
    UserTaxProfile, Dependent, DeductionCategory, EmploymentType, MaritalStatus
)


DEDUCTION_LABELS = {
    DeductionCategory.SOCIAL_SECURITY: "Social Security",
    DeductionCategory.LIFE_INSURANCE: "Life Insurance",
    DeductionCategory.HEALTH_INSURANCE: "Health Insurance",
    DeductionCategory.PENSION_FUND: "Pension Fund",
    DeductionCategory.PROVIDENT_FUND: "Provident Fund",
    DeductionCategory.RMF: "Retirement Mutual Fund (RMF)",
    DeductionCategory.SSF: "Super Savings Fund (SSF)",
    DeductionCategory.DONATIONS: "Donations",
}

ALLOWANCE_LABELS = {
    "personal_allowance": "Personal Allowance",
    "spouse_allowance": "Spouse Allowance",
    "senior_allowance": "Senior Allowance (65+)",
    "child_allowance": "Child Allowance",
    "parent_allowance": "Parent Allowance",
}


def build_profile(form: Dict[str, Any]) -> UserTaxProfile:
    """
    Build a tax profile from raw form values.

    Deductions are submitted as a checkbox flag plus an amount per
    category; only checked categories become claims.

    Args:
        form: Dictionary of form field values

    Returns:
        UserTaxProfile ready for calculation
    """
    claims = {}
    for category in DeductionCategory:
        entry = form.get("deductions", {}).get(category.value)
        if entry and entry.get("claimed"):
            claims[category] = float(entry.get("amount", 0.0))

    children = [Dependent(birth_year=int(year)) for year in form.get("child_birth_years", [])]

    return UserTaxProfile(
        employment_type=EmploymentType(form.get("employment_type", EmploymentType.SALARIED.value)),
        annual_income=float(form.get("annual_income", 0.0)),
        marital_status=MaritalStatus(form.get("marital_status", MaritalStatus.SINGLE.value)),
        spouse_has_no_income=bool(form.get("spouse_has_no_income", False)),
        is_age_65_or_older=bool(form.get("is_age_65_or_older", False)),
        children=children,
        number_of_parents=int(form.get("number_of_parents", 0)),
        claims=claims,
        tax_withheld=float(form.get("tax_withheld", 0.0))
    )


def format_currency(amount: float, symbol: str = "฿") -> str:
    """Format currency amount as whole units with thousands separators."""
    sign = "-" if round(amount) < 0 else ""
    return f"{sign}{symbol}{abs(amount):,.0f}"


def format_percent(value: float) -> str:
    """Format a percentage value with 2 decimal places."""
    return f"{value:.2f}%"


def describe_refund(refund_or_owed: float) -> str:
    """Describe a refund-or-owed amount for display."""
    if refund_or_owed > 0:
        return f"Refund due: {format_currency(refund_or_owed)}"
    if refund_or_owed < 0:
        return f"Additional tax owed: {format_currency(-refund_or_owed)}"
    return "Balanced: nothing owed, no refund"


def get_employment_type_options() -> List[Dict[str, str]]:
    """Get employment type options for UI dropdown."""
    return [
        {"value": "salaried", "label": "Salaried employee"},
        {"value": "self-employed", "label": "Self-employed"},
        {"value": "business", "label": "Business owner"}
    ]


def get_year_options(available: List[int], preferred: Optional[int] = None) -> List[int]:
    """Order tax year options with the preferred year first when present."""
    if preferred in available:
        return [preferred] + [y for y in available if y != preferred]
    return list(available)
