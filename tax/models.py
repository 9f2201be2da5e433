"""
Tax data models for annual personal income tax calculations.
"""
from typing import List, Dict, Optional, Any, Tuple
import math
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from enum import Enum


class EmploymentType(str, Enum):
    """Employment classification of the filer."""
    SALARIED = "salaried"
    SELF_EMPLOYED = "self-employed"
    BUSINESS = "business"


class MaritalStatus(str, Enum):
    """Marital status of the filer."""
    SINGLE = "single"
    MARRIED = "married"


class DeductionCategory(str, Enum):
    """Elective deduction categories a filer may claim."""
    SOCIAL_SECURITY = "social_security"
    LIFE_INSURANCE = "life_insurance"
    HEALTH_INSURANCE = "health_insurance"
    PENSION_FUND = "pension_fund"
    PROVIDENT_FUND = "provident_fund"
    RMF = "rmf"  # Retirement mutual fund
    SSF = "ssf"  # Super savings fund
    DONATIONS = "donations"


# Categories capped by a fixed amount; donations are capped relative to income
FIXED_CAP_CATEGORIES = [c for c in DeductionCategory if c != DeductionCategory.DONATIONS]


class TaxBracket(BaseModel):
    """A single tax bracket with an upper bound and marginal rate."""
    model_config = ConfigDict(frozen=True)

    upper_bound: Optional[float] = Field(None, description="Upper income bound, None for the top bracket")
    rate: float = Field(..., ge=0, le=1, description="Marginal tax rate (0.0 to 1.0)")
    label: str = ""

    @field_validator('upper_bound')
    @classmethod
    def upper_bound_must_be_positive(cls, v):
        if v is not None and v <= 0:
            raise ValueError('Upper bound must be positive')
        return v


class TaxConstants(BaseModel):
    """Allowance amounts, deduction caps and bracket schedule for one tax year."""
    model_config = ConfigDict(frozen=True)

    year: int

    # Allowances
    personal_allowance: float = Field(..., ge=0)
    spouse_allowance: float = Field(..., ge=0)
    senior_allowance: float = Field(..., ge=0)
    child_allowance_base: float = Field(..., ge=0)
    child_allowance_bonus: float = Field(..., ge=0)
    child_bonus_birth_year: int = Field(..., description="Subsequent children born this year or later get the bonus")
    parent_allowance: float = Field(..., ge=0)
    max_parents: int = Field(..., ge=0)

    # Standard (percentage-of-income) deduction
    standard_deduction_rate: float = Field(..., ge=0, le=1)
    max_standard_deduction: float = Field(..., ge=0)

    # Elective deductions
    deduction_caps: Dict[DeductionCategory, float] = Field(..., description="Fixed cap per elective category")
    max_donation_percent: float = Field(..., ge=0, le=1, description="Donation cap as a fraction of pre-donation taxable income")

    brackets: List[TaxBracket] = Field(..., min_length=1, description="Brackets sorted by upper bound")
    metadata: Dict[str, Any] = Field(default_factory=dict, description="Source, citation, notes")

    @field_validator('brackets')
    @classmethod
    def brackets_must_be_sorted(cls, v):
        bounds = [b.upper_bound for b in v[:-1]]
        if any(bound is None for bound in bounds):
            raise ValueError('Only the last bracket may be unbounded')
        if v[-1].upper_bound is not None:
            raise ValueError('Last bracket must be unbounded')
        if any(lower >= upper for lower, upper in zip(bounds, bounds[1:])):
            raise ValueError('Brackets must be sorted by upper bound')
        return v

    @model_validator(mode='after')
    def caps_must_cover_categories(self):
        if DeductionCategory.DONATIONS in self.deduction_caps:
            raise ValueError('Donations are capped by max_donation_percent, not a fixed cap')
        missing = [c.value for c in FIXED_CAP_CATEGORIES if c not in self.deduction_caps]
        if missing:
            raise ValueError(f'Missing deduction caps: {missing}')
        return self

    def deduction_cap(self, category: DeductionCategory) -> float:
        return self.deduction_caps[category]


class Dependent(BaseModel):
    """A dependent child."""
    model_config = ConfigDict(frozen=True)

    birth_year: int = Field(..., ge=1900)


class UserTaxProfile(BaseModel):
    """User profile for tax calculations."""
    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    employment_type: EmploymentType = EmploymentType.SALARIED
    annual_income: float = Field(0.0, ge=0, description="Gross annual income")
    marital_status: MaritalStatus = MaritalStatus.SINGLE
    spouse_has_no_income: bool = False
    is_age_65_or_older: bool = False
    children: Tuple[Dependent, ...] = Field(default_factory=tuple, description="Dependents in the order supplied")
    number_of_parents: int = Field(0, ge=0, description="Supported parents declared")
    claims: Dict[DeductionCategory, float] = Field(
        default_factory=dict, description="Claimed amount per elective category; absent means not claimed"
    )
    tax_withheld: float = Field(0.0, ge=0, description="Tax already withheld during the year")

    @field_validator('claims')
    @classmethod
    def claims_must_be_non_negative(cls, v):
        not_finite = [c.value for c, amount in v.items() if not math.isfinite(amount)]
        if not_finite:
            raise ValueError(f'Claimed amounts must be finite: {not_finite}')
        negative = [c.value for c, amount in v.items() if amount < 0]
        if negative:
            raise ValueError(f'Claimed amounts must be non-negative: {negative}')
        return v

    def claimed_amount(self, category: DeductionCategory) -> Optional[float]:
        """Return the claimed amount, or None if the category is not claimed."""
        return self.claims.get(category)


class DeductionBreakdown(BaseModel):
    """Detailed breakdown of all allowances and deductions."""
    model_config = ConfigDict(frozen=True)

    standard_deduction: float = 0.0

    personal_allowance: float = 0.0
    spouse_allowance: float = 0.0
    senior_allowance: float = 0.0
    child_allowance: float = 0.0
    parent_allowance: float = 0.0

    social_security: float = 0.0
    life_insurance: float = 0.0
    health_insurance: float = 0.0
    pension_fund: float = 0.0
    provident_fund: float = 0.0
    rmf: float = 0.0
    ssf: float = 0.0
    donations: float = 0.0

    def elective_amount(self, category: DeductionCategory) -> float:
        return getattr(self, category.value)

    def elective_total(self) -> float:
        return sum(self.elective_amount(c) for c in DeductionCategory)

    def allowance_total(self) -> float:
        return (
            self.personal_allowance + self.spouse_allowance + self.senior_allowance
            + self.child_allowance + self.parent_allowance
        )


class BracketBreakdown(BaseModel):
    """Income and tax attributed to a single bracket."""
    model_config = ConfigDict(frozen=True)

    label: str
    lower_bound: float
    upper_bound: Optional[float]
    rate: float
    income_in_bracket: float
    tax_in_bracket: float


class TaxCalculationResult(BaseModel):
    """Result of an annual tax calculation."""
    model_config = ConfigDict(frozen=True)

    gross_income: float
    total_allowances: float
    total_deductions: float
    taxable_income: float
    tax_owed: float
    tax_withheld: float
    refund_or_owed: float = Field(..., description="Positive is a refund, negative is additional tax due")
    effective_rate: float = Field(..., description="Tax owed as a percentage of gross income")
    breakdown: DeductionBreakdown

    marginal_rate: float = 0.0
    bracket_breakdown: List[BracketBreakdown] = Field(default_factory=list)

    @property
    def is_refund(self) -> bool:
        return self.refund_or_owed > 0
