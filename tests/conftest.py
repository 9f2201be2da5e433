"""
Shared fixtures for the tax engine tests.
"""
import pytest
from tax.models import TaxBracket, TaxConstants, DeductionCategory
from tax.calculator import TaxCalculator


@pytest.fixture
def tax_brackets():
    return [
        TaxBracket(upper_bound=150000, rate=0.0, label="0-150k"),
        TaxBracket(upper_bound=300000, rate=0.05, label="150k-300k"),
        TaxBracket(upper_bound=500000, rate=0.10, label="300k-500k"),
        TaxBracket(upper_bound=750000, rate=0.15, label="500k-750k"),
        TaxBracket(upper_bound=1000000, rate=0.20, label="750k-1M"),
        TaxBracket(upper_bound=2000000, rate=0.25, label="1M-2M"),
        TaxBracket(upper_bound=5000000, rate=0.30, label="2M-5M"),
        TaxBracket(upper_bound=None, rate=0.35, label="5M+"),
    ]


@pytest.fixture
def tax_constants(tax_brackets):
    return TaxConstants(
        year=2025,
        personal_allowance=60000,
        spouse_allowance=60000,
        senior_allowance=190000,
        child_allowance_base=30000,
        child_allowance_bonus=30000,
        child_bonus_birth_year=2018,
        parent_allowance=30000,
        max_parents=4,
        standard_deduction_rate=0.5,
        max_standard_deduction=100000,
        deduction_caps={
            DeductionCategory.SOCIAL_SECURITY: 9000,
            DeductionCategory.LIFE_INSURANCE: 100000,
            DeductionCategory.HEALTH_INSURANCE: 25000,
            DeductionCategory.PENSION_FUND: 500000,
            DeductionCategory.PROVIDENT_FUND: 500000,
            DeductionCategory.RMF: 500000,
            DeductionCategory.SSF: 200000,
        },
        max_donation_percent=0.10,
        brackets=tax_brackets
    )


@pytest.fixture
def calculator(tax_constants):
    return TaxCalculator(tax_constants)
