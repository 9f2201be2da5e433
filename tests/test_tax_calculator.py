"""
Tests for the annual tax calculator.
"""
import pytest
from tax.models import (
    UserTaxProfile, Dependent, DeductionCategory, MaritalStatus, TaxBracket
)
from tax.calculator import TaxCalculator


def test_single_person_no_claims(calculator):
    """Single filer with 500,000 income and no deductions."""
    profile = UserTaxProfile(annual_income=500000)

    result = calculator.calculate_annual_tax(profile)

    # 500,000 - 100,000 standard - 60,000 personal = 340,000
    # 0 (first 150k) + 7,500 (5% of 150k) + 4,000 (10% of 40k)
    assert result.gross_income == 500000
    assert result.total_allowances == 60000
    assert result.total_deductions == 100000
    assert result.taxable_income == 340000
    assert result.tax_owed == 11500
    assert result.effective_rate == pytest.approx(2.3)
    assert result.marginal_rate == 0.10


def test_married_with_two_children(calculator):
    """Married filer, spouse without income, two children."""
    profile = UserTaxProfile(
        annual_income=1000000,
        marital_status=MaritalStatus.MARRIED,
        spouse_has_no_income=True,
        children=[Dependent(birth_year=2015), Dependent(birth_year=2020)]
    )

    result = calculator.calculate_annual_tax(profile)

    # 60,000 personal + 60,000 spouse + 90,000 children
    assert result.total_allowances == 210000
    assert result.taxable_income == 690000
    assert result.tax_owed == 56000


def test_deductions_exceeding_income(calculator):
    """Taxable income floors at zero when deductions exceed income."""
    profile = UserTaxProfile(
        annual_income=2000000,
        marital_status=MaritalStatus.MARRIED,
        spouse_has_no_income=True,
        children=[Dependent(birth_year=2020)],
        number_of_parents=4,
        claims={
            DeductionCategory.LIFE_INSURANCE: 150000,
            DeductionCategory.HEALTH_INSURANCE: 30000,
            DeductionCategory.PENSION_FUND: 500000,
            DeductionCategory.PROVIDENT_FUND: 500000,
            DeductionCategory.RMF: 500000,
            DeductionCategory.SSF: 200000,
        }
    )

    result = calculator.calculate_annual_tax(profile)

    assert result.total_allowances == 270000
    # Standard deduction plus 1,825,000 of capped elective deductions
    assert result.total_deductions == 1925000
    assert result.taxable_income == 0
    assert result.tax_owed == 0
    assert result.marginal_rate == 0
    assert result.bracket_breakdown == []


def test_standard_deduction_not_subtracted_twice(calculator):
    """Elective deductions reduce taxable income; the standard deduction only once."""
    profile = UserTaxProfile(
        annual_income=500000,
        claims={DeductionCategory.LIFE_INSURANCE: 40000}
    )

    result = calculator.calculate_annual_tax(profile)

    assert result.total_deductions == 140000
    assert result.taxable_income == 300000
    assert result.tax_owed == 7500


def test_fractional_taxable_income_is_taxed(calculator):
    """A fraction of a unit into the 5% band still produces tax."""
    profile = UserTaxProfile(annual_income=310000.1, tax_withheld=1)

    result = calculator.calculate_annual_tax(profile)

    assert result.taxable_income == pytest.approx(150000.1)
    assert result.tax_owed > 0
    assert result.tax_owed == pytest.approx((result.taxable_income - 150000) * 0.05)
    assert result.refund_or_owed == pytest.approx(1 - result.tax_owed)
    assert result.effective_rate == pytest.approx(result.tax_owed / 310000.1 * 100)


def test_donation_cap_uses_income_after_allowances(calculator):
    """Donations are limited to 10% of income after allowances and standard deduction."""
    profile = UserTaxProfile(
        annual_income=500000,
        claims={DeductionCategory.DONATIONS: 100000}
    )

    result = calculator.calculate_annual_tax(profile)

    # Cap base is 340,000, so at most 34,000 counts
    assert result.breakdown.donations == pytest.approx(34000)
    assert result.taxable_income == pytest.approx(306000)


def test_refund_when_withheld_exceeds_owed(calculator):
    """Positive refund_or_owed is a refund."""
    profile = UserTaxProfile(annual_income=500000, tax_withheld=30000)

    result = calculator.calculate_annual_tax(profile)

    assert result.tax_withheld == 30000
    assert result.refund_or_owed == 18500
    assert result.is_refund


def test_additional_tax_when_withheld_is_short(calculator):
    """Negative refund_or_owed is tax still due."""
    profile = UserTaxProfile(annual_income=500000, tax_withheld=10000)

    result = calculator.calculate_annual_tax(profile)

    assert result.refund_or_owed == -1500
    assert not result.is_refund


def test_balanced_withholding(calculator):
    profile = UserTaxProfile(annual_income=500000, tax_withheld=11500)

    result = calculator.calculate_annual_tax(profile)

    assert result.refund_or_owed == 0


def test_zero_income(calculator):
    """Zero income produces zero tax and a zero effective rate."""
    result = calculator.calculate_annual_tax(UserTaxProfile(annual_income=0))

    assert result.gross_income == 0
    assert result.taxable_income == 0
    assert result.tax_owed == 0
    assert result.effective_rate == 0
    assert result.breakdown.standard_deduction == 0


def test_senior_allowance_covers_income(calculator):
    """Senior allowance applies only when flagged."""
    senior = calculator.calculate_annual_tax(
        UserTaxProfile(annual_income=500000, is_age_65_or_older=True)
    )
    assert senior.total_allowances == 250000
    assert senior.taxable_income == 150000
    assert senior.tax_owed == 0
    assert senior.breakdown.senior_allowance == 190000


def test_result_breakdown_matches_totals(calculator):
    profile = UserTaxProfile(
        annual_income=1200000,
        marital_status=MaritalStatus.MARRIED,
        spouse_has_no_income=True,
        is_age_65_or_older=True,
        children=[Dependent(birth_year=2019), Dependent(birth_year=2021)],
        number_of_parents=2,
        claims={
            DeductionCategory.SOCIAL_SECURITY: 9000,
            DeductionCategory.HEALTH_INSURANCE: 10000,
            DeductionCategory.DONATIONS: 5000,
        }
    )

    result = calculator.calculate_annual_tax(profile)
    breakdown = result.breakdown

    assert breakdown.allowance_total() == result.total_allowances
    assert breakdown.standard_deduction + breakdown.elective_total() == result.total_deductions
    assert sum(b.tax_in_bracket for b in result.bracket_breakdown) == pytest.approx(result.tax_owed)
    assert sum(b.income_in_bracket for b in result.bracket_breakdown) == pytest.approx(result.taxable_income)


def test_calculation_is_idempotent(calculator):
    """Same profile, identical result."""
    profile = UserTaxProfile(
        annual_income=873456.78,
        marital_status=MaritalStatus.MARRIED,
        children=[Dependent(birth_year=2012), Dependent(birth_year=2019)],
        claims={DeductionCategory.DONATIONS: 25000, DeductionCategory.RMF: 40000},
        tax_withheld=20000
    )

    first = calculator.calculate_annual_tax(profile)
    second = calculator.calculate_annual_tax(profile)

    assert first == second
    assert first.model_dump() == second.model_dump()


@pytest.mark.parametrize("income", [0, 1, 99999.99, 150000, 340000, 1000000, 7500000])
def test_taxable_income_and_tax_never_negative(calculator, income):
    profile = UserTaxProfile(
        annual_income=income,
        marital_status=MaritalStatus.MARRIED,
        spouse_has_no_income=True,
        number_of_parents=9,
        claims={c: 1000000 for c in DeductionCategory}
    )

    result = calculator.calculate_annual_tax(profile)

    assert result.taxable_income >= 0
    assert result.tax_owed >= 0
    assert result.effective_rate >= 0


def test_alternate_schedule(tax_constants):
    """The calculator uses whatever schedule it is given."""
    flat = tax_constants.model_copy(update={
        "year": 2030,
        "brackets": [TaxBracket(upper_bound=None, rate=0.10, label="flat")]
    })
    calculator = TaxCalculator(flat)

    result = calculator.calculate_annual_tax(UserTaxProfile(annual_income=500000))

    assert calculator.year == 2030
    assert result.tax_owed == 34000
    assert result.marginal_rate == 0.10
