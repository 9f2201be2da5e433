"""
Standard and elective deductions.
"""
from .allowances import AllowanceCalculator
from .models import (
    TaxConstants, UserTaxProfile, DeductionBreakdown, DeductionCategory,
    FIXED_CAP_CATEGORIES
)


def calculate_standard_deduction(annual_income: float, constants: TaxConstants) -> float:
    """Standard expense deduction: a share of income, capped."""
    return min(annual_income * constants.standard_deduction_rate, constants.max_standard_deduction)


class DeductionCalculator:
    """Calculator for the deduction breakdown of a profile."""

    def __init__(self, constants: TaxConstants):
        self.constants = constants
        self.allowances = AllowanceCalculator(constants)

    def calculate_deductions(
        self, profile: UserTaxProfile, taxable_income_before_deductions: float
    ) -> DeductionBreakdown:
        """
        Calculate capped deductions and allowance sub-amounts.

        Args:
            profile: User tax profile with claims
            taxable_income_before_deductions: Income left after the standard
                deduction and allowances; the donation cap is a share of it

        Returns:
            DeductionBreakdown with every field capped
        """
        elective = {
            category.value: self._capped_claim(profile, category)
            for category in FIXED_CAP_CATEGORIES
        }
        elective[DeductionCategory.DONATIONS.value] = self._capped_donation(
            profile, taxable_income_before_deductions
        )

        return DeductionBreakdown(
            standard_deduction=calculate_standard_deduction(profile.annual_income, self.constants),
            personal_allowance=self.allowances.personal_allowance(profile),
            spouse_allowance=self.allowances.spouse_allowance(profile),
            senior_allowance=self.allowances.senior_allowance(profile),
            child_allowance=self.allowances.child_allowance(profile),
            parent_allowance=self.allowances.parent_allowance(profile),
            **elective
        )

    def _capped_claim(self, profile: UserTaxProfile, category: DeductionCategory) -> float:
        amount = profile.claimed_amount(category)
        if amount is None:
            return 0.0
        return min(amount, self.constants.deduction_cap(category))

    def _capped_donation(self, profile: UserTaxProfile, taxable_income_before_deductions: float) -> float:
        amount = profile.claimed_amount(DeductionCategory.DONATIONS)
        if amount is None:
            return 0.0
        return min(amount, taxable_income_before_deductions * self.constants.max_donation_percent)
