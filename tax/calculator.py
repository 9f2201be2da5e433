"""
Annual personal income tax calculator.
"""
import logging
from .models import TaxConstants, TaxCalculationResult, UserTaxProfile
from .allowances import AllowanceCalculator
from .deductions import DeductionCalculator, calculate_standard_deduction
from .brackets import calculate_bracket_tax, get_bracket_breakdown, get_marginal_rate

logger = logging.getLogger(__name__)


class TaxCalculator:
    """Calculator for annual income tax, allowances and deductions."""

    def __init__(self, constants: TaxConstants):
        self.constants = constants
        self.year = constants.year
        self.allowances = AllowanceCalculator(constants)
        self.deductions = DeductionCalculator(constants)

    def calculate_annual_tax(self, profile: UserTaxProfile) -> TaxCalculationResult:
        """
        Calculate annual tax for a user profile.

        Args:
            profile: User tax profile with income, household facts and claims

        Returns:
            TaxCalculationResult with detailed breakdown
        """
        gross_income = profile.annual_income

        # Standard deduction and allowances come off gross income first
        standard_deduction = calculate_standard_deduction(gross_income, self.constants)
        total_allowances = self.allowances.total_allowances(profile)
        income_after_allowances = max(0.0, gross_income - standard_deduction - total_allowances)

        # Donation cap is based on income after allowances
        breakdown = self.deductions.calculate_deductions(profile, income_after_allowances)

        # Reported total includes the standard deduction, which was already
        # taken above and must not be subtracted twice
        total_deductions = standard_deduction + breakdown.elective_total()
        taxable_income = max(0.0, income_after_allowances - (total_deductions - standard_deduction))

        brackets = self.constants.brackets
        tax_owed = calculate_bracket_tax(taxable_income, brackets)

        refund_or_owed = profile.tax_withheld - tax_owed
        effective_rate = tax_owed / gross_income * 100 if gross_income > 0 else 0.0

        logger.debug(
            f"Tax year {self.year}: gross={gross_income} taxable={taxable_income} owed={tax_owed}"
        )

        return TaxCalculationResult(
            gross_income=gross_income,
            total_allowances=total_allowances,
            total_deductions=total_deductions,
            taxable_income=taxable_income,
            tax_owed=tax_owed,
            tax_withheld=profile.tax_withheld,
            refund_or_owed=refund_or_owed,
            effective_rate=effective_rate,
            breakdown=breakdown,
            marginal_rate=get_marginal_rate(taxable_income, brackets),
            bracket_breakdown=get_bracket_breakdown(taxable_income, brackets)
        )
