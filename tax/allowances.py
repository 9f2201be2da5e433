"""
Household allowances: personal, spouse, senior, child and parent.
"""
from typing import Sequence
from .models import TaxConstants, UserTaxProfile, Dependent, MaritalStatus


def calculate_child_allowance(children: Sequence[Dependent], constants: TaxConstants) -> float:
    """
    Calculate total child allowance.

    Every child receives the base allowance. Children after the first one
    in the supplied order also receive the bonus when born in or after
    the bonus birth year. Order is taken as given, never sorted.
    """
    total = 0.0

    for index, child in enumerate(children):
        total += constants.child_allowance_base
        if index >= 1 and child.birth_year >= constants.child_bonus_birth_year:
            total += constants.child_allowance_bonus

    return total


class AllowanceCalculator:
    """Calculator for allowances granted from household status."""

    def __init__(self, constants: TaxConstants):
        self.constants = constants

    def personal_allowance(self, profile: UserTaxProfile) -> float:
        return self.constants.personal_allowance

    def spouse_allowance(self, profile: UserTaxProfile) -> float:
        if profile.marital_status == MaritalStatus.MARRIED and profile.spouse_has_no_income:
            return self.constants.spouse_allowance
        return 0.0

    def senior_allowance(self, profile: UserTaxProfile) -> float:
        return self.constants.senior_allowance if profile.is_age_65_or_older else 0.0

    def child_allowance(self, profile: UserTaxProfile) -> float:
        return calculate_child_allowance(profile.children, self.constants)

    def eligible_parents(self, profile: UserTaxProfile) -> int:
        return min(profile.number_of_parents, self.constants.max_parents)

    def parent_allowance(self, profile: UserTaxProfile) -> float:
        return self.eligible_parents(profile) * self.constants.parent_allowance

    def total_allowances(self, profile: UserTaxProfile) -> float:
        """Sum of every allowance the profile qualifies for."""
        return (
            self.personal_allowance(profile)
            + self.spouse_allowance(profile)
            + self.senior_allowance(profile)
            + self.child_allowance(profile)
            + self.parent_allowance(profile)
        )
