"""
Annual personal income tax engine.
"""
from .models import (
    TaxConstants, TaxBracket, UserTaxProfile, Dependent, DeductionCategory,
    EmploymentType, MaritalStatus, DeductionBreakdown, TaxCalculationResult
)
from .calculator import TaxCalculator
from .loader import TaxTableLoader

__version__ = "0.1.0"
