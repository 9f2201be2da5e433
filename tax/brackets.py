"""
Progressive bracket tax computation.
"""
from functools import reduce
from typing import List, NamedTuple, Tuple
from .models import TaxBracket, BracketBreakdown


class _FoldState(NamedTuple):
    remaining: float
    tax: float
    previous_bound: float
    slices: Tuple[BracketBreakdown, ...]


def _apply_bracket(state: _FoldState, bracket: TaxBracket) -> _FoldState:
    """Tax the slice of remaining income that falls into one bracket."""
    if state.remaining <= 0:
        return state

    if bracket.upper_bound is None:
        amount_in_bracket = state.remaining
        upper = state.previous_bound
    else:
        width = bracket.upper_bound - state.previous_bound
        amount_in_bracket = min(state.remaining, width)
        upper = bracket.upper_bound

    tax_in_bracket = amount_in_bracket * bracket.rate
    slice_ = BracketBreakdown(
        label=bracket.label,
        lower_bound=state.previous_bound,
        upper_bound=bracket.upper_bound,
        rate=bracket.rate,
        income_in_bracket=amount_in_bracket,
        tax_in_bracket=tax_in_bracket,
    )

    return _FoldState(
        remaining=state.remaining - amount_in_bracket,
        tax=state.tax + tax_in_bracket,
        previous_bound=upper,
        slices=state.slices + (slice_,),
    )


def _walk_brackets(taxable_income: float, brackets: List[TaxBracket]) -> _FoldState:
    initial = _FoldState(max(0.0, taxable_income), 0.0, 0.0, ())
    return reduce(_apply_bracket, brackets, initial)


def calculate_bracket_tax(taxable_income: float, brackets: List[TaxBracket]) -> float:
    """
    Calculate tax owed on taxable income using progressive brackets.

    Args:
        taxable_income: Income after all allowances and deductions
        brackets: Bracket schedule sorted by upper bound, last one unbounded

    Returns:
        Tax owed, unrounded
    """
    if taxable_income <= 0:
        return 0.0

    return _walk_brackets(taxable_income, brackets).tax


def get_bracket_breakdown(taxable_income: float, brackets: List[TaxBracket]) -> List[BracketBreakdown]:
    """Get detailed breakdown of tax by bracket, skipping brackets with no income."""
    return list(_walk_brackets(taxable_income, brackets).slices)


def get_marginal_rate(taxable_income: float, brackets: List[TaxBracket]) -> float:
    """Rate of the bracket the last unit of taxable income falls into."""
    if taxable_income <= 0:
        return 0.0

    for bracket in brackets:
        if bracket.upper_bound is None or taxable_income <= bracket.upper_bound:
            return bracket.rate

    return brackets[-1].rate
