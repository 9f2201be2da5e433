"""
Main Streamlit application for the annual income tax calculator.
"""
import streamlit as st
import pandas as pd
import plotly.express as px
from datetime import date
from typing import Dict, Any, Optional
import os
import sys

from dotenv import load_dotenv

# Add parent directory to path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from tax.models import DeductionCategory, MaritalStatus, TaxCalculationResult
from tax.loader import TaxTableLoader
from tax.calculator import TaxCalculator
from app.utils import (
    build_profile, format_currency, format_percent, describe_refund,
    get_employment_type_options, get_year_options, DEDUCTION_LABELS, ALLOWANCE_LABELS
)

# Load environment variables
load_dotenv()

DEFAULT_TAX_YEAR = int(os.getenv("TAX_YEAR", "2025"))


# Page configuration
st.set_page_config(
    page_title="Annual Income Tax Calculator",
    page_icon="🧮",
    layout="wide",
    initial_sidebar_state="expanded"
)

# Initialize session state
if 'tax_tables' not in st.session_state:
    st.session_state.tax_tables = None
if 'tax_calc' not in st.session_state:
    st.session_state.tax_calc = None


def load_tax_tables(year: int) -> bool:
    """Load tax tables for a specific year."""
    try:
        loader = TaxTableLoader()
        tax_tables = loader.load_year(year)
        if tax_tables:
            st.session_state.tax_tables = tax_tables
            return True
        else:
            st.error(f"No tax tables found for year {year}. Please import tax tables first.")
            return False
    except Exception as e:
        st.error(f"Error loading tax tables: {str(e)}")
        return False


def calculate_tax(form: Dict[str, Any], tax_year: int) -> Optional[TaxCalculationResult]:
    """Calculate tax for the submitted form values."""
    if not st.session_state.tax_tables or st.session_state.tax_tables.year != tax_year:
        if not load_tax_tables(tax_year):
            return None

    try:
        profile = build_profile(form)
        calculator = TaxCalculator(st.session_state.tax_tables)
        result = calculator.calculate_annual_tax(profile)
        st.session_state.tax_calc = result
        return result
    except Exception as e:
        st.error(f"Error calculating tax: {str(e)}")
        return None


def collect_form() -> Dict[str, Any]:
    """Render the profile inputs and return raw form values."""
    col1, col2 = st.columns(2)

    with col1:
        st.subheader("Income")

        employment_options = get_employment_type_options()
        employment_type = st.selectbox(
            "Employment Type",
            options=[o["value"] for o in employment_options],
            format_func=lambda x: {o["value"]: o["label"] for o in employment_options}[x]
        )

        annual_income = st.number_input(
            "Annual Gross Income (฿)",
            min_value=0.0,
            value=500000.0,
            step=10000.0,
            format="%.0f"
        )

        tax_withheld = st.number_input(
            "Tax Already Withheld (฿)",
            min_value=0.0,
            value=0.0,
            step=1000.0,
            format="%.0f"
        )

        st.subheader("Household")

        marital_status = st.radio(
            "Marital Status",
            options=[m.value for m in MaritalStatus],
            format_func=str.title,
            horizontal=True
        )
        spouse_has_no_income = False
        if marital_status == MaritalStatus.MARRIED.value:
            spouse_has_no_income = st.checkbox("Spouse has no income")

        is_age_65_or_older = st.checkbox("I am 65 or older")

        number_of_children = st.number_input("Number of Children", min_value=0, max_value=10, value=0, step=1)
        child_birth_years = []
        for i in range(int(number_of_children)):
            child_birth_years.append(st.number_input(
                f"Child {i + 1} Birth Year",
                min_value=1950,
                max_value=date.today().year,
                value=2015,
                step=1,
                key=f"child_{i}"
            ))

        number_of_parents = st.number_input("Supported Parents", min_value=0, max_value=4, value=0, step=1)

    with col2:
        st.subheader("Deductions")

        deductions = {}
        for category in DeductionCategory:
            claimed = st.checkbox(DEDUCTION_LABELS[category], key=f"has_{category.value}")
            amount = 0.0
            if claimed:
                amount = st.number_input(
                    f"{DEDUCTION_LABELS[category]} Amount (฿)",
                    min_value=0.0,
                    value=0.0,
                    step=1000.0,
                    format="%.0f",
                    key=f"amount_{category.value}"
                )
            deductions[category.value] = {"claimed": claimed, "amount": amount}

    return {
        "employment_type": employment_type,
        "annual_income": annual_income,
        "marital_status": marital_status,
        "spouse_has_no_income": spouse_has_no_income,
        "is_age_65_or_older": is_age_65_or_older,
        "child_birth_years": child_birth_years,
        "number_of_parents": number_of_parents,
        "deductions": deductions,
        "tax_withheld": tax_withheld,
    }


def show_results(result: TaxCalculationResult):
    """Render a calculation result."""
    st.success("Tax calculation complete!")

    col_a, col_b, col_c = st.columns(3)

    with col_a:
        st.metric("Gross Income", format_currency(result.gross_income))
        st.metric("Total Allowances", format_currency(result.total_allowances))

    with col_b:
        st.metric("Total Deductions", format_currency(result.total_deductions))
        st.metric("Taxable Income", format_currency(result.taxable_income))

    with col_c:
        st.metric("Tax Owed", format_currency(result.tax_owed))
        st.metric("Effective Tax Rate", format_percent(result.effective_rate))

    st.info(describe_refund(result.refund_or_owed))

    st.divider()

    col_d, col_e = st.columns(2)

    with col_d:
        st.subheader("Allowances & Deductions")
        breakdown = result.breakdown
        rows = [{"Item": "Standard Deduction", "Amount": format_currency(breakdown.standard_deduction)}]
        rows += [
            {"Item": label, "Amount": format_currency(getattr(breakdown, field))}
            for field, label in ALLOWANCE_LABELS.items()
        ]
        rows += [
            {"Item": DEDUCTION_LABELS[category], "Amount": format_currency(breakdown.elective_amount(category))}
            for category in DeductionCategory
            if breakdown.elective_amount(category) > 0
        ]
        st.dataframe(pd.DataFrame(rows), use_container_width=True, hide_index=True)

    with col_e:
        st.subheader("Tax by Bracket")
        if result.bracket_breakdown:
            df_brackets = pd.DataFrame([
                {
                    "Bracket": b.label,
                    "Rate": format_percent(b.rate * 100),
                    "Income": b.income_in_bracket,
                    "Tax": b.tax_in_bracket
                }
                for b in result.bracket_breakdown
            ])
            fig = px.bar(df_brackets, x="Bracket", y="Income", hover_data=["Rate", "Tax"])
            st.plotly_chart(fig, use_container_width=True)
            st.caption(f"Marginal rate: {format_percent(result.marginal_rate * 100)}")
        else:
            st.info("No taxable income after allowances and deductions.")


def main():
    """Main application."""
    st.title("🧮 Annual Income Tax Calculator")
    st.markdown("### Allowances, deductions and progressive tax for the year")

    loader = TaxTableLoader()

    with st.sidebar:
        st.title("Settings")

        year_options = get_year_options(loader.available_years(), DEFAULT_TAX_YEAR) or [DEFAULT_TAX_YEAR]
        tax_year = st.selectbox("Tax Year", options=year_options, index=0)

        if st.button("Load Tax Tables"):
            with st.spinner("Loading tax tables..."):
                if load_tax_tables(tax_year):
                    st.success(f"Tax tables for {tax_year} loaded successfully!")

    form = collect_form()

    if st.button("Calculate Tax", type="primary"):
        with st.spinner("Calculating taxes..."):
            result = calculate_tax(form, tax_year)
            if result:
                show_results(result)

    # Tax table status
    st.divider()
    st.subheader("Tax Table Status")

    if st.session_state.tax_tables:
        st.success(f"Tax tables for {st.session_state.tax_tables.year} are loaded.")
    else:
        st.warning("No tax tables loaded. Click 'Load Tax Tables' in the sidebar.")


# Run the app
if __name__ == "__main__":
    main()
