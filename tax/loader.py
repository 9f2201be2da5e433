"""
Tax table loader for importing/exporting tax constants from JSON files.
"""
import json
import os
from typing import Dict, List, Optional, Any
import logging
from .models import TaxConstants, TaxBracket, DeductionCategory

logger = logging.getLogger(__name__)

DEFAULT_DATA_DIR = os.path.join(os.path.dirname(__file__), "data")


class TaxTableLoader:
    """Loader for tax table data from JSON files."""

    def __init__(self, data_dir: Optional[str] = None):
        """
        Initialize the loader.

        Args:
            data_dir: Directory containing tax table data files. Falls back to
                the TAX_TABLES_DIR environment variable, then the packaged data.
        """
        self.data_dir = data_dir or os.getenv("TAX_TABLES_DIR") or DEFAULT_DATA_DIR
        self.data_dir = os.path.abspath(self.data_dir)

    def load_from_json(self, filepath: str) -> TaxConstants:
        """
        Load tax constants from a JSON file.

        Args:
            filepath: Path to JSON file

        Returns:
            TaxConstants parsed from JSON
        """
        with open(filepath, 'r', encoding='utf-8') as f:
            data = json.load(f)

        logger.info(f"Loaded tax tables from {filepath}")
        return self._parse_json_data(data)

    def load_year(self, year: int) -> Optional[TaxConstants]:
        """
        Load tax constants for a specific year from the data directory.

        Args:
            year: Tax year to load

        Returns:
            TaxConstants if found, None otherwise
        """
        json_path = os.path.join(self.data_dir, f"tax_tables_{year}.json")
        if os.path.exists(json_path):
            return self.load_from_json(json_path)

        # Try alternative naming
        json_path = os.path.join(self.data_dir, f"{year}_tax_tables.json")
        if os.path.exists(json_path):
            return self.load_from_json(json_path)

        logger.warning(f"No tax table file found for year {year}")
        return None

    def available_years(self) -> List[int]:
        """List tax years with a table file in the data directory, newest first."""
        years = set()
        if not os.path.isdir(self.data_dir):
            return []

        for filename in os.listdir(self.data_dir):
            stem, ext = os.path.splitext(filename)
            if ext != ".json":
                continue
            candidate = stem.replace("tax_tables", "").strip("_")
            if candidate.isdigit():
                years.add(int(candidate))

        return sorted(years, reverse=True)

    def export_to_json(self, constants: TaxConstants, filepath: str) -> None:
        """
        Export tax constants to a JSON file.

        Args:
            constants: TaxConstants to export
            filepath: Path to save JSON file
        """
        data = self._serialize_to_dict(constants)

        # Ensure directory exists
        os.makedirs(os.path.dirname(os.path.abspath(filepath)), exist_ok=True)

        with open(filepath, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2, ensure_ascii=False)

    def validate_tax_tables(self, constants: TaxConstants) -> List[str]:
        """
        Validate tax constants for consistency beyond what the model enforces.

        Args:
            constants: TaxConstants to validate

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []

        allowances = {
            "Personal allowance": constants.personal_allowance,
            "Spouse allowance": constants.spouse_allowance,
            "Senior allowance": constants.senior_allowance,
            "Child allowance": constants.child_allowance_base,
            "Child bonus allowance": constants.child_allowance_bonus,
            "Parent allowance": constants.parent_allowance,
        }
        for name, amount in allowances.items():
            if amount <= 0:
                errors.append(f"{name} must be positive")

        if constants.standard_deduction_rate > 0 and constants.max_standard_deduction <= 0:
            errors.append("Standard deduction cap must be positive when a rate is set")

        for category, cap in constants.deduction_caps.items():
            if cap < 0:
                errors.append(f"Negative cap for {category.value}: {cap}")

        # Progressive schedule: rates never fall as income rises
        rates = [b.rate for b in constants.brackets]
        if rates != sorted(rates):
            errors.append("Bracket rates are not progressive")

        if any(not b.label for b in constants.brackets):
            errors.append("Every bracket needs a label")

        if constants.child_bonus_birth_year > constants.year:
            errors.append(
                f"Child bonus birth year {constants.child_bonus_birth_year} is after tax year {constants.year}"
            )

        return errors

    def _parse_json_data(self, data: Dict[str, Any]) -> TaxConstants:
        """Parse JSON data into TaxConstants."""
        brackets = [
            TaxBracket(upper_bound=b.get("upper_bound"), rate=b["rate"], label=b.get("label", ""))
            for b in data["brackets"]
        ]

        deduction_caps = {
            DeductionCategory(category): cap
            for category, cap in data["deduction_caps"].items()
        }

        allowances = data["allowances"]

        return TaxConstants(
            year=data["year"],
            personal_allowance=allowances["personal"],
            spouse_allowance=allowances["spouse"],
            senior_allowance=allowances["senior"],
            child_allowance_base=allowances["child_base"],
            child_allowance_bonus=allowances["child_bonus"],
            child_bonus_birth_year=allowances["child_bonus_birth_year"],
            parent_allowance=allowances["parent"],
            max_parents=allowances["max_parents"],
            standard_deduction_rate=data["standard_deduction"]["rate"],
            max_standard_deduction=data["standard_deduction"]["max"],
            deduction_caps=deduction_caps,
            max_donation_percent=data["max_donation_percent"],
            brackets=brackets,
            metadata=data.get("metadata", {})
        )

    def _serialize_to_dict(self, constants: TaxConstants) -> Dict[str, Any]:
        """Serialize TaxConstants to dictionary for JSON export."""
        return {
            "year": constants.year,
            "allowances": {
                "personal": constants.personal_allowance,
                "spouse": constants.spouse_allowance,
                "senior": constants.senior_allowance,
                "child_base": constants.child_allowance_base,
                "child_bonus": constants.child_allowance_bonus,
                "child_bonus_birth_year": constants.child_bonus_birth_year,
                "parent": constants.parent_allowance,
                "max_parents": constants.max_parents
            },
            "standard_deduction": {
                "rate": constants.standard_deduction_rate,
                "max": constants.max_standard_deduction
            },
            "deduction_caps": {
                category.value: cap
                for category, cap in constants.deduction_caps.items()
            },
            "max_donation_percent": constants.max_donation_percent,
            "brackets": [
                {"upper_bound": b.upper_bound, "rate": b.rate, "label": b.label}
                for b in constants.brackets
            ],
            "metadata": constants.metadata
        }


class TableUpdater:
    """Utility for deriving new tax tables from existing ones."""

    def __init__(self, loader: TaxTableLoader):
        self.loader = loader

    def merge_updates(self, existing: TaxConstants, updates: Dict[str, Any]) -> TaxConstants:
        """
        Merge updates into existing tax constants.

        Nested sections (allowances, standard_deduction, deduction_caps) are
        merged key by key; anything else is replaced.

        Args:
            existing: Existing TaxConstants
            updates: Dictionary with updates in the JSON file layout

        Returns:
            New TaxConstants; the existing value is left untouched
        """
        updated_data = self.loader._serialize_to_dict(existing)

        for key, value in updates.items():
            if key in updated_data:
                if isinstance(updated_data[key], dict) and isinstance(value, dict):
                    updated_data[key].update(value)
                else:
                    updated_data[key] = value
            else:
                logger.warning(f"Ignoring unknown tax table key {key}")

        return self.loader._parse_json_data(updated_data)
