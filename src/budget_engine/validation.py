"""
Budget Template Configuration Validation

Fail-fast checks that span several configuration fields.
"""
from __future__ import annotations

from budget_engine.formulas import month_sheet_name, year_sheet_name
from budget_engine.models import MONTHS, TemplateConfig


# Limits imposed by spreadsheet hosts on sheet titles.
MAX_SHEET_NAME_LENGTH = 31
INVALID_SHEET_NAME_CHARS = set("[]:*?/\\")


class ValidationError(Exception):
    """Raised when a template configuration cannot produce a valid workbook."""
    pass


def validate_config(config: TemplateConfig) -> None:
    """
    Validate a configuration before any layout is built.

    Raises ValidationError with a precise message on failure.
    """
    _validate_index_sheet_name(config)
    _validate_name_collisions(config)


def _validate_index_sheet_name(config: TemplateConfig) -> None:
    name = config.index_sheet_name
    if len(name) > MAX_SHEET_NAME_LENGTH:
        raise ValidationError(
            f"Index sheet name {name!r} exceeds {MAX_SHEET_NAME_LENGTH} characters"
        )
    bad = sorted(INVALID_SHEET_NAME_CHARS.intersection(name))
    if bad:
        raise ValidationError(
            f"Index sheet name {name!r} contains invalid characters: {''.join(bad)}"
        )


def _validate_name_collisions(config: TemplateConfig) -> None:
    generated = set()
    for year in config.years:
        generated.add(year_sheet_name(year))
        generated.update(month_sheet_name(year, m) for m in MONTHS)
    if config.index_sheet_name in generated:
        raise ValidationError(
            f"Index sheet name {config.index_sheet_name!r} collides with a year or month sheet"
        )
