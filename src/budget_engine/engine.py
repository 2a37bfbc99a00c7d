"""
Budget Template Engine

Turns a TemplateConfig into a complete, immutable WorkbookSpec.
"""
from __future__ import annotations

import logging

from budget_engine.layout import build_index_sheet, build_month_sheet, build_year_sheet
from budget_engine.models import MONTHS, SheetSpec, TemplateConfig, WorkbookSpec
from budget_engine.validation import validate_config


logger = logging.getLogger(__name__)


class TemplateEngine:
    """
    Main template builder.

    Sheet order: index sheet, then for each year its year sheet followed
    by the twelve month sheets.
    """

    def __init__(self, config: TemplateConfig):
        self.config = config
        self._validate()

    def _validate(self) -> None:
        validate_config(self.config)

    def run(self) -> WorkbookSpec:
        config = self.config
        sheets: list[SheetSpec] = [build_index_sheet(config)]
        for year in config.years:
            sheets.append(build_year_sheet(config, year))
            sheets.extend(build_month_sheet(config, year, m) for m in MONTHS)

        workbook = WorkbookSpec(config=config, sheets=tuple(sheets))
        logger.info(
            "Built template for %d-%d: %d sheets, %d formulas",
            config.start_year,
            config.end_year,
            len(workbook.sheets),
            workbook.formula_count,
        )
        return workbook


def build_workbook(config: TemplateConfig) -> WorkbookSpec:
    """Validate a configuration and build its workbook descriptor."""
    return TemplateEngine(config).run()
