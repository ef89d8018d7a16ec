"""
Report Service Module
Materializes PV/RP report views and their tabular exports.
"""

import logging
from typing import Union

import numpy as np
import pandas as pd

from concrete_lab.core.enums import ReportVariant
from concrete_lab.core.exceptions import TestNotFound
from concrete_lab.core.models import ReportView
from concrete_lab.core.report_selector import ReportSelector
from concrete_lab.services.data_service import DataService

logger = logging.getLogger(__name__)

REPORT_COLUMNS = [
    "number", "age", "casting_date", "crushing_date", "specimen_type",
    "diameter", "height", "weight", "force", "stress", "density",
]


class ReportService:
    """Service for report views and DataFrame exports."""

    def __init__(self, data_service: DataService):
        self.data_service = data_service

    def build_report(self, test_id: int, variant: Union[ReportVariant, str]) -> ReportView:
        test = self.data_service.get_test(test_id)
        if test is None:
            raise TestNotFound(f"No concrete test with id {test_id}")
        view = ReportSelector.build_report(test, variant)
        logger.info(f"Report {view.variant.value} built for {test.reference} ({len(view.rows)} specimens)")
        return view

    def to_dataframe(self, view: ReportView) -> pd.DataFrame:
        """
        One row per specimen. Missing results stay NaN so they are never
        mistaken for a measured zero.
        """
        if not view.rows:
            return pd.DataFrame(columns=REPORT_COLUMNS)
        records = [row.model_dump(include=set(REPORT_COLUMNS)) for row in view.rows]
        df = pd.DataFrame(records, columns=REPORT_COLUMNS)
        df["specimen_type"] = df["specimen_type"].map(lambda shape: shape.value)
        for col in ["weight", "force", "stress", "density"]:
            df[col] = pd.to_numeric(df[col], errors="coerce")
        return df

    def age_statistics(self, view: ReportView) -> pd.DataFrame:
        """Count, mean and spread of stress/density per age (NaN ignored)."""
        df = self.to_dataframe(view)
        if df.empty:
            return pd.DataFrame()
        numeric = df[["age", "stress", "density"]]
        stats = numeric.groupby("age").agg(
            specimen_count=("stress", "size"),
            tested_count=("stress", "count"),
            mean_stress=("stress", "mean"),
            std_stress=("stress", "std"),
            min_stress=("stress", "min"),
            mean_density=("density", "mean"),
        )
        return stats.replace([np.inf, -np.inf], np.nan)
