"""Mean/median imputation for the nullable numeric fields."""
import math
from typing import Optional

import pandas as pd

from apprating.utils.exceptions import ImputationError
from apprating.utils.logging import get_logger

logger = get_logger(__name__)

MEAN_COLUMNS = ["size_kb"]
MEDIAN_COLUMNS = ["current_ver", "android_ver"]


class MissingValueImputer:
    """Fill size with the column mean and versions with the column median."""

    def __init__(
        self,
        mean_columns: Optional[list[str]] = None,
        median_columns: Optional[list[str]] = None,
    ) -> None:
        self.mean_columns = list(mean_columns if mean_columns is not None else MEAN_COLUMNS)
        self.median_columns = list(median_columns if median_columns is not None else MEDIAN_COLUMNS)
        self._fitted: bool = False
        self._statistics: dict[str, float] = {}

    def fit(self, df: pd.DataFrame) -> "MissingValueImputer":
        """Compute fill values over the given population."""
        columns = self.mean_columns + self.median_columns
        missing = set(columns) - set(df.columns)
        if missing:
            raise ImputationError(f"Missing columns to impute: {missing}")

        stats = {}
        for column in self.mean_columns:
            stats[column] = float(df[column].mean())
        for column in self.median_columns:
            stats[column] = float(df[column].median())
        for column, value in stats.items():
            if math.isnan(value):
                logger.warning("Column %s has no observed values; it stays missing", column)

        self._statistics = stats
        self._fitted = True
        logger.info("Imputer fitted: %s", {k: round(v, 3) for k, v in stats.items()})
        return self

    def transform(self, df: pd.DataFrame) -> pd.DataFrame:
        """Return a copy of df with the gaps filled."""
        if not self._fitted:
            raise ImputationError("Imputer not fitted. Call fit() first.")

        out = df.copy()
        for column, value in self._statistics.items():
            n_missing = int(out[column].isna().sum())
            if n_missing:
                logger.info("Imputing %d missing %s value(s) with %.3f", n_missing, column, value)
                out[column] = out[column].fillna(value)
        return out

    def fit_transform(self, df: pd.DataFrame) -> pd.DataFrame:
        """Fit and transform in one step."""
        return self.fit(df).transform(df)

    @property
    def statistics(self) -> dict[str, float]:
        return dict(self._statistics)
