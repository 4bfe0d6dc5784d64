"""Deterministic train/validation/test split."""
from typing import NamedTuple

import numpy as np
import pandas as pd
from sklearn.model_selection import train_test_split

from apprating.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_RATIOS = (0.70, 0.15, 0.15)
MIN_ROWS = 10


class DatasetSplit(NamedTuple):
    train: pd.DataFrame
    validation: pd.DataFrame
    test: pd.DataFrame

    def sizes(self) -> dict[str, int]:
        return {name: len(part) for name, part in self._asdict().items()}


def split_dataset(
    df: pd.DataFrame,
    ratios: tuple[float, float, float] = DEFAULT_RATIOS,
    seed: int = 42,
) -> DatasetSplit:
    """Split df into disjoint train/validation/test frames.

    The same seed always yields the same membership. Index labels of df are
    kept so partitions can be traced back to the cleaned dataset.
    """
    if len(ratios) != 3 or any(r <= 0 for r in ratios):
        raise ValueError(f"Split ratios must be three positive numbers, got {ratios}")
    if not np.isclose(sum(ratios), 1.0):
        raise ValueError(f"Split ratios must sum to 1, got {sum(ratios):.4f}")
    if len(df) < MIN_ROWS:
        raise ValueError(f"Need at least {MIN_ROWS} rows to make three partitions, got {len(df)}")

    train_ratio, validation_ratio, test_ratio = ratios
    train, holdout = train_test_split(
        df,
        train_size=train_ratio,
        random_state=seed,
        shuffle=True,
    )
    validation, test = train_test_split(
        holdout,
        test_size=test_ratio / (validation_ratio + test_ratio),
        random_state=seed,
        shuffle=True,
    )
    split = DatasetSplit(train.copy(), validation.copy(), test.copy())
    logger.info("Partition sizes: %s", split.sizes())
    return split
