"""Class balancing for skewed High/Low targets."""
from typing import Optional

import numpy as np
from imblearn.over_sampling import RandomOverSampler
from imblearn.under_sampling import RandomUnderSampler

from apprating.utils.logging import get_logger

logger = get_logger(__name__)

BALANCE_STRATEGIES = ("none", "over", "under", "auto")


def minority_share(y: np.ndarray) -> float:
    """Fraction of labels belonging to the rarer class."""
    if len(y) == 0:
        return 0.0
    counts = np.bincount(np.asarray(y, dtype=int), minlength=2)
    return float(counts.min() / counts.sum())


def resolve_strategy(strategy: str, y: np.ndarray, skew_threshold: float = 0.4) -> str:
    """Turn 'auto' into 'over' or 'none' depending on how skewed y is."""
    if strategy not in BALANCE_STRATEGIES:
        raise ValueError(f"Unknown balance strategy {strategy!r}; expected one of {BALANCE_STRATEGIES}")
    if strategy != "auto":
        return strategy
    share = minority_share(y)
    resolved = "over" if share < skew_threshold else "none"
    logger.info("Minority class share %.3f -> balancing %s", share, resolved)
    return resolved


def build_sampler(strategy: str, seed: int = 42) -> Optional[object]:
    """Sampler for a resolved strategy, or None when no balancing is wanted."""
    if strategy == "over":
        return RandomOverSampler(random_state=seed)
    if strategy == "under":
        return RandomUnderSampler(random_state=seed)
    if strategy == "none":
        return None
    raise ValueError(f"Strategy {strategy!r} must be resolved before building a sampler")
