"""Parsing raw Play Store fields into typed columns.

Every parser takes one raw value and returns None when the value cannot be
interpreted. The frame-level helpers never mutate their input.
"""
import math
from dataclasses import dataclass, asdict
from datetime import datetime
from typing import Any, Optional

import numpy as np
import pandas as pd

from apprating.core.imputation import MissingValueImputer
from apprating.core.schemas import HIGH, LOW, RAW_COLUMNS, RECORD_FIELDS
from apprating.utils.exceptions import SchemaError
from apprating.utils.logging import get_logger

logger = get_logger(__name__)

VARIES_WITH_DEVICE = "Varies with device"
KNOWN_BAD_CATEGORY = "1.9"
LAST_UPDATED_FORMAT = "%B %d, %Y"
VERSION_PREFIX_WIDTH = 3
MAX_RATING = 5.0
HIGH_RATING_THRESHOLD = 4.0
APP_TYPES = {"free": "Free", "paid": "Paid"}

# Cleaned columns that are never imputed; rows still missing one are dropped
REQUIRED_COLUMNS = [
    "category",
    "reviews",
    "installs",
    "type",
    "price",
    "content_rating",
    "genres",
    "last_updated",
]


def _text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, float) and math.isnan(value):
        return None
    text = str(value).strip()
    return text or None


def _finite(number: float) -> Optional[float]:
    return number if math.isfinite(number) else None


def _non_negative(number: Optional[float]) -> Optional[float]:
    if number is None or number < 0:
        return None
    return number


def parse_size(value: Any) -> Optional[float]:
    """'19M' -> 19000.0, '201k' -> 201.0, 'Varies with device' -> None."""
    text = _text(value)
    if text is None or text.lower() == VARIES_WITH_DEVICE.lower():
        return None
    unit, number = text[-1].lower(), text[:-1].replace(",", "")
    try:
        size = float(number)
    except ValueError:
        return None
    if unit == "m":
        return _non_negative(_finite(size * 1000))
    if unit == "k":
        return _non_negative(_finite(size))
    return None


def parse_installs(value: Any) -> Optional[int]:
    """'10,000+' -> 10000."""
    text = _text(value)
    if text is None:
        return None
    try:
        return _non_negative(int(text.replace("+", "").replace(",", "")))
    except ValueError:
        return None


def parse_price(value: Any) -> Optional[float]:
    """'$4.99' -> 4.99, '0' -> 0.0."""
    text = _text(value)
    if text is None:
        return None
    if text.startswith("$"):
        text = text[1:]
    try:
        return _non_negative(_finite(float(text)))
    except ValueError:
        return None


def parse_reviews(value: Any) -> Optional[int]:
    text = _text(value)
    if text is None:
        return None
    try:
        return _non_negative(int(text))
    except ValueError:
        return None


def parse_rating(value: Any) -> Optional[float]:
    """Numeric rating, or None when unparseable or above the 5-star scale."""
    text = _text(value)
    if text is None:
        return None
    try:
        rating = float(text)
    except ValueError:
        return None
    if math.isnan(rating) or rating > MAX_RATING:
        return None
    return rating


def rating_label(rating: Optional[float]) -> Optional[str]:
    if rating is None or math.isnan(rating):
        return None
    return HIGH if rating >= HIGH_RATING_THRESHOLD else LOW


def bucket_last_updated(value: Any) -> Optional[str]:
    """Map a 'January 7, 2018' style date onto its update era."""
    text = _text(value)
    if text is None:
        return None
    try:
        year = datetime.strptime(text, LAST_UPDATED_FORMAT).year
    except ValueError:
        return None
    if year >= 2018:
        return "In 2018"
    if year >= 2017:
        return "In 2017"
    if year >= 2016:
        return "In 2016"
    return "Before 2016"


def parse_version(value: Any, width: int = VERSION_PREFIX_WIDTH) -> Optional[float]:
    """Parse the first `width` characters of a version string as a decimal.

    Sub-minor detail is dropped: '4.0.3 and up' -> 4.0. Two-digit majors lose
    their minor part ('10.2' -> 10.0) and two-digit minors are cut ('1.10' -> 1.1).
    """
    text = _text(value)
    if text is None or text.lower() == VARIES_WITH_DEVICE.lower():
        return None
    try:
        return _finite(float(text[:width]))
    except ValueError:
        return None


def _categorical(value: Any) -> Optional[str]:
    return _text(value)


def parse_type(value: Any) -> Optional[str]:
    """'Free' or 'Paid'; anything else is missing."""
    text = _text(value)
    if text is None:
        return None
    return APP_TYPES.get(text.lower())


def check_raw_columns(df: pd.DataFrame) -> None:
    missing = [c for c in RAW_COLUMNS if c != "App" and c not in df.columns]
    if missing:
        raise SchemaError(f"Missing raw columns: {missing}")


def drop_known_bad_category(df: pd.DataFrame) -> pd.DataFrame:
    """Remove rows whose raw Category is the shifted-row literal '1.9'."""
    category = df["Category"].astype(str).str.strip()
    mask = category == KNOWN_BAD_CATEGORY
    if mask.any():
        logger.info("Dropping %d row(s) with category %r", int(mask.sum()), KNOWN_BAD_CATEGORY)
    return df.loc[~mask].copy()


def normalize_fields(df: pd.DataFrame) -> pd.DataFrame:
    """Parse every raw column into its cleaned counterpart. Returns a new frame."""
    check_raw_columns(df)
    rating = df["Rating"].map(parse_rating)
    out = pd.DataFrame(index=df.index)
    out["category"] = df["Category"].map(_categorical)
    out["rating"] = pd.to_numeric(rating, errors="coerce")
    out["rating_label"] = rating.map(rating_label)
    out["reviews"] = pd.to_numeric(df["Reviews"].map(parse_reviews), errors="coerce")
    out["size_kb"] = pd.to_numeric(df["Size"].map(parse_size), errors="coerce")
    out["installs"] = pd.to_numeric(df["Installs"].map(parse_installs), errors="coerce")
    out["type"] = df["Type"].map(parse_type)
    out["price"] = pd.to_numeric(df["Price"].map(parse_price), errors="coerce")
    out["content_rating"] = df["Content Rating"].map(_categorical)
    out["genres"] = df["Genres"].map(_categorical)
    out["last_updated"] = df["Last Updated"].map(bucket_last_updated)
    out["current_ver"] = pd.to_numeric(df["Current Ver"].map(parse_version), errors="coerce")
    out["android_ver"] = pd.to_numeric(df["Android Ver"].map(parse_version), errors="coerce")

    for column in out.columns:
        n_missing = int(out[column].isna().sum())
        if n_missing:
            logger.debug("%s: %d missing after parsing", column, n_missing)
    return out


def drop_missing_rating(df: pd.DataFrame) -> pd.DataFrame:
    """Drop rows without a rating label. Imputing would skew toward High."""
    mask = df["rating_label"].isna()
    if mask.any():
        logger.info("Dropping %d row(s) with missing or invalid rating", int(mask.sum()))
    return df.loc[~mask].copy()


def drop_incomplete(df: pd.DataFrame) -> pd.DataFrame:
    mask = df[REQUIRED_COLUMNS].isna().any(axis=1)
    if mask.any():
        logger.warning(
            "Dropping %d row(s) with unparseable non-imputed fields", int(mask.sum())
        )
    return df.loc[~mask].copy()


@dataclass
class CleaningReport:
    """Row counts after each cleaning step."""

    rows_read: int
    bad_category_dropped: int
    missing_rating_dropped: int
    incomplete_dropped: int
    rows_retained: int
    high_share: float
    imputed: dict[str, float]

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)


def clean_dataset(
    raw: pd.DataFrame,
    imputer: Optional[MissingValueImputer] = None,
) -> tuple[pd.DataFrame, CleaningReport]:
    """Run the full cleaning pipeline on a raw export.

    If no fitted imputer is supplied, a new one is fitted on the cleaned
    population. Returns the cleaned frame (columns in AppRecord order) and a
    report of how many rows each step removed.
    """
    check_raw_columns(raw)
    rows_read = len(raw)

    df = drop_known_bad_category(raw)
    bad_category_dropped = rows_read - len(df)

    df = normalize_fields(df)
    before = len(df)
    df = drop_missing_rating(df)
    missing_rating_dropped = before - len(df)

    before = len(df)
    df = drop_incomplete(df)
    incomplete_dropped = before - len(df)

    if imputer is None:
        imputer = MissingValueImputer().fit(df)
    df = imputer.transform(df)

    df = df[RECORD_FIELDS].astype({"reviews": np.int64, "installs": np.int64})
    df = df.reset_index(drop=True)

    report = CleaningReport(
        rows_read=rows_read,
        bad_category_dropped=bad_category_dropped,
        missing_rating_dropped=missing_rating_dropped,
        incomplete_dropped=incomplete_dropped,
        rows_retained=len(df),
        high_share=float((df["rating_label"] == HIGH).mean()) if len(df) else 0.0,
        imputed=imputer.statistics,
    )
    logger.info(
        "Cleaning finished: %d of %d rows retained (High share %.3f)",
        report.rows_retained,
        rows_read,
        report.high_share,
    )
    return df, report
