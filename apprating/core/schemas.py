"""Typed record for a cleaned app row."""
from typing import Literal

import pandas as pd
from pydantic import BaseModel, Field

# Raw export header, in file order
RAW_COLUMNS = [
    "App",
    "Category",
    "Rating",
    "Reviews",
    "Size",
    "Installs",
    "Type",
    "Price",
    "Content Rating",
    "Genres",
    "Last Updated",
    "Current Ver",
    "Android Ver",
]

HIGH = "High"
LOW = "Low"
LAST_UPDATED_BUCKETS = ["Before 2016", "In 2016", "In 2017", "In 2018"]


class AppRecord(BaseModel):
    """One cleaned app. Every field is populated once cleaning has finished."""

    category: str = Field(..., min_length=1, description="Play Store category")
    rating_label: Literal["High", "Low"] = Field(..., description="High when rating >= 4.0")
    reviews: int = Field(..., ge=0, description="Number of user reviews")
    size_kb: float = Field(..., ge=0, description="Download size in kilobytes")
    installs: int = Field(..., ge=0, description="Install count lower bound")
    type: Literal["Free", "Paid"] = Field(..., description="Pricing model")
    price: float = Field(..., ge=0, description="Price in dollars")
    content_rating: str = Field(..., min_length=1, description="Audience rating e.g. Everyone, Teen")
    genres: str = Field(..., min_length=1, description="Semicolon separated genre list")
    last_updated: Literal["Before 2016", "In 2016", "In 2017", "In 2018"] = Field(
        ..., description="Era of the last update"
    )
    current_ver: float = Field(..., description="App version, truncated precision")
    android_ver: float = Field(..., description="Minimum Android version, truncated precision")

    model_config = {"frozen": True, "json_schema_extra": {"example": {
        "category": "ART_AND_DESIGN",
        "rating_label": "High",
        "reviews": 159,
        "size_kb": 19000.0,
        "installs": 10000,
        "type": "Free",
        "price": 0.0,
        "content_rating": "Everyone",
        "genres": "Art & Design",
        "last_updated": "In 2018",
        "current_ver": 1.0,
        "android_ver": 4.0,
    }}}


RECORD_FIELDS = list(AppRecord.model_fields)


def to_records(df: pd.DataFrame) -> list[AppRecord]:
    """Validate a cleaned frame into typed records."""
    return [AppRecord.model_validate(row) for row in df[RECORD_FIELDS].to_dict("records")]


def records_to_frame(records: list[AppRecord]) -> pd.DataFrame:
    """Inverse of to_records."""
    return pd.DataFrame([r.model_dump() for r in records], columns=RECORD_FIELDS)
