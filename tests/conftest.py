"""Shared fixtures: small synthetic raw exports."""
from datetime import date, timedelta

import numpy as np
import pandas as pd
import pytest

from apprating.config import Settings

CATEGORIES = ["ART_AND_DESIGN", "GAME", "TOOLS", "FINANCE"]
GENRES = {"ART_AND_DESIGN": "Art & Design", "GAME": "Action", "TOOLS": "Tools", "FINANCE": "Finance"}
INSTALLS = [1_000, 10_000, 100_000, 1_000_000]


def make_raw(n: int = 300, seed: int = 0) -> pd.DataFrame:
    """Raw-string frame in export layout; installs and recency drive the rating."""
    rng = np.random.default_rng(seed)
    categories = rng.choice(CATEGORIES, n)
    installs = rng.choice(INSTALLS, n)
    days_ago = rng.integers(0, 5 * 365, n)
    updated = [date(2018, 8, 1) - timedelta(days=int(d)) for d in days_ago]
    rating = np.clip(3.9 + 0.15 * np.log10(installs) - 0.0006 * days_ago + rng.normal(0, 0.3, n), 1, 5)
    return pd.DataFrame({
        "App": [f"app-{i}" for i in range(n)],
        "Category": categories,
        "Rating": [f"{r:.1f}" for r in rating],
        "Reviews": [str(int(i * 0.05)) for i in installs],
        "Size": [f"{s:.1f}M" for s in rng.uniform(1, 80, n)],
        "Installs": [f"{i:,}+" for i in installs],
        "Type": "Free",
        "Price": "0",
        "Content Rating": rng.choice(["Everyone", "Teen"], n),
        "Genres": [GENRES[c] for c in categories],
        "Last Updated": [f"{d:%B} {d.day}, {d.year}" for d in updated],
        "Current Ver": [f"{rng.integers(1, 9)}.{rng.integers(0, 9)}" for _ in range(n)],
        "Android Ver": rng.choice(["4.0.3 and up", "4.1 and up", "5.0 and up"], n),
    })


@pytest.fixture
def raw_frame() -> pd.DataFrame:
    return make_raw()


@pytest.fixture
def messy_frame() -> pd.DataFrame:
    """A handful of rows exercising every sentinel and malformed value."""
    rows = [
        # clean High row
        ["A", "ART_AND_DESIGN", "4.1", "159", "19M", "10,000+", "Free", "0", "Everyone",
         "Art & Design", "January 7, 2018", "1.0.0", "4.0.3 and up"],
        # varies-with-device size and versions, Low
        ["B", "GAME", "3.2", "20", "Varies with device", "500+", "Paid", "$4.99", "Teen",
         "Action", "March 3, 2016", "Varies with device", "Varies with device"],
        # rating above the scale -> dropped
        ["C", "TOOLS", "19", "5", "201k", "100+", "Free", "0", "Everyone",
         "Tools", "May 1, 2017", "2.1", "4.1 and up"],
        # missing rating -> dropped
        ["D", "TOOLS", np.nan, "5", "3.5M", "1,000+", "Free", "0", "Everyone",
         "Tools", "June 20, 2015", "3.0", "4.4 and up"],
        # shifted row
        ["E", "1.9", "19", "3.0M", "1,000+", "Free", "0", "Everyone", np.nan,
         "February 11, 2018", "1.0.19", "4.0 and up", np.nan],
        # exactly 4.0 is High; 2-digit major version
        ["F", "FINANCE", "4.0", "1000", "8.5M", "1,000,000+", "Free", "0", "Everyone",
         "Finance", "December 31, 2015", "10.2.1", "5.0 and up"],
    ]
    columns = [
        "App", "Category", "Rating", "Reviews", "Size", "Installs", "Type", "Price",
        "Content Rating", "Genres", "Last Updated", "Current Ver", "Android Ver",
    ]
    return pd.DataFrame(rows, columns=columns)


@pytest.fixture
def fast_settings(tmp_path) -> Settings:
    return Settings(
        logs_dir=tmp_path / "logs",
        max_models=2,
        max_runtime_secs=60.0,
        cv_folds=3,
        balance_strategy="auto",
        _env_file=None,
    )


@pytest.fixture
def make_raw_frame():
    return make_raw
