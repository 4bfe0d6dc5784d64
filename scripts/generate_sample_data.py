"""Generate a synthetic Play Store export with the raw column layout."""
from datetime import date, timedelta
from pathlib import Path

import numpy as np
import pandas as pd

CATEGORIES = {
    "ART_AND_DESIGN": "Art & Design",
    "FAMILY": "Casual",
    "GAME": "Action",
    "TOOLS": "Tools",
    "PRODUCTIVITY": "Productivity",
    "HEALTH_AND_FITNESS": "Health & Fitness",
    "FINANCE": "Finance",
    "EDUCATION": "Education;Education",
}
CONTENT_RATINGS = ["Everyone", "Teen", "Everyone 10+", "Mature 17+"]
INSTALL_BUCKETS = [100, 1_000, 10_000, 100_000, 1_000_000, 10_000_000]
ANDROID_VERSIONS = ["4.0.3 and up", "4.1 and up", "4.4 and up", "5.0 and up", "2.3 and up"]
VARIES = "Varies with device"

# The shifted row found in the real export: every value moved one column left
SHIFTED_ROW = {
    "App": "Life Made WI-Fi Touchscreen Photo Frame",
    "Category": "1.9",
    "Rating": "19",
    "Reviews": "3.0M",
    "Size": "1,000+",
    "Installs": "Free",
    "Type": "0",
    "Price": "Everyone",
    "Content Rating": np.nan,
    "Genres": "February 11, 2018",
    "Last Updated": "1.0.19",
    "Current Ver": "4.0 and up",
    "Android Ver": np.nan,
}


def main(n: int = 2000, seed: int = 42) -> pd.DataFrame:
    rng = np.random.default_rng(seed)
    categories = rng.choice(list(CATEGORIES), n)
    installs = rng.choice(INSTALL_BUCKETS, n)
    paid = rng.uniform(0, 1, n) < 0.08
    days_ago = rng.integers(0, 7 * 365, n)
    updated = [date(2018, 8, 8) - timedelta(days=int(d)) for d in days_ago]

    # Popular, recently updated apps tend to rate higher
    score = (
        3.7
        + 0.08 * np.log10(installs)
        - 0.0003 * days_ago
        + rng.normal(0, 0.45, n)
    )
    rating = np.round(np.clip(score, 1.0, 5.0), 1).astype(object)
    rating[rng.uniform(0, 1, n) < 0.12] = np.nan

    size_mb = np.round(rng.lognormal(2.5, 0.9, n), 1)
    size = np.array([f"{s}M" if s >= 1 else f"{int(s * 1000)}k" for s in size_mb], dtype=object)
    size[rng.uniform(0, 1, n) < 0.1] = VARIES

    current_ver = np.array(
        [f"{rng.integers(1, 12)}.{rng.integers(0, 15)}.{rng.integers(0, 9)}" for _ in range(n)],
        dtype=object,
    )
    current_ver[rng.uniform(0, 1, n) < 0.1] = VARIES
    android_ver = rng.choice(ANDROID_VERSIONS, n).astype(object)
    android_ver[rng.uniform(0, 1, n) < 0.1] = VARIES

    df = pd.DataFrame({
        "App": [f"Sample App {i}" for i in range(n)],
        "Category": categories,
        "Rating": rating,
        "Reviews": (installs * rng.uniform(0.01, 0.2, n)).astype(int).astype(str),
        "Size": size,
        "Installs": [f"{i:,}+" for i in installs],
        "Type": np.where(paid, "Paid", "Free"),
        "Price": np.where(paid, [f"${p:.2f}" for p in rng.choice([0.99, 1.99, 2.99, 4.99], n)], "0"),
        "Content Rating": rng.choice(CONTENT_RATINGS, n),
        "Genres": [CATEGORIES[c] for c in categories],
        "Last Updated": [f"{d:%B} {d.day}, {d.year}" for d in updated],
        "Current Ver": current_ver,
        "Android Ver": android_ver,
    })
    df = pd.concat([df, pd.DataFrame([SHIFTED_ROW])], ignore_index=True)

    out = Path(__file__).resolve().parent.parent / "data" / "googleplaystore.csv"
    out.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(out, index=False)
    print(f"Saved {len(df)} rows to {out}")
    return df


if __name__ == "__main__":
    main()
