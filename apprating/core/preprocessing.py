"""Feature encoding shared by every model family."""
import numpy as np
import pandas as pd
from sklearn.compose import ColumnTransformer
from sklearn.preprocessing import StandardScaler, OneHotEncoder
from sklearn.pipeline import Pipeline

from apprating.core.schemas import HIGH
from apprating.utils.exceptions import SchemaError

TARGET_COLUMN = "rating_label"
NUMERIC_COLUMNS = [
    "reviews",
    "size_kb",
    "installs",
    "price",
    "current_ver",
    "android_ver",
]
CATEGORICAL_COLUMNS = [
    "category",
    "type",
    "content_rating",
    "genres",
    "last_updated",
]
FEATURE_COLUMNS = NUMERIC_COLUMNS + CATEGORICAL_COLUMNS


def build_preprocessor() -> ColumnTransformer:
    """Scale numerics and one-hot encode categoricals."""
    return ColumnTransformer(
        transformers=[
            (
                "num",
                Pipeline([("scaler", StandardScaler())]),
                NUMERIC_COLUMNS,
            ),
            (
                "cat",
                OneHotEncoder(
                    drop="first",
                    sparse_output=False,
                    handle_unknown="ignore",
                ),
                CATEGORICAL_COLUMNS,
            ),
        ],
        remainder="drop",
        verbose_feature_names_out=False,
    )


def split_features(df: pd.DataFrame) -> tuple[pd.DataFrame, np.ndarray]:
    """Return the feature frame and a 0/1 target where 1 means High."""
    missing = set(FEATURE_COLUMNS + [TARGET_COLUMN]) - set(df.columns)
    if missing:
        raise SchemaError(f"Missing model columns: {missing}")

    X = df[FEATURE_COLUMNS].copy()
    X[CATEGORICAL_COLUMNS] = X[CATEGORICAL_COLUMNS].astype(str)
    y = (df[TARGET_COLUMN] == HIGH).astype(int).to_numpy()
    return X, y
