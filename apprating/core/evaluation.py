"""Model evaluation: confusion matrix, error rates, AUC and k-fold stability."""
from typing import Any, Optional

import numpy as np
import pandas as pd
from sklearn.base import clone
from sklearn.metrics import (
    accuracy_score,
    precision_score,
    recall_score,
    f1_score,
    roc_auc_score,
    confusion_matrix,
)
from sklearn.model_selection import StratifiedKFold, cross_validate

from apprating.core.models import positive_proba
from apprating.core.preprocessing import split_features
from apprating.core.schemas import HIGH, LOW
from apprating.utils.exceptions import EvaluationError
from apprating.utils.logging import get_logger

logger = get_logger(__name__)

CLASS_LABELS = [LOW, HIGH]  # index 0 = Low, 1 = High


def confusion_frame(y_true: np.ndarray, y_pred: np.ndarray) -> pd.DataFrame:
    """Confusion matrix with actual classes as rows plus per-row Error and Rate.

    A final Totals row holds the column sums and the overall error.
    """
    cm = confusion_matrix(y_true, y_pred, labels=[0, 1])
    frame = pd.DataFrame(cm, index=CLASS_LABELS, columns=CLASS_LABELS)
    row_totals = cm.sum(axis=1)
    wrong = row_totals - np.diag(cm)
    frame["Error"] = np.divide(
        wrong, row_totals, out=np.zeros(len(row_totals), dtype=float), where=row_totals > 0
    )
    frame["Rate"] = [f"={w:d}/{t:d}" for w, t in zip(wrong, row_totals)]

    total, total_wrong = int(cm.sum()), int(wrong.sum())
    frame.loc["Totals"] = [
        int(cm[:, 0].sum()),
        int(cm[:, 1].sum()),
        total_wrong / total if total else 0.0,
        f"={total_wrong:d}/{total:d}",
    ]
    return frame


def evaluate_model(
    y_true: np.ndarray,
    y_pred: np.ndarray,
    y_prob: Optional[np.ndarray] = None,
) -> dict[str, Any]:
    """
    Compute classification metrics and return a dictionary.
    y_prob is optional; used for ROC-AUC when provided.
    """
    y_true = np.asarray(y_true)
    y_pred = np.asarray(y_pred)
    if len(y_true) == 0:
        raise EvaluationError("Cannot evaluate on an empty partition.")

    metrics = {
        "accuracy": float(accuracy_score(y_true, y_pred)),
        "precision": float(precision_score(y_true, y_pred, zero_division=0)),
        "recall": float(recall_score(y_true, y_pred, zero_division=0)),
        "f1_score": float(f1_score(y_true, y_pred, zero_division=0)),
    }
    metrics["classification_error"] = 1.0 - metrics["accuracy"]

    if y_prob is not None and len(np.unique(y_true)) > 1:
        metrics["auc"] = float(roc_auc_score(y_true, y_prob))
    else:
        logger.warning("AUC undefined: probabilities missing or a single class present")
        metrics["auc"] = None

    cm = confusion_frame(y_true, y_pred)
    metrics["class_error"] = {label: float(cm.loc[label, "Error"]) for label in CLASS_LABELS}
    metrics["confusion_matrix"] = cm
    return metrics


def evaluate_on(model: Any, df: pd.DataFrame) -> dict[str, Any]:
    """Evaluate a fitted pipeline on a cleaned partition."""
    X, y = split_features(df)
    return evaluate_model(y, model.predict(X), positive_proba(model, X))


def cross_validate_model(
    model: Any,
    df: pd.DataFrame,
    folds: int = 5,
    seed: int = 42,
) -> pd.DataFrame:
    """Stratified k-fold AUC and error of an unfitted copy of model over df.

    Returns one row per fold plus 'mean' and 'std' rows.
    """
    if folds < 2:
        raise EvaluationError("Cross-validation needs at least two folds.")
    X, y = split_features(df)
    if np.bincount(y, minlength=2).min() < folds:
        raise EvaluationError(f"Each class needs at least {folds} rows for {folds}-fold CV.")

    cv = StratifiedKFold(n_splits=folds, shuffle=True, random_state=seed)
    scores = cross_validate(clone(model), X, y, cv=cv, scoring={"auc": "roc_auc", "accuracy": "accuracy"})
    table = pd.DataFrame(
        {
            "auc": scores["test_auc"],
            "classification_error": 1.0 - scores["test_accuracy"],
        },
        index=[f"fold_{i + 1}" for i in range(folds)],
    )
    summary = table.agg(["mean", "std"])
    logger.info(
        "%d-fold CV: AUC %.4f +/- %.4f, error %.4f +/- %.4f",
        folds,
        summary.loc["mean", "auc"],
        summary.loc["std", "auc"],
        summary.loc["mean", "classification_error"],
        summary.loc["std", "classification_error"],
    )
    return pd.concat([table, summary])


def comparison_table(results: dict[str, dict[str, Any]]) -> pd.DataFrame:
    """Rows AUC and Classification Error, one column per model family."""
    return pd.DataFrame(
        {
            name: [metrics.get("auc"), metrics.get("classification_error")]
            for name, metrics in results.items()
        },
        index=["AUC", "Classification Error"],
    )
