"""Baseline fitting and time-boxed hyperparameter search for three model families."""
import json
import math
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Optional

import joblib
import numpy as np
import pandas as pd
from imblearn.pipeline import Pipeline
from sklearn.base import BaseEstimator, clone
from sklearn.ensemble import RandomForestClassifier
from sklearn.linear_model import LogisticRegression
from sklearn.metrics import roc_auc_score
from sklearn.model_selection import ParameterGrid, ParameterSampler
import xgboost as xgb

from apprating.core.balancing import build_sampler, resolve_strategy
from apprating.core.preprocessing import FEATURE_COLUMNS, TARGET_COLUMN, build_preprocessor, split_features
from apprating.utils.exceptions import TrainingError
from apprating.utils.logging import get_logger

logger = get_logger(__name__)


def _depth(value: Optional[int]) -> float:
    return math.inf if value is None else value


@dataclass(frozen=True)
class ModelFamily:
    """An estimator plus the space its tuned variant is searched over."""

    name: str
    estimator: BaseEstimator
    search_space: dict[str, list[Any]]
    search_strategy: str  # "grid" or "random"
    # Smaller key means simpler model; used to break AUC ties
    complexity: Callable[[dict[str, Any]], tuple]


FAMILIES: dict[str, ModelFamily] = {
    "logistic_regression": ModelFamily(
        name="logistic_regression",
        estimator=LogisticRegression(max_iter=1000, random_state=42),
        search_space={
            "solver": ["saga"],
            "penalty": ["elasticnet"],
            "max_iter": [2000],
            "C": [0.01, 0.1, 1.0, 10.0],
            "l1_ratio": [0.0, 0.5, 1.0],
        },
        search_strategy="grid",
        # stronger regularization and sparser penalties are simpler
        complexity=lambda p: (p.get("C", 1.0), -p.get("l1_ratio", 0.0)),
    ),
    "random_forest": ModelFamily(
        name="random_forest",
        estimator=RandomForestClassifier(random_state=42, n_jobs=1),
        search_space={
            "n_estimators": [50, 100, 200],
            "max_depth": [None, 10, 20],
            "min_samples_leaf": [1, 5],
            "max_features": ["sqrt", 0.5],
        },
        search_strategy="random",
        complexity=lambda p: (
            p.get("n_estimators", 100),
            _depth(p.get("max_depth")),
            -p.get("min_samples_leaf", 1),
        ),
    ),
    "gradient_boosting": ModelFamily(
        name="gradient_boosting",
        estimator=xgb.XGBClassifier(
            random_state=42,
            eval_metric="logloss",
            n_jobs=1,
        ),
        search_space={
            "n_estimators": [50, 100, 200, 400],
            "max_depth": [3, 5, 7],
            "learning_rate": [0.03, 0.1, 0.3],
            "subsample": [0.7, 1.0],
            "colsample_bytree": [0.7, 1.0],
        },
        search_strategy="random",
        complexity=lambda p: (p.get("n_estimators", 100), p.get("max_depth", 6)),
    ),
}


def get_family(name: str) -> ModelFamily:
    if name not in FAMILIES:
        raise TrainingError(f"Unknown model family {name!r}; expected one of {list(FAMILIES)}")
    return FAMILIES[name]


def positive_proba(model: Any, X: pd.DataFrame) -> np.ndarray:
    """Probability of the positive class (High=1)."""
    proba = model.predict_proba(X)
    if proba.shape[1] == 2:
        return proba[:, 1]
    return proba[:, 0]


@dataclass
class Candidate:
    """One fitted point of a hyperparameter search."""

    params: dict[str, Any]
    validation_auc: float
    fit_seconds: float
    model: Any = field(repr=False)


@dataclass
class FittedModel:
    """A fitted pipeline and the settings it was trained with."""

    family: str
    variant: str  # "baseline" or "tuned"
    params: dict[str, Any]
    balance: str
    model: Any = field(repr=False)
    validation_auc: Optional[float] = None


@dataclass
class SearchResult:
    family: str
    strategy: str
    candidates: list[Candidate]
    best: FittedModel
    elapsed_secs: float
    stopped_by: str  # "exhausted", "max_models" or "max_runtime_secs"

    def leaderboard(self) -> pd.DataFrame:
        """Candidates sorted by validation AUC, best first."""
        rows = [
            {**c.params, "validation_auc": c.validation_auc, "fit_seconds": round(c.fit_seconds, 3)}
            for c in self.candidates
        ]
        return pd.DataFrame(rows).sort_values("validation_auc", ascending=False).reset_index(drop=True)


def select_best(
    candidates: list[Candidate],
    complexity: Callable[[dict[str, Any]], tuple],
    tolerance: float = 0.001,
) -> Candidate:
    """Highest validation AUC; the simplest model wins among near-ties."""
    if not candidates:
        raise TrainingError("No candidate model was fitted.")
    best_auc = max(c.validation_auc for c in candidates)
    contenders = [c for c in candidates if c.validation_auc >= best_auc - tolerance]
    return min(contenders, key=lambda c: (complexity(c.params), -c.validation_auc))


class ModelTrainer:
    """Fit baseline and tuned variants of each model family."""

    def __init__(
        self,
        seed: int = 42,
        balance_strategy: str = "auto",
        skew_threshold: float = 0.4,
        max_models: int = 20,
        max_runtime_secs: float = 300.0,
        tie_tolerance: float = 0.001,
    ) -> None:
        if max_models < 1:
            raise ValueError("max_models must be at least 1")
        self.seed = seed
        self.balance_strategy = balance_strategy
        self.skew_threshold = skew_threshold
        self.max_models = max_models
        self.max_runtime_secs = max_runtime_secs
        self.tie_tolerance = tie_tolerance

    def _training_data(self, train: pd.DataFrame) -> tuple[pd.DataFrame, np.ndarray, str]:
        X, y = split_features(train)
        if len(np.unique(y)) < 2:
            raise TrainingError("Training partition holds a single rating class.")
        balance = resolve_strategy(self.balance_strategy, y, self.skew_threshold)
        return X, y, balance

    def build_pipeline(self, family: ModelFamily, params: dict[str, Any], balance: str) -> Pipeline:
        """preprocess -> (optional) sampler -> estimator."""
        estimator = clone(family.estimator)
        estimator.set_params(random_state=self.seed, **params)
        steps = [("preprocess", build_preprocessor())]
        sampler = build_sampler(balance, seed=self.seed)
        if sampler is not None:
            steps.append(("balance", sampler))
        steps.append(("model", estimator))
        return Pipeline(steps)

    def fit_baseline(self, family_name: str, train: pd.DataFrame) -> FittedModel:
        """Fit the family with its default hyperparameters."""
        family = get_family(family_name)
        X, y, balance = self._training_data(train)
        logger.info("Fitting baseline %s on %d rows (balance=%s)", family.name, len(X), balance)
        model = self.build_pipeline(family, {}, balance).fit(X, y)
        return FittedModel(family=family.name, variant="baseline", params={}, balance=balance, model=model)

    def _candidate_params(self, family: ModelFamily) -> list[dict[str, Any]]:
        grid = ParameterGrid(family.search_space)
        if family.search_strategy == "grid":
            return list(grid)
        if family.search_strategy == "random":
            n_iter = min(self.max_models, len(grid))
            return list(ParameterSampler(family.search_space, n_iter=n_iter, random_state=self.seed))
        raise TrainingError(f"Unknown search strategy {family.search_strategy!r}")

    def tune(self, family_name: str, train: pd.DataFrame, validation: pd.DataFrame) -> SearchResult:
        """Search the family's space, scoring each candidate on validation AUC.

        Stops after max_models fits or once max_runtime_secs has elapsed,
        whichever comes first. At least one candidate is always fitted.
        """
        family = get_family(family_name)
        X_train, y_train, balance = self._training_data(train)
        X_val, y_val = split_features(validation)
        if len(np.unique(y_val)) < 2:
            raise TrainingError("Validation partition holds a single rating class; AUC is undefined.")

        params_list = self._candidate_params(family)
        logger.info(
            "Tuning %s: %s search over %d candidate(s), max_models=%d, max_runtime_secs=%.1f",
            family.name,
            family.search_strategy,
            len(params_list),
            self.max_models,
            self.max_runtime_secs,
        )

        candidates: list[Candidate] = []
        stopped_by = "exhausted"
        start = time.perf_counter()
        for params in params_list:
            if len(candidates) >= self.max_models:
                stopped_by = "max_models"
                break
            if candidates and time.perf_counter() - start >= self.max_runtime_secs:
                stopped_by = "max_runtime_secs"
                break
            fit_start = time.perf_counter()
            model = self.build_pipeline(family, params, balance).fit(X_train, y_train)
            auc = float(roc_auc_score(y_val, positive_proba(model, X_val)))
            fit_seconds = time.perf_counter() - fit_start
            candidates.append(Candidate(params=params, validation_auc=auc, fit_seconds=fit_seconds, model=model))
            logger.debug("%s %s -> validation AUC %.4f (%.2fs)", family.name, params, auc, fit_seconds)

        elapsed = time.perf_counter() - start
        chosen = select_best(candidates, family.complexity, self.tie_tolerance)
        logger.info(
            "Tuned %s: %d candidate(s) in %.1fs (stopped by %s); best AUC %.4f with %s",
            family.name,
            len(candidates),
            elapsed,
            stopped_by,
            chosen.validation_auc,
            chosen.params,
        )
        best = FittedModel(
            family=family.name,
            variant="tuned",
            params=chosen.params,
            balance=balance,
            model=chosen.model,
            validation_auc=chosen.validation_auc,
        )
        return SearchResult(
            family=family.name,
            strategy=family.search_strategy,
            candidates=candidates,
            best=best,
            elapsed_secs=elapsed,
            stopped_by=stopped_by,
        )

    def save(self, fitted: FittedModel, models_dir: Path, metrics: Optional[dict[str, Any]] = None) -> Path:
        """Persist a fitted pipeline with joblib and its metadata as JSON."""
        models_dir = Path(models_dir)
        models_dir.mkdir(parents=True, exist_ok=True)
        model_path = models_dir / f"{fitted.family}_{fitted.variant}.joblib"
        metadata_path = models_dir / f"{fitted.family}_{fitted.variant}.json"

        joblib.dump(fitted.model, model_path)
        metadata = {
            "family": fitted.family,
            "variant": fitted.variant,
            "params": fitted.params,
            "balance": fitted.balance,
            "validation_auc": fitted.validation_auc,
            "seed": self.seed,
            "metrics": metrics or {},
            "feature_columns": FEATURE_COLUMNS,
            "target_column": TARGET_COLUMN,
        }
        with open(metadata_path, "w") as f:
            json.dump(metadata, f, indent=2, default=str)
        logger.info("Saved %s %s model to %s", fitted.family, fitted.variant, model_path)
        return model_path
