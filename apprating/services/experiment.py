"""Rating experiment: load, clean, split, train/tune each family, report."""
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import pandas as pd

from apprating.config import Settings, get_settings
from apprating.core.cleaning import CleaningReport, clean_dataset
from apprating.core.evaluation import comparison_table, cross_validate_model, evaluate_on
from apprating.core.models import FittedModel, ModelTrainer, SearchResult, get_family
from apprating.core.partition import DatasetSplit, split_dataset
from apprating.core.schemas import RAW_COLUMNS
from apprating.utils.exceptions import DataLoadError
from apprating.utils.logging import get_logger

logger = get_logger(__name__)


def load_raw(csv_path: Path) -> pd.DataFrame:
    """Read the raw export with every column kept as text."""
    csv_path = Path(csv_path)
    if not csv_path.exists():
        raise DataLoadError(f"Data file not found: {csv_path}")
    try:
        df = pd.read_csv(csv_path, dtype=str)
    except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as e:
        raise DataLoadError(f"Could not read {csv_path}: {e}") from e
    logger.info("Read %d rows x %d columns from %s", len(df), len(df.columns), csv_path)
    return df


@dataclass
class FamilyReport:
    """Everything measured for one model family."""

    family: str
    baseline: FittedModel
    search: SearchResult
    metrics: dict[str, dict[str, Any]]  # "<variant>_<partition>" -> evaluate_model output
    cross_validation: Optional[pd.DataFrame] = None

    @property
    def tuned(self) -> FittedModel:
        return self.search.best

    def summary(self) -> pd.DataFrame:
        """AUC and error of baseline and tuned models on validation and test."""
        rows = {}
        for variant in ("baseline", "tuned"):
            row = {}
            for partition in ("validation", "test"):
                m = self.metrics[f"{variant}_{partition}"]
                row[f"{partition}_auc"] = m["auc"]
                row[f"{partition}_error"] = m["classification_error"]
            rows[variant] = row
        return pd.DataFrame.from_dict(rows, orient="index")


@dataclass
class ExperimentReport:
    cleaning: CleaningReport
    split_sizes: dict[str, int]
    families: dict[str, FamilyReport] = field(default_factory=dict)
    comparison: Optional[pd.DataFrame] = None


class RatingExperiment:
    """Run the cleaning stage then the model evaluation stage, once."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        families: Optional[list[str]] = None,
        models_dir: Optional[Path] = None,
        verbose: bool = True,
    ) -> None:
        self._settings = settings or get_settings()
        self.families = families or list(self._settings.supported_families)
        for name in self.families:
            get_family(name)
        self.models_dir = Path(models_dir) if models_dir else None
        self.verbose = verbose
        self.trainer = ModelTrainer(
            seed=self._settings.seed,
            balance_strategy=self._settings.balance_strategy,
            skew_threshold=self._settings.skew_threshold,
            max_models=self._settings.max_models,
            max_runtime_secs=self._settings.max_runtime_secs,
            tie_tolerance=self._settings.tie_tolerance,
        )

    def _print(self, title: str, body: Any = None) -> None:
        if not self.verbose:
            return
        print("\n" + "=" * 70)
        print(title)
        print("=" * 70)
        if body is not None:
            print(body.to_string() if isinstance(body, (pd.DataFrame, pd.Series)) else body)

    def run(self, csv_path: Path) -> ExperimentReport:
        raw = load_raw(csv_path)
        return self.run_frame(raw)

    def run_frame(self, raw: pd.DataFrame) -> ExperimentReport:
        """Run both stages on an already-loaded raw frame."""
        cleaned, cleaning = clean_dataset(raw[[c for c in RAW_COLUMNS if c in raw.columns]])
        self._print("Cleaning summary", pd.Series(cleaning.as_dict()))

        split = split_dataset(cleaned, tuple(self._settings.split_ratios), seed=self._settings.seed)
        report = ExperimentReport(cleaning=cleaning, split_sizes=split.sizes())
        self._print("Partition sizes", pd.Series(report.split_sizes))

        for name in self.families:
            report.families[name] = self._run_family(name, split, cleaned)

        report.comparison = comparison_table(
            {name: fr.metrics["tuned_test"] for name, fr in report.families.items()}
        )
        self._print("Model comparison (tuned models, test partition)", report.comparison)
        return report

    def _run_family(self, name: str, split: DatasetSplit, cleaned: pd.DataFrame) -> FamilyReport:
        baseline = self.trainer.fit_baseline(name, split.train)
        search = self.trainer.tune(name, split.train, split.validation)

        metrics = {}
        for variant, fitted in (("baseline", baseline), ("tuned", search.best)):
            for partition in ("validation", "test"):
                metrics[f"{variant}_{partition}"] = evaluate_on(fitted.model, getattr(split, partition))

        family_report = FamilyReport(family=name, baseline=baseline, search=search, metrics=metrics)
        self._print(f"{name}: tuned confusion matrix (test)", metrics["tuned_test"]["confusion_matrix"])
        self._print(f"{name}: search leaderboard (top 5)", search.leaderboard().head(5))
        self._print(f"{name}: AUC / classification error", family_report.summary())

        if self._settings.cv_folds >= 2:
            family_report.cross_validation = cross_validate_model(
                search.best.model, cleaned, folds=self._settings.cv_folds, seed=self._settings.seed
            )
            self._print(f"{name}: {self._settings.cv_folds}-fold cross-validation", family_report.cross_validation)

        if self.models_dir is not None:
            test_metrics = {
                k: v for k, v in metrics["tuned_test"].items() if k != "confusion_matrix"
            }
            self.trainer.save(search.best, self.models_dir, metrics=test_metrics)
        return family_report
