"""End-to-end runs of the experiment service and the CLI."""
import pandas as pd
import pytest

from apprating.main import main
from apprating.services.experiment import RatingExperiment, load_raw
from apprating.utils.exceptions import DataLoadError, SchemaError, TrainingError


@pytest.fixture
def csv_path(tmp_path, raw_frame, messy_frame):
    path = tmp_path / "googleplaystore.csv"
    pd.concat([raw_frame, messy_frame], ignore_index=True).to_csv(path, index=False)
    return path


class TestRatingExperiment:
    def test_full_run(self, csv_path, fast_settings, capsys):
        report = RatingExperiment(settings=fast_settings).run(csv_path)

        assert report.cleaning.bad_category_dropped == 1
        assert report.cleaning.missing_rating_dropped == 2
        assert sum(report.split_sizes.values()) == report.cleaning.rows_retained
        assert set(report.families) == {"logistic_regression", "random_forest", "gradient_boosting"}

        comparison = report.comparison
        assert list(comparison.index) == ["AUC", "Classification Error"]
        assert list(comparison.columns) == list(report.families)

        for family_report in report.families.values():
            summary = family_report.summary()
            assert list(summary.index) == ["baseline", "tuned"]
            assert len(family_report.search.candidates) <= fast_settings.max_models
            assert len(family_report.cross_validation) == fast_settings.cv_folds + 2

        out = capsys.readouterr().out
        assert "Model comparison" in out
        assert "Classification Error" in out

    def test_subset_of_families_and_saving(self, fast_settings, tmp_path, make_raw_frame):
        settings = fast_settings.model_copy(update={"cv_folds": 0})
        experiment = RatingExperiment(
            settings=settings,
            families=["random_forest"],
            models_dir=tmp_path / "models",
            verbose=False,
        )
        report = experiment.run_frame(make_raw_frame(n=200, seed=3))
        assert list(report.families) == ["random_forest"]
        assert report.families["random_forest"].cross_validation is None
        assert (tmp_path / "models" / "random_forest_tuned.joblib").exists()

    def test_unknown_family_rejected(self, fast_settings):
        with pytest.raises(TrainingError):
            RatingExperiment(settings=fast_settings, families=["svm"])

    def test_missing_file(self, tmp_path):
        with pytest.raises(DataLoadError):
            load_raw(tmp_path / "nope.csv")

    def test_missing_columns(self, fast_settings, raw_frame):
        with pytest.raises(SchemaError):
            RatingExperiment(settings=fast_settings, verbose=False).run_frame(raw_frame.drop(columns=["Price"]))


class TestCli:
    def test_cli_success(self, csv_path, tmp_path, monkeypatch):
        monkeypatch.setenv("APPRATING_LOGS_DIR", str(tmp_path / "logs"))
        code = main([
            str(csv_path),
            "--max-models", "1",
            "--cv-folds", "0",
            "--families", "logistic_regression", "gradient_boosting",
            "--balance", "none",
        ])
        assert code == 0

    def test_cli_missing_file_exit_code(self, tmp_path, monkeypatch):
        monkeypatch.setenv("APPRATING_LOGS_DIR", str(tmp_path / "logs"))
        assert main([str(tmp_path / "missing.csv")]) == 1
