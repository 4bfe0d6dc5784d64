"""Application configuration."""
from pathlib import Path
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Run settings loaded from environment."""

    app_name: str = "Play Store App Rating Classifier"
    log_level: str = "INFO"

    # Paths
    base_dir: Path = Path(__file__).resolve().parent.parent
    data_dir: Path = Path(__file__).resolve().parent.parent / "data"
    logs_dir: Path = Path(__file__).resolve().parent.parent / "logs"
    default_data_filename: str = "googleplaystore.csv"
    log_filename: str = "apprating.log"

    # Partitioning
    seed: int = 42
    split_ratios: tuple[float, float, float] = (0.70, 0.15, 0.15)
    cv_folds: int = 5

    # Hyperparameter search budget
    max_models: int = 20
    max_runtime_secs: float = 300.0
    tie_tolerance: float = 0.001

    # Class balancing: none, over, under or auto
    balance_strategy: str = "auto"
    skew_threshold: float = 0.4

    # Model families evaluated by default
    supported_families: list[str] = [
        "logistic_regression",
        "random_forest",
        "gradient_boosting",
    ]

    class Config:
        env_prefix = "APPRATING_"
        env_file = ".env"
        extra = "ignore"


def get_settings() -> Settings:
    """Return application settings."""
    return Settings()
