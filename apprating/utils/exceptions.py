"""Custom exceptions for the app rating classifier."""


class AppRatingError(Exception):
    """Base exception for the app rating pipeline."""

    pass


class DataLoadError(AppRatingError):
    """Raised when the input file is missing or unreadable."""

    pass


class SchemaError(AppRatingError):
    """Raised when the input data lacks required columns."""

    pass


class ImputationError(AppRatingError):
    """Raised when the imputer is used before being fitted."""

    pass


class TrainingError(AppRatingError):
    """Raised when model training or tuning fails."""

    pass


class EvaluationError(AppRatingError):
    """Raised when a model cannot be evaluated."""

    pass
