"""Core cleaning, partitioning, training and evaluation logic."""
from apprating.core.cleaning import clean_dataset
from apprating.core.imputation import MissingValueImputer
from apprating.core.partition import split_dataset
from apprating.core.models import ModelTrainer
from apprating.core.evaluation import evaluate_model, cross_validate_model

__all__ = [
    "clean_dataset",
    "MissingValueImputer",
    "split_dataset",
    "ModelTrainer",
    "evaluate_model",
    "cross_validate_model",
]
