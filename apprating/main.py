"""Command-line entrypoint."""
import argparse
import sys
from pathlib import Path
from typing import Optional

from apprating import __version__
from apprating.config import get_settings
from apprating.core.balancing import BALANCE_STRATEGIES
from apprating.core.models import FAMILIES
from apprating.services.experiment import RatingExperiment
from apprating.utils.exceptions import AppRatingError
from apprating.utils.logging import setup_logging, get_logger

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    settings = get_settings()
    ap = argparse.ArgumentParser(
        prog="apprating",
        description="Clean a Play Store export and compare High/Low rating classifiers.",
    )
    ap.add_argument(
        "csv",
        nargs="?",
        type=Path,
        default=settings.data_dir / settings.default_data_filename,
        help="raw export CSV (default: %(default)s)",
    )
    ap.add_argument("--seed", type=int, default=settings.seed)
    ap.add_argument("--max-models", type=int, default=settings.max_models)
    ap.add_argument("--max-runtime-secs", type=float, default=settings.max_runtime_secs)
    ap.add_argument("--balance", choices=BALANCE_STRATEGIES, default=settings.balance_strategy)
    ap.add_argument("--cv-folds", type=int, default=settings.cv_folds, help="0 disables cross-validation")
    ap.add_argument("--families", nargs="+", choices=list(FAMILIES), default=settings.supported_families)
    ap.add_argument("--models-dir", type=Path, default=None, help="save tuned models here")
    ap.add_argument("--log-level", default=settings.log_level)
    ap.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return ap


def main(argv: Optional[list[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings().model_copy(
        update={
            "seed": args.seed,
            "max_models": args.max_models,
            "max_runtime_secs": args.max_runtime_secs,
            "balance_strategy": args.balance,
            "cv_folds": args.cv_folds,
            "supported_families": args.families,
            "log_level": args.log_level,
        }
    )
    setup_logging(
        log_level=settings.log_level,
        log_dir=settings.logs_dir,
        log_file=settings.log_filename,
    )
    try:
        experiment = RatingExperiment(settings=settings, families=args.families, models_dir=args.models_dir)
        experiment.run(args.csv)
    except AppRatingError as e:
        logger.error("%s: %s", type(e).__name__, e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
