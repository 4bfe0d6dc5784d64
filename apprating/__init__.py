"""Play Store app rating classifier."""

__version__ = "1.0.0"
