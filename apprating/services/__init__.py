"""Experiment orchestration."""
