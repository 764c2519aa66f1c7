"""Aggregate football fixtures from ESPN into a today/upcoming JSON feed."""

from .config import PipelineConfig, load_config
from .models import Fixture, OutputDocument, TeamSide, TrackedTeam
from .pipeline import build, run_pipeline

__all__ = [
    "Fixture",
    "OutputDocument",
    "PipelineConfig",
    "TeamSide",
    "TrackedTeam",
    "build",
    "load_config",
    "run_pipeline",
]
