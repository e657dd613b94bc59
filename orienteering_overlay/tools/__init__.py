"""Utility entry points for supplementary course overlay tooling."""

from .course_map import build_course_map
from .replay_positions import replay_samples, summarize_visits

__all__ = ["build_course_map", "replay_samples", "summarize_visits"]
