"""Service layer package.

Exports the stateful services consumed by hosts and the CLI tools.
"""

from .visit_tracker import VisitTracker, VisitTrackerConfig, accuracy_level, visible_controls

__all__ = ["VisitTracker", "VisitTrackerConfig", "accuracy_level", "visible_controls"]
