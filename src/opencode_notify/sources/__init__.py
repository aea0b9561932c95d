"""Sources of status events."""

from .adapter import EventAdapter, PluginContext
from .hierarchy import SessionHierarchyTracker

__all__ = [
    "EventAdapter",
    "PluginContext",
    "SessionHierarchyTracker",
]
