"""Infrastructure services."""

from .retrain_tracker import InMemoryRetrainTracker

__all__ = ["InMemoryRetrainTracker"]
