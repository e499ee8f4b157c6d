"""Domain ports package."""

from .dataset_codec import IDatasetCodec, Table
from .retrain_tracker import IRetrainTracker

__all__ = ["IDatasetCodec", "IRetrainTracker", "Table"]
