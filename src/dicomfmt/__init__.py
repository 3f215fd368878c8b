__version__ = "1.0.0"

from .loggers import logger
from .sort import (
    FileAction,
    PlacementEngine,
    SeriesAggregator,
    SeriesTable,
    split_series,
)

__all__ = [
    "logger",
    "FileAction",
    "PlacementEngine",
    "SeriesAggregator",
    "SeriesTable",
    "split_series",
]
