from pathlib import Path

from dicomfmt.exceptions import DICOMFmtError


class EmptyPathError(DICOMFmtError):
    """Raised when the series scan is given an empty directory path."""

    def __init__(self) -> None:
        super().__init__("Must provide a directory to split.")


class PlacementError(DICOMFmtError):
    """Raised when a file cannot be placed at its canonical destination.

    Placement failures usually mean the disk is full or permissions were
    lost, so they end the run instead of being skipped.
    """

    def __init__(self, source: Path, destination: Path) -> None:
        self.source = source
        self.destination = destination
        super().__init__(f"Failed to place {source} at {destination}")
