"""
Placing series files in the canonical layout.

Every file of a series is placed at

    target_directory/PatientName/SeriesDescription/<original basename>

Files that already sit at their canonical path are left alone, so running
the engine over an organized tree is a no-op. In move mode, directories
emptied by a move are removed along with their parent if it became empty
too, which collapses the PatientName/SeriesDescription nesting of an
already organized tree.

Any failure to create a directory or to move or copy a file raises
`PlacementError` and stops the run: it usually means the disk is full or
permissions were lost, and nothing already placed is rolled back.
"""

import os
from dataclasses import dataclass
from itertools import chain
from pathlib import Path
from typing import Iterable, Iterator, List, Tuple

from dicomfmt.loggers import logger
from dicomfmt.sort.exceptions import PlacementError
from dicomfmt.sort.series import SeriesGroup, SeriesTable
from dicomfmt.sort.sort_method import DEFAULT_DIR_MODE, FileAction, handle_file


@dataclass(frozen=True)
class Placement:
    source: Path
    destination: Path


def canonical_series_dir(target_directory: Path, group: SeriesGroup) -> Path:
    """Return `target_directory/PatientName/SeriesDescription`, normalized."""
    return Path(
        os.path.normpath(
            os.path.join(
                target_directory, group.patient_name, group.series_description
            )
        )
    )


def remove_empty(directory: Path) -> bool:
    """Remove `directory` if it is empty. Returns True if it was removed."""
    try:
        if any(directory.iterdir()):
            return False
        directory.rmdir()
    except OSError:
        return False
    return True


class PlacementEngine:
    """
    Move or copy the files of series tables into the canonical layout.

    Parameters
    ----------
    target_directory : Path
        Root of the canonical layout.
    action : FileAction | str, optional
        `FileAction.MOVE` or `FileAction.COPY` (default is MOVE).
    dir_mode : int, optional
        Permission bits of created directories (default is 0o750).
    dry_run : bool, optional
        Only log what would be done (default is False).

    Examples
    --------
    >>> from dicomfmt.sort import split_series
    >>> engine = PlacementEngine(Path("/out"), FileAction.COPY)
    >>> for series_dir in engine.place(split_series(Path("/in"))):
    ...     print(series_dir)
    /out/Doe/CT
    """

    def __init__(
        self,
        target_directory: Path,
        action: FileAction | str = FileAction.MOVE,
        dir_mode: int = DEFAULT_DIR_MODE,
        dry_run: bool = False,
    ) -> None:
        self.target_directory = Path(target_directory)
        self.action = FileAction.validate(action)
        self.dir_mode = dir_mode
        self.dry_run = dry_run
        self.logger = logger.bind(
            target_directory=self.target_directory, action=self.action.value
        )

    def plan(
        self, table: SeriesTable
    ) -> Iterator[Tuple[Path, List[Placement]]]:
        """Yield each series directory with the placements it needs.

        Files already at their canonical path are left out, so a series
        that is fully in place yields an empty list.
        """
        for group in table.values():
            series_dir = canonical_series_dir(self.target_directory, group)
            placements = []
            for source in group.files:
                destination = series_dir / source.name
                if os.path.normpath(destination) == os.path.normpath(source):
                    continue
                placements.append(Placement(source, destination))
            yield series_dir, placements

    def place(self, table: SeriesTable) -> Iterator[Path]:
        """
        Place every file of `table`, yielding each series directory that
        received at least one file.

        Raises
        ------
        PlacementError
            If a directory cannot be created or a file cannot be moved or
            copied. No further series are processed.
        """
        for series_dir, placements in self.plan(table):
            if not placements:
                continue
            for placement in placements:
                self._place_file(placement)
            yield series_dir

    def place_all(self, tables: Iterable[SeriesTable]) -> Iterator[Path]:
        """Place several tables in order, one source root each."""
        return chain.from_iterable(self.place(table) for table in tables)

    def _place_file(self, placement: Placement) -> None:
        if self.dry_run:
            self.logger.info(
                "Would place file",
                source=placement.source,
                destination=placement.destination,
            )
            return

        try:
            handle_file(
                placement.source,
                placement.destination,
                self.action,
                dir_mode=self.dir_mode,
            )
        except OSError as e:
            self.logger.critical(
                "Failed to place file",
                source=placement.source,
                destination=placement.destination,
                error=str(e),
            )
            raise PlacementError(placement.source, placement.destination) from e

        if self.action is FileAction.MOVE:
            self._cleanup(placement.source.parent)

    def _cleanup(self, source_dir: Path) -> None:
        # series directory first, then its patient directory
        if remove_empty(source_dir):
            self.logger.debug("Removed empty directory", directory=source_dir)
            if remove_empty(source_dir.parent):
                self.logger.debug(
                    "Removed empty directory", directory=source_dir.parent
                )
