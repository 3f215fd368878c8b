"""
Grouping DICOM files by series.

A directory tree is scanned recursively and every DICOM file is assigned
to the series named by its `SeriesInstanceUID`, wherever it sits in the
tree. Each subdirectory produces its own `SeriesTable`, which is merged
into the table of its parent, so a series whose files are spread over
several directories ends up as a single `SeriesGroup`.

Notes
-----
The patient name and series description of a group come from the first
file seen for that series and are never overwritten. When two tables
that both know a series are merged, the receiving table keeps its
metadata and only the files of the other table are appended.

Examples
--------
>>> from pathlib import Path
>>> table = split_series(Path("/data/export"))
>>> group = table["1.2.840.113619.2.55.3.604688.12345678.1234567890"]
>>> group.patient_name, group.series_description
('Doe^John', 'CT ABD')
>>> group.files
[PosixPath('/data/export/a/1-1.dcm'), PosixPath('/data/export/b/1-2.dcm')]
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from pydicom.errors import InvalidDicomError

from dicomfmt.dicom import parse_fields
from dicomfmt.loggers import logger
from dicomfmt.sort.classifier import DEFAULT_PROBE_CHARS, TextClassifier
from dicomfmt.exceptions import FieldExtractionError
from dicomfmt.sort.exceptions import EmptyPathError


@dataclass
class SeriesGroup:
    """The files of one series and the names used to place them."""

    patient_name: str
    series_description: str
    files: List[Path] = field(default_factory=list)


class SeriesTable(Dict[str, SeriesGroup]):
    """Mapping of `SeriesInstanceUID` to `SeriesGroup` for one scanned tree."""

    def add_file(
        self,
        series_uid: str,
        path: Path,
        patient_name: str,
        series_description: str,
    ) -> SeriesGroup:
        """Append `path` to its series, creating the group if needed.

        The names are only used when the group is created.
        """
        group = self.get(series_uid)
        if group is None:
            group = SeriesGroup(patient_name, series_description)
            self[series_uid] = group
        group.files.append(path)
        return group

    def merge(self, other: "SeriesTable") -> None:
        """Merge `other` into this table in place.

        Series known to both tables keep this table's metadata and receive
        the files of `other` after their own.
        """
        for series_uid, incoming in other.items():
            existing = self.get(series_uid)
            if existing is None:
                self[series_uid] = incoming
            else:
                existing.files.extend(incoming.files)

    @property
    def file_count(self) -> int:
        return sum(len(group.files) for group in self.values())


class SeriesAggregator:
    """
    Recursively collect the DICOM files of a directory tree into series.

    Parameters
    ----------
    verbose : bool, optional
        Log files skipped as text and early classifier stops (default is
        False). Parse failures and missing tags are always logged.
    text_probe_chars : int, optional
        Number of characters the text classifier inspects (default is 128).

    Notes
    -----
    Errors on single files or subtrees are logged and skipped; only an
    empty path or an unreadable top-level directory is raised to the
    caller.
    """

    def __init__(
        self,
        verbose: bool = False,
        text_probe_chars: int = DEFAULT_PROBE_CHARS,
    ) -> None:
        self.verbose = verbose
        self.classifier = TextClassifier(
            verbose=verbose, max_chars=text_probe_chars
        )

    def split_series(self, directory: Optional[Path]) -> SeriesTable:
        """
        Build the series table of `directory` and all its subdirectories.

        Parameters
        ----------
        directory : Path
            Root of the tree to scan.

        Returns
        -------
        SeriesTable
            Every series found below `directory`.

        Raises
        ------
        EmptyPathError
            If `directory` is empty.
        OSError
            If `directory` cannot be listed.
        """
        if directory is None or str(directory) == "":
            raise EmptyPathError()

        directory = Path(os.path.normpath(directory))
        series = SeriesTable()

        with os.scandir(directory) as entries:
            for entry in entries:
                path = directory / entry.name
                if entry.is_dir(follow_symlinks=False):
                    try:
                        subtree = self.split_series(path)
                    except OSError as e:
                        logger.warning(
                            "Skipping unreadable directory",
                            directory=path,
                            error=str(e),
                        )
                        continue
                    series.merge(subtree)
                elif entry.is_file():
                    self._add_file(series, path)
                else:
                    # opening a FIFO without a writer blocks
                    logger.warning("Skipping special file", file=path)

        return series

    def _add_file(self, series: SeriesTable, path: Path) -> None:
        if self.classifier.is_text(path):
            if self.verbose:
                logger.info("Skipping file: not a DICOM file", file=path)
            return

        try:
            data = path.read_bytes()
        except OSError as e:
            logger.warning("Unable to read file", file=path, error=str(e))
            return

        try:
            fields = parse_fields(data)
        except (InvalidDicomError, FieldExtractionError) as e:
            logger.warning("Parser error", file=path, error=str(e))
            return

        series_uid = fields.series_instance_uid
        if not series_uid:
            logger.warning("Could not find SeriesInstanceUID", file=path)
            return

        if series_uid in series:
            series[series_uid].files.append(path)
            return

        if fields.patient_name is None:
            logger.warning(
                "Lookup error for PatientName", file=path, series=series_uid
            )
            return
        if fields.series_description is None:
            logger.warning(
                "Lookup error for SeriesDescription",
                file=path,
                series=series_uid,
            )
            return

        series.add_file(
            series_uid, path, fields.patient_name, fields.series_description
        )


def split_series(
    directory: Optional[Path], verbose: bool = False
) -> SeriesTable:
    """Scan `directory` with a default `SeriesAggregator`."""
    return SeriesAggregator(verbose=verbose).split_series(directory)
