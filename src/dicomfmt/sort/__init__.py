# ruff: noqa: I001
"""
Organizing DICOM Files by Patient and Series.

This module reorganizes trees of DICOM files into the canonical layout:

```
target/
└── {PatientName}/
    └── {SeriesDescription}/
        └── 1-1.dcm
```

Extended Summary
----------------
Sorting happens in two steps:

1. `SeriesAggregator` walks a source tree, skips text files, reads the
   series fields of every other file and groups files by
   `SeriesInstanceUID` into a `SeriesTable`. Partial groups found in
   different subdirectories are merged.
2. `PlacementEngine` computes the canonical path of every file in the
   table and moves or copies it there, skipping files already in place.

**Important**: The basename of each file is never changed, only the
directories it lives in.

Examples
--------
Copy two exports into one organized tree:

>>> from pathlib import Path
>>> engine = PlacementEngine(Path("/out"), FileAction.COPY)
>>> aggregator = SeriesAggregator()
>>> for source in [Path("/in/a"), Path("/in/b")]:
...     for series_dir in engine.place(aggregator.split_series(source)):
...         print(series_dir)
/out/Doe/CT

Tidy an organized tree in place:

>>> engine = PlacementEngine(Path("/out"), FileAction.MOVE)
>>> list(engine.place(split_series(Path("/out"))))
[]
"""

from dicomfmt.exceptions import DICOMFmtError, FieldExtractionError
from dicomfmt.sort.exceptions import EmptyPathError, PlacementError
from dicomfmt.sort.classifier import TextClassifier, is_likely_text_file
from dicomfmt.sort.sort_method import FileAction, handle_file, make_directories
from dicomfmt.sort.series import (
    SeriesAggregator,
    SeriesGroup,
    SeriesTable,
    split_series,
)
from dicomfmt.sort.placement import (
    Placement,
    PlacementEngine,
    canonical_series_dir,
    remove_empty,
)

__all__ = [
    "DICOMFmtError",
    "EmptyPathError",
    "FieldExtractionError",
    "PlacementError",
    "TextClassifier",
    "is_likely_text_file",
    "FileAction",
    "handle_file",
    "make_directories",
    "SeriesAggregator",
    "SeriesGroup",
    "SeriesTable",
    "split_series",
    "Placement",
    "PlacementEngine",
    "canonical_series_dir",
    "remove_empty",
]
