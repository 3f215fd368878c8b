"""Reading the series fields out of raw DICOM bytes.

Only the three tags needed to place a file are read:
`SeriesInstanceUID` groups files into a series, while `PatientName` and
`SeriesDescription` name the directories of the canonical layout.

Examples
--------
>>> from pathlib import Path
>>> fields = parse_fields(Path("sample.dcm").read_bytes())
>>> fields.series_instance_uid
'1.2.840.113619.2.55.3.604688.12345678.1234567890'
>>> fields.patient_name
'Doe^John'
"""

from dataclasses import dataclass
from io import BytesIO
from typing import List, Optional

from pydicom import dcmread
from pydicom.dataset import Dataset
from pydicom.errors import InvalidDicomError

from dicomfmt.exceptions import FieldExtractionError

REQUIRED_TAGS: List[str] = [
    "SeriesInstanceUID",
    "PatientName",
    "SeriesDescription",
]


@dataclass(frozen=True)
class SeriesFields:
    """Series metadata of a single file. Missing or empty values are `None`."""

    series_instance_uid: Optional[str]
    patient_name: Optional[str]
    series_description: Optional[str]


def _tag_value(dataset: Dataset, keyword: str) -> Optional[str]:
    value = dataset.get(keyword, None)
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def parse_fields(data: bytes, force: bool = True) -> SeriesFields:
    """
    Extract the series fields from the bytes of a DICOM file.

    Parameters
    ----------
    data : bytes
        Full contents of the file.
    force : bool, optional
        Read files missing the *File Meta Information* header (default is True).

    Returns
    -------
    SeriesFields
        The parsed fields.

    Raises
    ------
    InvalidDicomError
        If pydicom rejects the bytes as DICOM.
    FieldExtractionError
        If the bytes cannot be decoded into a dataset.
    """
    try:
        dataset = dcmread(
            BytesIO(data),
            force=force,
            stop_before_pixels=True,
            specific_tags=REQUIRED_TAGS,
        )
        return SeriesFields(
            series_instance_uid=_tag_value(dataset, "SeriesInstanceUID"),
            patient_name=_tag_value(dataset, "PatientName"),
            series_description=_tag_value(dataset, "SeriesDescription"),
        )
    except InvalidDicomError:
        raise
    except Exception as e:
        # malformed element data surfaces as struct, value or EOF errors
        errmsg = f"Unable to read DICOM fields: {e}"
        raise FieldExtractionError(errmsg) from e
