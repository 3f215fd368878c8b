import logging
from pathlib import Path
from typing import Callable, Optional

import pytest
from pydicom.dataset import Dataset, FileMetaDataset
from pydicom.uid import UID, ExplicitVRLittleEndian, generate_uid

pytest_logger = logging.getLogger("tests.fixtures")
pytest_logger.setLevel(logging.DEBUG)

pytest_logger.propagate = True  # Let pytest capture it

CT_IMAGE_STORAGE = UID("1.2.840.10008.5.1.4.1.1.2")

WriteDicom = Callable[..., Path]


def build_dataset(
    series_uid: Optional[str],
    patient_name: Optional[str],
    series_description: Optional[str],
) -> Dataset:
    """Create a small CT dataset, leaving out any field passed as None."""
    ds = Dataset()
    if patient_name is not None:
        ds.PatientName = patient_name
    ds.PatientID = "123456"
    ds.Modality = "CT"
    ds.StudyDate = "20021114"
    ds.StudyInstanceUID = generate_uid()
    if series_uid is not None:
        ds.SeriesInstanceUID = UID(series_uid)
    if series_description is not None:
        ds.SeriesDescription = series_description
    ds.SOPClassUID = CT_IMAGE_STORAGE
    ds.SOPInstanceUID = generate_uid()

    file_meta = FileMetaDataset()
    file_meta.MediaStorageSOPClassUID = CT_IMAGE_STORAGE
    file_meta.MediaStorageSOPInstanceUID = ds.SOPInstanceUID
    file_meta.ImplementationClassUID = UID("1.2.3.4")
    file_meta.TransferSyntaxUID = ExplicitVRLittleEndian
    ds.file_meta = file_meta
    return ds


@pytest.fixture
def write_dicom() -> WriteDicom:
    """Factory fixture writing a DICOM file to `path`.

    Pass `None` for a field to leave it out of the file.
    """

    def _write(
        path: Path,
        series_uid: Optional[str] = "1.2.826.0.1.3680043.8.498.1",
        patient_name: Optional[str] = "Doe",
        series_description: Optional[str] = "CT",
    ) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        ds = build_dataset(series_uid, patient_name, series_description)
        ds.save_as(path, enforce_file_format=True)
        return path

    return _write


@pytest.fixture
def organized_tree(tmp_path: Path, write_dicom: WriteDicom) -> Path:
    """A target tree that is already in the canonical layout."""
    root = tmp_path / "organized"
    write_dicom(root / "Doe" / "CT" / "1-1.dcm", series_uid="1.1")
    write_dicom(root / "Doe" / "CT" / "1-2.dcm", series_uid="1.1")
    write_dicom(
        root / "Roe" / "MR" / "2-1.dcm",
        series_uid="2.2",
        patient_name="Roe",
        series_description="MR",
    )
    return root


@pytest.fixture
def relative_files() -> Callable[[Path], set[str]]:
    """List all files under a root as posix paths relative to it."""

    def _list(root: Path) -> set[str]:
        return {
            path.relative_to(root).as_posix()
            for path in root.rglob("*")
            if path.is_file()
        }

    return _list
