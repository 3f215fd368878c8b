class DICOMFmtError(Exception):
    """Base exception for DICOM formatting errors."""

    def __init__(
        self, message: str = "An error occurred while formatting DICOM files"
    ) -> None:
        super().__init__(message)


####################################################################################################
# Dicom specific exceptions


class FieldExtractionError(DICOMFmtError):
    """Raised when the series fields cannot be read from a file's bytes."""
