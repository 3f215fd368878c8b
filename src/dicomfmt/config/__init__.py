from .settings import DicomFmtSettings

__all__ = ["DicomFmtSettings"]
