from __future__ import annotations

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from dicomfmt.sort.classifier import DEFAULT_PROBE_CHARS
from dicomfmt.sort.sort_method import DEFAULT_DIR_MODE


class DicomFmtSettings(BaseSettings):
    """
    Run configuration for dicomfmt.

    Values come from keyword arguments first, then from `DICOMFMT_*`
    environment variables, then from the defaults below. The command line
    passes its flags as keyword arguments, so flags win over the
    environment.

    Examples
    --------
    >>> settings = DicomFmtSettings(verbose=True)
    >>> settings.dir_mode == 0o750
    True
    """

    verbose: bool = Field(
        default=False,
        description="Log skipped text files and classifier details",
    )
    dry_run: bool = Field(
        default=False,
        description="Plan placements without touching the filesystem",
    )
    dir_mode: int = Field(
        default=DEFAULT_DIR_MODE,
        description="Permission bits for created directories",
    )
    text_probe_chars: int = Field(
        default=DEFAULT_PROBE_CHARS,
        gt=0,
        description="Characters inspected when deciding if a file is text",
    )
    model_config = SettingsConfigDict(
        env_prefix="DICOMFMT_",
        extra="ignore",
    )

    @field_validator("dir_mode", mode="before")
    @classmethod
    def parse_octal_mode(cls, value: object) -> object:
        """Accept modes written as octal strings such as ``"750"`` or ``"0o750"``."""
        if isinstance(value, str):
            return int(value, 8)
        return value
