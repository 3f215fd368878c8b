"""
Text file detection.

DICOM files contain non-printable bytes early in the stream (the preamble
is usually 128 NUL bytes), while the incidental files that end up in
imaging exports (readmes, logs, checksums) are plain text. Files that look
like text are skipped instead of being handed to the DICOM parser.
"""

from pathlib import Path

from dicomfmt.loggers import logger

DEFAULT_PROBE_CHARS = 128

# control characters that still count as text
TEXT_CONTROL_CHARS = frozenset("\n\t\r")


class TextClassifier:
    """Decides whether a file is an incidental text file.

    Parameters
    ----------
    verbose : bool, optional
        Log why a probe stopped early (default is False).
    max_chars : int, optional
        Number of characters to inspect (default is 128).
    """

    def __init__(
        self, verbose: bool = False, max_chars: int = DEFAULT_PROBE_CHARS
    ) -> None:
        self.verbose = verbose
        self.max_chars = max_chars

    def is_text(self, path: Path) -> bool:
        """Return True if the first `max_chars` characters are printable UTF-8.

        End of file or an undecodable byte before the limit also counts as
        text. A file that cannot be opened is not text, so the parser gets
        the chance to report the real error.
        """
        try:
            with open(path, "rb") as stream:
                # a UTF-8 character is at most 4 bytes long
                prefix = stream.read(self.max_chars * 4)
        except OSError as e:
            logger.warning("Unable to open file", file=path, error=str(e))
            return False

        stop_reason = "end of file"
        try:
            chars = prefix.decode("utf-8")
        except UnicodeDecodeError as e:
            chars = prefix[: e.start].decode("utf-8")
            stop_reason = e.reason

        for char in chars[: self.max_chars]:
            if not char.isprintable() and char not in TEXT_CONTROL_CHARS:
                return False

        if self.verbose and len(chars) < self.max_chars:
            logger.info(
                "Stopped reading file early", file=path, reason=stop_reason
            )
        return True


def is_likely_text_file(path: Path, verbose: bool = False) -> bool:
    """Shortcut for `TextClassifier(verbose).is_text(path)`."""
    return TextClassifier(verbose=verbose).is_text(path)
