import os
import sys
from pathlib import Path

import pytest

from dicomfmt.sort.classifier import TextClassifier, is_likely_text_file


@pytest.fixture
def classifier() -> TextClassifier:
    return TextClassifier()


def test_short_printable_file_is_text(classifier, tmp_path: Path) -> None:
    path = tmp_path / "readme.txt"
    path.write_text("x" * 127)

    assert classifier.is_text(path)


def test_leading_nul_is_not_text(classifier, tmp_path: Path) -> None:
    path = tmp_path / "1-1.dcm"
    path.write_bytes(b"\x00" + b"x" * 200)

    assert not classifier.is_text(path)


def test_whitelisted_control_characters(classifier, tmp_path: Path) -> None:
    path = tmp_path / "log.txt"
    path.write_bytes(b"line one\r\n\tindented\n")

    assert classifier.is_text(path)


def test_other_control_character_is_not_text(classifier, tmp_path: Path) -> None:
    path = tmp_path / "data.bin"
    path.write_bytes(b"header\x07bell")

    assert not classifier.is_text(path)


def test_empty_file_is_text(classifier, tmp_path: Path) -> None:
    path = tmp_path / "empty"
    path.touch()

    assert classifier.is_text(path)


def test_non_ascii_printable_is_text(classifier, tmp_path: Path) -> None:
    path = tmp_path / "notes.txt"
    path.write_text("Patient: Müller, Ærø, 東京", encoding="utf-8")

    assert classifier.is_text(path)


def test_decode_error_before_limit_is_text(classifier, tmp_path: Path) -> None:
    path = tmp_path / "latin1.txt"
    path.write_bytes(b"caf\xe9 \x00\x00\x00")

    assert classifier.is_text(path)


def test_only_first_chars_are_inspected(tmp_path: Path) -> None:
    path = tmp_path / "long.txt"
    path.write_bytes(b"a" * 128 + b"\x00")

    assert TextClassifier().is_text(path)
    assert not TextClassifier(max_chars=129).is_text(path)


def test_dicom_file_is_not_text(classifier, tmp_path: Path, write_dicom) -> None:
    path = write_dicom(tmp_path / "1-1.dcm")

    assert not classifier.is_text(path)


def test_missing_file_is_not_text(classifier, tmp_path: Path) -> None:
    assert not classifier.is_text(tmp_path / "does-not-exist")


@pytest.mark.skipif(
    sys.platform == "win32" or os.geteuid() == 0,
    reason="Skipping test: chmod has no effect on Windows or for root.",
)
def test_unreadable_file_is_not_text(classifier, tmp_path: Path) -> None:
    path = tmp_path / "locked.txt"
    path.write_text("plain text")
    os.chmod(path, 0o000)

    try:
        assert not classifier.is_text(path)
    finally:
        os.chmod(path, 0o600)


def test_verbose_logging_does_not_change_result(tmp_path: Path) -> None:
    path = tmp_path / "short.txt"
    path.write_text("short")

    assert is_likely_text_file(path, verbose=True)
    assert TextClassifier(verbose=True).is_text(path)
