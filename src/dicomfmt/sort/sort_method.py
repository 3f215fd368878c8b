"""
File Handling Utility.

This module provides the two ways a file can be placed at its canonical
destination: moving it (in-place reorganization of a tree) or copying it
(building a new tree from one or more sources).

Examples
--------
Move a file:
    >>> from pathlib import Path
    >>> handle_file(
    ...     Path("source.dcm"),
    ...     Path("out/Doe/CT/source.dcm"),
    ...     action=FileAction.MOVE,
    ... )

Copy a file:
    >>> handle_file(
    ...     Path("source.dcm"),
    ...     Path("out/Doe/CT/source.dcm"),
    ...     action=FileAction.COPY,
    ... )
"""

import shutil
from enum import Enum
from pathlib import Path
from typing import Type

DEFAULT_DIR_MODE = 0o750


class FileAction(Enum):
    MOVE = "move"
    COPY = "copy"

    def handle(self, source_path: Path, resolved_path: Path) -> None:
        match self:
            case FileAction.MOVE:
                self.move_file(source_path, resolved_path)
            case FileAction.COPY:
                self.copy_file(source_path, resolved_path)

    def move_file(self, source_path: Path, resolved_path: Path) -> None:
        source_path.rename(resolved_path)

    def copy_file(self, source_path: Path, resolved_path: Path) -> None:
        shutil.copy2(
            source_path, resolved_path
        )  # shutil.copy2 preserves metadata

    @classmethod
    def validate(cls: Type["FileAction"], action: str) -> "FileAction":
        if not isinstance(action, cls):
            try:
                return cls(action)
            except ValueError as e:
                valid_actions = ", ".join([f"`{a.value}`" for a in cls])
                msg = f"Invalid action: {action}. Must be one of: {valid_actions}"
                raise ValueError(msg) from e
        return action


def make_directories(path: Path, mode: int = DEFAULT_DIR_MODE) -> None:
    """Create `path` and its missing parents, each with `mode`.

    Unlike `Path.mkdir(parents=True)`, parents get `mode` too.
    """
    missing = []
    parent = path.parent
    while parent != parent.parent and not parent.exists():
        missing.append(parent)
        parent = parent.parent

    for directory in reversed(missing):
        directory.mkdir(mode=mode, exist_ok=True)
    path.mkdir(mode=mode, exist_ok=True)


def handle_file(
    source_path: Path,
    resolved_path: Path,
    action: FileAction | str,
    dir_mode: int = DEFAULT_DIR_MODE,
) -> None:
    """Place `source_path` at `resolved_path`, creating parent directories.

    An existing file at `resolved_path` is replaced.

    Raises
    ------
    ValueError
        If `action` is not a valid `FileAction`.
    FileNotFoundError
        If `source_path` does not exist.
    PermissionError
        If the parent directory cannot be created or written to.
    OSError
        If the move or copy itself fails.
    """
    if not isinstance(action, FileAction):
        action = FileAction.validate(action)

    if not source_path.exists():
        msg = f"Source does not exist: {source_path}"
        raise FileNotFoundError(msg)

    try:
        make_directories(resolved_path.parent, mode=dir_mode)
    except PermissionError as e:
        errmsg = f"Failed to create parent directory or no write permission: {resolved_path.parent}"
        raise PermissionError(errmsg) from e

    action.handle(source_path, resolved_path)
