import pathlib
from typing import List, Set, Tuple

import click

from dicomfmt import __version__
from dicomfmt.cli import set_log_verbosity
from dicomfmt.loggers import logger


def split_arguments(
    directories: Tuple[pathlib.Path, ...],
) -> Tuple[List[pathlib.Path], pathlib.Path, str]:
    """Return the source directories, the target directory and the action.

    A single directory is reorganized in place by moving files. With more
    directories, the last one is the target and the others are copied
    into it.
    """
    if len(directories) == 1:
        return [directories[0]], directories[0], "move"
    return list(directories[:-1]), directories[-1], "copy"


def reject_empty_paths(
    ctx: click.Context,
    param: click.Parameter,
    values: Tuple[str, ...],
) -> Tuple[pathlib.Path, ...]:
    """Convert DIRECTORIES to paths, refusing empty strings.

    `pathlib.Path("")` is the current directory, so an empty argument
    would otherwise reorganize the working directory.
    """
    if any(value == "" for value in values):
        raise click.BadParameter(
            "directory path must not be empty", ctx=ctx, param=param
        )
    return tuple(pathlib.Path(value) for value in values)


@click.command()
@click.argument(
    "directories",
    nargs=-1,
    required=True,
    metavar="SOURCE_DIR [SOURCE_DIR ...] TARGET_DIR",
    type=click.Path(dir_okay=True),
    callback=reject_empty_paths,
)
@set_log_verbosity()
@click.option(
    "-n",
    "--dry-run",
    is_flag=True,
    help="Do not move or copy files, just print the series directories that would be filled.",
)
@click.version_option(
    version=__version__,
    package_name="dicomfmt",
    prog_name="dicomfmt",
)
@click.help_option(
    "-h",
    "--help",
)
def dicomfmt(
    directories: Tuple[pathlib.Path, ...],
    verbose: bool,
    quiet: bool,
    dry_run: bool,
) -> None:
    """Organize DICOM files into TARGET_DIR/PatientName/SeriesDescription.

    With a single directory, files inside it are moved into place and
    emptied directories are removed. With several directories, files from
    every SOURCE_DIR are copied into TARGET_DIR.

    Every series directory that received a file is printed.
    """
    from dicomfmt.config import DicomFmtSettings
    from dicomfmt.sort import (
        DICOMFmtError,
        PlacementEngine,
        PlacementError,
        SeriesAggregator,
        make_directories,
    )

    overrides = {"verbose": verbose, "dry_run": dry_run}
    settings = DicomFmtSettings(**{k: v for k, v in overrides.items() if v})
    logger.debug("Debug Args", args=locals())

    sources, target, action = split_arguments(directories)

    if target.exists() and not target.is_dir():
        logger.critical("Target is not a directory", target=target)
        raise click.Abort()

    if not settings.dry_run and not target.exists():
        try:
            make_directories(target, mode=settings.dir_mode)
        except OSError as e:
            logger.critical(
                "Failed to create target directory",
                target=target,
                error=str(e),
            )
            raise click.Abort() from e

    aggregator = SeriesAggregator(
        verbose=settings.verbose,
        text_probe_chars=settings.text_probe_chars,
    )
    engine = PlacementEngine(
        target_directory=target,
        action=action,
        dir_mode=settings.dir_mode,
        dry_run=settings.dry_run,
    )

    reported: Set[pathlib.Path] = set()
    for source in sources:
        if not source.exists():
            logger.warning(f"{source} does not exist.", source=source)
            continue
        if not source.is_dir():
            logger.warning(f"{source} is not a directory.", source=source)
            continue

        try:
            series = aggregator.split_series(source)
        except (OSError, DICOMFmtError):
            logger.exception("Failed to scan source directory", source=source)
            continue

        logger.info(
            f"Found {len(series)} series",
            source=source,
            files=series.file_count,
        )

        try:
            for series_dir in engine.place(series):
                if series_dir not in reported:
                    reported.add(series_dir)
                    click.echo(series_dir)
        except PlacementError as e:
            raise click.Abort() from e


if __name__ == "__main__":
    dicomfmt()
