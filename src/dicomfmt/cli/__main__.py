"""Command-line interface for the dicomfmt package.

Usage::

    dicomfmt [--verbose] SOURCE_DIR [SOURCE_DIR ...] TARGET_DIR
    python -m dicomfmt.cli [--verbose] SOURCE_DIR [SOURCE_DIR ...] TARGET_DIR
"""

from dicomfmt.cli.dicomfmt import dicomfmt as cli

__all__ = ["cli"]

if __name__ == "__main__":
    cli()
