"""Locate OFX statement files under an input directory."""

from __future__ import annotations

import os
from os import PathLike
from pathlib import Path

from .logging_setup import get_logger

logger = get_logger("gastos.discovery")

OFX_SUFFIX = ".ofx"


def list_ofx_files(root: str | PathLike[str]) -> list[Path]:
    """Return every ``*.ofx`` file below ``root`` (suffix match ignores case).

    Best effort: unreadable directories are skipped and the walk continues with
    whatever it can reach. Symlinked directories are not descended into;
    symlinked files are returned like regular ones. The result is sorted so
    paths are handed to the parser pool in a stable order.
    """

    root_path = Path(root)
    if not root_path.is_dir():
        logger.warning("input directory %s does not exist or is not a directory", root_path)
        return []

    def _on_error(err: OSError) -> None:
        logger.debug("skipping %s: %s", err.filename, err)

    found: list[Path] = []
    for dirpath, _dirnames, filenames in os.walk(root_path, onerror=_on_error):
        for name in filenames:
            if name.lower().endswith(OFX_SUFFIX):
                found.append(Path(dirpath) / name)
    found.sort()
    logger.info("found %d OFX file(s) under %s", len(found), root_path)
    return found


__all__ = ["OFX_SUFFIX", "list_ofx_files"]
