"""Zipping of app directory bundles before upload."""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

LOGGER = logging.getLogger(__name__)

MOBILE_OS_NAMES = frozenset({"ios", "android"})


class ArtifactArchiveError(Exception):
    """Raised when an app directory cannot be archived."""


def requires_archive(os_name: str, app_path: Path) -> bool:
    """Return True when the app is a directory bundle (e.g. a simulator .app) for a mobile OS."""
    return os_name in MOBILE_OS_NAMES and app_path.is_dir()


def archive_app_directory(directory: Path) -> Path:
    """Zip a directory into a sibling `<directory>.zip`, replacing any existing archive.

    The directory itself becomes the single top-level entry of the archive.
    """
    zip_path = directory.with_name(directory.name + ".zip")
    LOGGER.info("Zip app directory %s", directory)
    try:
        if zip_path.is_dir():
            shutil.rmtree(zip_path)
        else:
            zip_path.unlink(missing_ok=True)
        archive = shutil.make_archive(
            str(directory),
            "zip",
            root_dir=directory.parent,
            base_dir=directory.name,
        )
    except OSError as exc:
        raise ArtifactArchiveError(f"Failed to zip app directory {directory}: {exc}") from exc
    return Path(archive)
