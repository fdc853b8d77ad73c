"""Artifact packaging exports."""

from .app_bundle_archiver import ArtifactArchiveError, archive_app_directory, requires_archive

__all__ = ["ArtifactArchiveError", "archive_app_directory", "requires_archive"]
