# Copyright 2026 Pomwalk project contributors.
# Licensed under the Apache License, Version 2.0 (http://www.apache.org/licenses/LICENSE-2.0).

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from pomwalk.base.exceptions import MetadataParseError, MissingVersionError
from pomwalk.resolve.manifest import MavenMetadata
from pomwalk.resolve.remote import RepositoryClient

if TYPE_CHECKING:
    from pomwalk.resolve.coordinate import Coordinate

logger = logging.getLogger(__name__)

SNAPSHOT_MARKER = "SNAPSHOT"
METADATA_FILE_NAME = "maven-metadata.xml"


def is_snapshot(version: str) -> bool:
    """Whether `version` is mutable.

    NB: This is a substring match, so e.g. `1.0-SNAPSHOT-rc1` is a snapshot too.
    """
    return SNAPSHOT_MARKER in version


@dataclass(frozen=True)
class SnapshotVersion:
    """The build identity a snapshot version was last deployed as."""

    timestamp: str
    build_number: str

    def file_version(self, version: str) -> str:
        """Render the version used in deployed filenames.

        E.g. `1.0-SNAPSHOT` with timestamp `20230101.120000` and build 3 becomes
        `1.0-20230101.120000-3`.
        """
        prefix = version[: version.index(SNAPSHOT_MARKER)]
        return f"{prefix}{self.timestamp}-{self.build_number}"


class SnapshotResolver:
    """Resolves snapshot versions via the version-level `maven-metadata.xml` of each repository."""

    def __init__(self, client: RepositoryClient | None = None) -> None:
        self._client = client or RepositoryClient()

    def resolve(self, coordinate: Coordinate) -> SnapshotVersion | None:
        """Find the deployed build of `coordinate`'s snapshot version.

        The coordinate's repositories are queried in order and the first one that serves metadata
        wins. Returns None for release versions, and when no repository has metadata.

        :raises MissingVersionError: if the coordinate has no version.
        :raises MetadataParseError: if a metadata document was served but could not be parsed.
        """
        version = coordinate.version
        if not version:
            raise MissingVersionError(coordinate)
        if not is_snapshot(version):
            return None

        found = self._client.first_available(
            coordinate.repositories, f"{coordinate.version_path()}/{METADATA_FILE_NAME}"
        )
        if found is None:
            logger.debug(f"No snapshot metadata found for {coordinate} in any repository.")
            return None

        url, content = found
        try:
            metadata = MavenMetadata.parse(content)
        except MavenMetadata.ParseError as e:
            raise MetadataParseError(url, str(e))
        if metadata.timestamp is None or metadata.build_number is None:
            raise MetadataParseError(url, "no versioning/snapshot timestamp and buildNumber")

        snapshot = SnapshotVersion(timestamp=metadata.timestamp, build_number=metadata.build_number)
        logger.debug(f"Resolved {coordinate} to {snapshot.file_version(version)}")
        return snapshot
