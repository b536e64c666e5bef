# Copyright 2026 Pomwalk project contributors.
# Licensed under the Apache License, Version 2.0 (http://www.apache.org/licenses/LICENSE-2.0).

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Callable, Optional, Tuple

from pomwalk.base.exceptions import (
    InvalidCoordinateString,
    ManifestParseError,
    MissingManifestError,
    MissingVersionError,
)
from pomwalk.resolve.completion import CompletionSignal, WaitObserver
from pomwalk.resolve.manifest import ManifestDependency, PomManifest
from pomwalk.resolve.remote import Repository
from pomwalk.resolve.snapshot import SnapshotResolver, is_snapshot

logger = logging.getLogger(__name__)

DEFAULT_SCOPE = "compile"
DEFAULT_PACKAGING = "jar"

# (group_id, artifact_id, version, classifier)
CoordinateKey = Tuple[str, str, Optional[str], Optional[str]]


@dataclass(eq=False)
class Coordinate:
    """A single Maven coordinate, along with what is known so far about resolving it.

    A coordinate may be created without a version (e.g. a dependency whose version is managed
    elsewhere), but every path and filename accessor requires one. The manifest is assigned by
    whoever fetches the POM, after which the parent and dependencies can be derived from it.

    `repositories` is shared, unmodified, with every coordinate derived from this one, and its order
    is the order in which repositories are consulted.
    """

    REGEX = re.compile("([^: ]+):([^: ]+)(:([^: ]+))?:([^: ]+)")

    group_id: str
    artifact_id: str
    version: str | None = None
    classifier: str | None = None
    scope: str = DEFAULT_SCOPE
    optional: bool = False
    repositories: tuple[Repository, ...] = ()
    # Which coordinates' manifests led to this one being discovered, for diagnostics only.
    reason: str = ""
    manifest: PomManifest | None = field(default=None, repr=False)
    completion: CompletionSignal = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.completion = CompletionSignal(self)

    def __str__(self) -> str:
        return f"{self.group_id}:{self.artifact_id}:{self.version}"

    @property
    def key(self) -> CoordinateKey:
        return (self.group_id, self.artifact_id, self.version, self.classifier)

    @classmethod
    def from_coord_str(
        cls, s: str, *, repositories: tuple[Repository, ...] = (), reason: str = ""
    ) -> Coordinate:
        """Parse `group:artifact:version` or `group:artifact:classifier:version`."""
        parts = cls.REGEX.fullmatch(s.strip())
        if parts is None:
            raise InvalidCoordinateString(s)
        return cls(
            group_id=parts.group(1),
            artifact_id=parts.group(2),
            classifier=parts.group(4),
            version=parts.group(5),
            repositories=repositories,
            reason=reason,
        )

    @classmethod
    def from_manifest_node(
        cls, node: ManifestDependency, reason: str, repositories: tuple[Repository, ...]
    ) -> Coordinate:
        """Build a coordinate from a `<parent>` or `<dependency>` node of a manifest.

        A missing version is kept as None: it is expected to be inherited from elsewhere.
        """
        if node.group_id is None or node.artifact_id is None:
            raise ManifestParseError(
                f"Manifest node {node} (via {reason or 'a root manifest'}) must declare both "
                "groupId and artifactId."
            )
        return cls(
            group_id=node.group_id,
            artifact_id=node.artifact_id,
            version=node.version,
            classifier=node.classifier,
            scope=node.scope or DEFAULT_SCOPE,
            optional=node.optional == "true",
            repositories=repositories,
            reason=reason,
        )

    # ---------------------------------------------------------------------------------------------
    # Paths
    # ---------------------------------------------------------------------------------------------

    def group_path(self) -> str:
        return self.group_id.replace(".", "/")

    def artifact_path(self) -> str:
        return f"{self.group_path()}/{self.artifact_id}"

    def version_path(self) -> str:
        if not self.version:
            raise MissingVersionError(self)
        return f"{self.artifact_path()}/{self.version}"

    def jar_file_name(self, resolver: SnapshotResolver | None = None) -> str:
        return self._file_name("jar", resolver, with_classifier=True)

    def pom_file_name(self, resolver: SnapshotResolver | None = None) -> str:
        return self._file_name("pom", resolver, with_classifier=False)

    def jar_path(self, resolver: SnapshotResolver | None = None) -> str:
        return f"{self.version_path()}/{self.jar_file_name(resolver)}"

    def pom_path(self, resolver: SnapshotResolver | None = None) -> str:
        return f"{self.version_path()}/{self.pom_file_name(resolver)}"

    def _file_name(
        self, extension: str, resolver: SnapshotResolver | None, *, with_classifier: bool
    ) -> str:
        if not self.version:
            raise MissingVersionError(self)

        release_name = self.artifact_id + "-" + self.version
        if with_classifier and self.classifier:
            release_name += "-" + self.classifier
        release_name += "." + extension

        if not is_snapshot(self.version):
            return release_name

        snapshot = (resolver or SnapshotResolver()).resolve(self)
        if snapshot is None:
            logger.debug(f"No deployed build of {self}, using its literal version for {extension}.")
            return release_name
        return f"{self.artifact_id}-{snapshot.file_version(self.version)}.{extension}"

    # ---------------------------------------------------------------------------------------------
    # Manifest graph
    # ---------------------------------------------------------------------------------------------

    def _require_manifest(self) -> PomManifest:
        if self.manifest is None:
            raise MissingManifestError(self)
        return self.manifest

    def packaging(self) -> str:
        return self._require_manifest().packaging or DEFAULT_PACKAGING

    def parent(self) -> Coordinate | None:
        node = self._require_manifest().parent
        if node is None:
            return None
        return Coordinate.from_manifest_node(node, self.reason, self.repositories)

    def dependencies(self) -> tuple[Coordinate, ...]:
        return self._derive(self._require_manifest().dependencies)

    def dependency_management_dependencies(self) -> tuple[Coordinate, ...]:
        return self._derive(self._require_manifest().dependency_management)

    def _derive(self, nodes: tuple[ManifestDependency, ...]) -> tuple[Coordinate, ...]:
        reason = f"{self.reason}/{self}" if self.reason else str(self)
        return tuple(
            Coordinate.from_manifest_node(node, reason, self.repositories) for node in nodes
        )

    # ---------------------------------------------------------------------------------------------
    # Completion
    # ---------------------------------------------------------------------------------------------

    @property
    def complete(self) -> bool:
        return self.completion.complete

    @property
    def state(self) -> str | None:
        return self.completion.state

    @state.setter
    def state(self, state: str) -> None:
        self.completion.set_state(state)

    def mark_complete(self) -> None:
        self.completion.mark_complete()

    def await_completion(self, on_done: Callable[[], None] | None = None) -> None:
        self.completion.await_completion(on_done)

    def wait_until_complete(
        self,
        timeout: float | None = None,
        *,
        observer: WaitObserver | None = None,
        report_interval: float = 1.0,
    ) -> bool:
        return self.completion.wait(timeout, observer=observer, report_interval=report_interval)
