# Copyright 2026 Pomwalk project contributors.
# Licensed under the Apache License, Version 2.0 (http://www.apache.org/licenses/LICENSE-2.0).

from __future__ import annotations

from typing import Sequence


class PomwalkException(Exception):
    """Base exception type for pomwalk."""


class MissingVersionError(PomwalkException):
    """A path or filename was requested for a coordinate that has no version."""

    def __init__(self, coordinate: object) -> None:
        super().__init__(f"version not found for {coordinate}")


class MissingManifestError(PomwalkException):
    """A manifest-derived value was requested before a manifest was assigned."""

    def __init__(self, coordinate: object) -> None:
        super().__init__(f"Could not find a manifest for dependency: {coordinate}")


class ManifestParseError(PomwalkException):
    """A POM document could not be parsed into a manifest."""


class MetadataParseError(PomwalkException):
    """A `maven-metadata.xml` body was retrieved but could not be parsed.

    Unlike an absent metadata document, this is never treated as "no snapshot": it is raised to the
    caller of snapshot resolution.
    """

    def __init__(self, url: str, msg: str) -> None:
        self.url = url
        super().__init__(f"Error parsing snapshot metadata from {url}: {msg}")


class InvalidCoordinateString(PomwalkException):
    """The coordinate string being passed is invalid or malformed."""

    def __init__(self, coords: str) -> None:
        super().__init__(f"Received invalid artifact coordinates: {coords}")


class DependencyCycleError(PomwalkException):
    """Indicates a cycle among parent or dependency edges of a manifest graph."""

    def __init__(self, cycle: Sequence[object]) -> None:
        self.cycle = tuple(cycle)
        path = " -> ".join(str(c) for c in self.cycle)
        super().__init__(f"Cycle detected in dependency graph: {path}")


class ConfigError(PomwalkException):
    """Indicates an unreadable or invalid resolver configuration."""


class ManifestNotFoundError(PomwalkException):
    """No repository serves the manifest of a coordinate."""

    def __init__(self, coordinate: object, path: str) -> None:
        self.path = path
        super().__init__(f"Could not find {path} for {coordinate} in any repository.")
