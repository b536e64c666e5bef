# Copyright 2026 Pomwalk project contributors.
# Licensed under the Apache License, Version 2.0 (http://www.apache.org/licenses/LICENSE-2.0).

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Iterable, Iterator, NewType

from pomwalk.base.exceptions import DependencyCycleError, ManifestNotFoundError
from pomwalk.option.config import ResolverConfig
from pomwalk.resolve.completion import LoggingWaitObserver, WaitObserver
from pomwalk.resolve.coordinate import Coordinate, CoordinateKey
from pomwalk.resolve.manifest import PomManifest
from pomwalk.resolve.remote import RepositoryClient
from pomwalk.resolve.snapshot import SnapshotResolver
from pomwalk.util.logging import TRACE

logger = logging.getLogger(__name__)

CoordinateId = NewType("CoordinateId", int)

FetchManifest = Callable[[Coordinate], PomManifest]


class ManifestFetcher:
    """Fetches and parses the POM of a coordinate from the first repository that serves it."""

    def __init__(
        self, client: RepositoryClient | None = None, resolver: SnapshotResolver | None = None
    ) -> None:
        self._client = client or RepositoryClient()
        self._resolver = resolver or SnapshotResolver(self._client)

    def __call__(self, coordinate: Coordinate) -> PomManifest:
        path = coordinate.pom_path(self._resolver)
        found = self._client.first_available(coordinate.repositories, path)
        if found is None:
            raise ManifestNotFoundError(coordinate, path)
        url, content = found
        return PomManifest.parse(content, source=url)


class EdgeKind(Enum):
    PARENT = "parent"
    DEPENDENCY = "dependency"


@dataclass(frozen=True)
class Edge:
    kind: EdgeKind
    target: CoordinateId


class DependencyGraph:
    """An arena of coordinates discovered by walking manifests, addressed by `CoordinateId`.

    Coordinates are de-duplicated by `Coordinate.key`, so each distinct coordinate is fetched and
    expanded once no matter how many manifests mention it. Edges point from a coordinate to its
    parent and to its dependencies.
    """

    def __init__(
        self,
        *,
        excluded_scopes: Iterable[str] = ("test", "provided", "system"),
        include_optional: bool = False,
        wait_observer: WaitObserver | None = None,
        wait_report_interval: float = 1.0,
        manifest_fetcher: FetchManifest | None = None,
    ) -> None:
        self._excluded_scopes = frozenset(excluded_scopes)
        self._include_optional = include_optional
        self._wait_observer = wait_observer
        self._wait_report_interval = wait_report_interval
        self._manifest_fetcher = manifest_fetcher

        self._coordinates: list[Coordinate] = []
        self._ids: dict[CoordinateKey, CoordinateId] = {}
        self._edges: dict[CoordinateId, tuple[Edge, ...]] = {}
        self._finished: set[CoordinateId] = set()
        # Coordinates that were referenced without a version, and so could not be expanded.
        self.unversioned: list[Coordinate] = []

    @classmethod
    def from_config(cls, config: ResolverConfig, session: Any = None) -> DependencyGraph:
        """
        :param session: An object conforming to the `requests.Session` api, used for every
                        manifest fetch. Defaults to a new `requests.Session`.
        """
        return cls(
            excluded_scopes=config.excluded_scopes,
            include_optional=config.include_optional,
            wait_observer=LoggingWaitObserver(config.wait_log_level),
            wait_report_interval=config.wait_report_interval,
            manifest_fetcher=ManifestFetcher(RepositoryClient(session, timeout=config.timeout)),
        )

    def __len__(self) -> int:
        return len(self._coordinates)

    def __iter__(self) -> Iterator[CoordinateId]:
        return (CoordinateId(i) for i in range(len(self._coordinates)))

    def __getitem__(self, coordinate_id: CoordinateId) -> Coordinate:
        return self._coordinates[coordinate_id]

    def add(self, coordinate: Coordinate) -> CoordinateId:
        """Add `coordinate` unless an equivalent one is already present, returning its id."""
        existing = self._ids.get(coordinate.key)
        if existing is not None:
            return existing
        coordinate_id = CoordinateId(len(self._coordinates))
        self._coordinates.append(coordinate)
        self._ids[coordinate.key] = coordinate_id
        return coordinate_id

    def id_of(self, coordinate: Coordinate) -> CoordinateId | None:
        return self._ids.get(coordinate.key)

    def edges(self, coordinate_id: CoordinateId) -> tuple[Edge, ...]:
        return self._edges.get(coordinate_id, ())

    def parent_of(self, coordinate_id: CoordinateId) -> Coordinate | None:
        for edge in self.edges(coordinate_id):
            if edge.kind is EdgeKind.PARENT:
                return self[edge.target]
        return None

    def dependencies_of(self, coordinate_id: CoordinateId) -> tuple[Coordinate, ...]:
        return tuple(
            self[edge.target]
            for edge in self.edges(coordinate_id)
            if edge.kind is EdgeKind.DEPENDENCY
        )

    def wait_until_complete(
        self, coordinate_id: CoordinateId, timeout: float | None = None
    ) -> bool:
        return self[coordinate_id].wait_until_complete(
            timeout, observer=self._wait_observer, report_interval=self._wait_report_interval
        )

    def walk(
        self, root: Coordinate, fetch_manifest: FetchManifest | None = None
    ) -> CoordinateId:
        """Expand `root` and everything reachable from it, depth first.

        Each coordinate reached gets its manifest from `fetch_manifest` (unless one is already
        assigned), and is marked complete once everything below it has been expanded. The walk is
        iterative, so deep graphs do not exhaust the interpreter stack.

        If the walk fails, every coordinate still being expanded is given a `failed: ...` state
        and marked complete before the error propagates, so that none of their waiters hang.

        :raises DependencyCycleError: if a coordinate is reachable from itself.
        """
        fetch = fetch_manifest or self._manifest_fetcher or ManifestFetcher()
        root_id = self.add(root)
        if root_id in self._finished:
            return root_id

        path: list[CoordinateId] = [root_id]
        on_path = {root_id}
        try:
            stack: list[Iterator[Edge]] = [iter(self._expand(root_id, fetch, is_root=True))]
            while stack:
                edge = next(stack[-1], None)
                if edge is None:
                    stack.pop()
                    finished = path.pop()
                    on_path.discard(finished)
                    self._finish(finished)
                    continue

                target = edge.target
                if target in on_path:
                    cycle = path[path.index(target) :] + [target]
                    raise DependencyCycleError([self[i] for i in cycle])
                if target in self._finished:
                    continue
                path.append(target)
                on_path.add(target)
                stack.append(iter(self._expand(target, fetch, is_root=False)))
        except Exception as e:
            self._fail(path, e)
            raise
        return root_id

    def _expand(
        self, coordinate_id: CoordinateId, fetch: FetchManifest, *, is_root: bool
    ) -> tuple[Edge, ...]:
        coordinate = self[coordinate_id]
        if coordinate.manifest is None:
            coordinate.state = "fetching manifest"
            coordinate.manifest = fetch(coordinate)
        coordinate.state = "expanding"

        edges: list[Edge] = []
        parent = coordinate.parent()
        if parent is not None:
            self._link(parent, EdgeKind.PARENT, edges)
        for dependency in coordinate.dependencies():
            if not is_root and not self._follows(dependency):
                logger.log(TRACE, f"Not following {dependency} ({dependency.scope})")
                continue
            self._link(dependency, EdgeKind.DEPENDENCY, edges)

        self._edges[coordinate_id] = tuple(edges)
        return self._edges[coordinate_id]

    def _follows(self, dependency: Coordinate) -> bool:
        if dependency.scope in self._excluded_scopes:
            return False
        return self._include_optional or not dependency.optional

    def _link(self, coordinate: Coordinate, kind: EdgeKind, edges: list[Edge]) -> None:
        if coordinate.version is None:
            logger.debug(f"Not expanding {coordinate} without a version (via {coordinate.reason})")
            self.unversioned.append(coordinate)
            return
        edges.append(Edge(kind, self.add(coordinate)))

    def _finish(self, coordinate_id: CoordinateId) -> None:
        self._finished.add(coordinate_id)
        coordinate = self[coordinate_id]
        coordinate.state = "complete"
        coordinate.mark_complete()

    def _fail(self, path: list[CoordinateId], error: Exception) -> None:
        logger.debug(f"Walk failed with {len(path)} coordinate(s) unfinished: {error!r}")
        for coordinate_id in reversed(path):
            coordinate = self[coordinate_id]
            coordinate.state = f"failed: {error}"
            try:
                coordinate.mark_complete()
            except Exception:
                # The waiter's error was logged by `mark_complete`; the walk's own error wins.
                continue
