# Copyright 2026 Pomwalk project contributors.
# Licensed under the Apache License, Version 2.0 (http://www.apache.org/licenses/LICENSE-2.0).

from __future__ import annotations

from dataclasses import dataclass
from textwrap import dedent
from typing import Mapping, Union

FakeResult = Union[int, bytes, Exception]


@dataclass(frozen=True)
class FakeResponse:
    status_code: int
    content: bytes = b""


class FakeSession:
    """Stands in for a `requests.Session`, serving canned results by url.

    A url maps to a status code, to a body (served as a 200) or to an exception to raise. Unknown
    urls are 404s. Every requested url is recorded in `requested`, and its timeout in `timeouts`.
    """

    def __init__(self, results: Mapping[str, FakeResult] | None = None) -> None:
        self._results = dict(results or {})
        self.requested: list[str] = []
        self.timeouts: list[float | None] = []

    def get(self, url: str, timeout: float | None = None) -> FakeResponse:
        self.requested.append(url)
        self.timeouts.append(timeout)
        result = self._results.get(url, 404)
        if isinstance(result, Exception):
            raise result
        if isinstance(result, int):
            return FakeResponse(result)
        return FakeResponse(200, result)


def snapshot_metadata(timestamp: str, build_number: str) -> bytes:
    return dedent(
        f"""\
        <?xml version="1.0" encoding="UTF-8"?>
        <metadata modelVersion="1.1.0">
          <groupId>com.example</groupId>
          <artifactId>widget</artifactId>
          <version>1.0-SNAPSHOT</version>
          <versioning>
            <snapshot>
              <timestamp>{timestamp}</timestamp>
              <buildNumber>{build_number}</buildNumber>
            </snapshot>
            <lastUpdated>20230101120000</lastUpdated>
          </versioning>
        </metadata>
        """
    ).encode()


def pom(
    group_id: str,
    artifact_id: str,
    version: str,
    *,
    parent: str = "",
    dependencies: str = "",
    extra: str = "",
) -> bytes:
    """Render a minimal POM. `parent` and `dependencies` are raw xml for the element bodies."""
    parent_xml = f"<parent>{parent}</parent>" if parent else ""
    dependencies_xml = f"<dependencies>{dependencies}</dependencies>" if dependencies else ""
    return (
        '<project xmlns="http://maven.apache.org/POM/4.0.0">'
        "<modelVersion>4.0.0</modelVersion>"
        f"{parent_xml}"
        f"<groupId>{group_id}</groupId>"
        f"<artifactId>{artifact_id}</artifactId>"
        f"<version>{version}</version>"
        f"{dependencies_xml}"
        f"{extra}"
        "</project>"
    ).encode()


def dependency(coord: str, *, scope: str = "", optional: str = "") -> str:
    """Render a `<dependency>` element from `group:artifact[:version]`."""
    group_id, artifact_id, *version = coord.split(":")
    body = f"<groupId>{group_id}</groupId><artifactId>{artifact_id}</artifactId>"
    if version:
        body += f"<version>{version[0]}</version>"
    if scope:
        body += f"<scope>{scope}</scope>"
    if optional:
        body += f"<optional>{optional}</optional>"
    return f"<dependency>{body}</dependency>"
