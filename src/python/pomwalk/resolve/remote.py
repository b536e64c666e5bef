# Copyright 2026 Pomwalk project contributors.
# Licensed under the Apache License, Version 2.0 (http://www.apache.org/licenses/LICENSE-2.0).

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable

import requests

from pomwalk.util.logging import TRACE

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Repository:
    """An HTTP-addressable Maven repository, e.g. `https://repo1.maven.org/maven2`."""

    url: str

    def join(self, path: str) -> str:
        """Append a repository-layout path to this repository's url with exactly one `/`.

        The `scheme://` separator is left untouched.
        """
        return f"{self.url.rstrip('/')}/{path.lstrip('/')}"


class RepositoryClient:
    """Issues GET requests against an ordered list of repositories.

    Any response other than a 200, and any transport-level failure, reads as "not present in this
    repository": it is logged and never raised. No request is ever retried.
    """

    def __init__(self, session: Any = None, timeout: float = 30.0) -> None:
        """
        :param session: An object conforming to the `requests.Session` api. Defaults to a new
                        `requests.Session`.
        :param timeout: Per-request timeout in seconds.
        """
        self._session = session if session is not None else requests.Session()
        self._timeout = timeout

    def get(self, url: str) -> bytes | None:
        logger.log(TRACE, f"GET {url}")
        try:
            response = self._session.get(url, timeout=self._timeout)
        except requests.RequestException as e:
            logger.debug(f"Request error from {url}: {e!r}")
            return None
        if response.status_code != requests.codes.ok:
            logger.debug(f"No content at {url} (status_code={response.status_code})")
            return None
        return response.content

    def first_available(
        self, repositories: Iterable[Repository], path: str
    ) -> tuple[str, bytes] | None:
        """Return the url and body of `path` from the first repository that serves it.

        Repositories are tried strictly in order; later repositories are not contacted once one
        succeeds.
        """
        for repository in repositories:
            url = repository.join(path)
            content = self.get(url)
            if content is not None:
                return url, content
        return None
