# Copyright 2026 Pomwalk project contributors.
# Licensed under the Apache License, Version 2.0 (http://www.apache.org/licenses/LICENSE-2.0).

from __future__ import annotations

import pytest
import requests

from pomwalk.resolve.remote import Repository, RepositoryClient
from pomwalk.resolve.remote_test_util import FakeSession


@pytest.mark.parametrize(
    "url,path,expected",
    [
        ("https://repo.example.com/maven2", "a/b", "https://repo.example.com/maven2/a/b"),
        ("https://repo.example.com/maven2/", "a/b", "https://repo.example.com/maven2/a/b"),
        ("https://repo.example.com/maven2//", "/a/b", "https://repo.example.com/maven2/a/b"),
        ("http://localhost:8081", "a", "http://localhost:8081/a"),
    ],
)
def test_repository_join(url: str, path: str, expected: str) -> None:
    assert Repository(url).join(path) == expected


def test_get_treats_non_success_as_absent() -> None:
    session = FakeSession({"https://a/found": b"body", "https://a/error": 500})
    client = RepositoryClient(session)
    assert client.get("https://a/found") == b"body"
    assert client.get("https://a/error") is None
    assert client.get("https://a/missing") is None


def test_get_passes_timeout() -> None:
    session = FakeSession({"https://a/found": b"body"})
    RepositoryClient(session, timeout=2.5).get("https://a/found")
    RepositoryClient(session).get("https://a/found")
    assert session.timeouts == [2.5, 30.0]


def test_get_treats_transport_errors_as_absent() -> None:
    session = FakeSession({"https://a/x": requests.ConnectionError("connection refused")})
    assert RepositoryClient(session).get("https://a/x") is None


def test_first_available_stops_at_first_success() -> None:
    session = FakeSession(
        {
            "https://one/p": requests.Timeout("slow"),
            "https://two/p": b"second",
            "https://three/p": b"third",
        }
    )
    repositories = tuple(Repository(f"https://{r}") for r in ("one", "two", "three"))
    assert RepositoryClient(session).first_available(repositories, "p") == (
        "https://two/p",
        b"second",
    )
    assert session.requested == ["https://one/p", "https://two/p"]


def test_first_available_exhausted() -> None:
    session = FakeSession()
    repositories = (Repository("https://one"), Repository("https://two"))
    assert RepositoryClient(session).first_available(repositories, "p") is None
    assert session.requested == ["https://one/p", "https://two/p"]
    assert RepositoryClient(session).first_available((), "p") is None
