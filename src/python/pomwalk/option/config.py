# Copyright 2026 Pomwalk project contributors.
# Licensed under the Apache License, Version 2.0 (http://www.apache.org/licenses/LICENSE-2.0).

from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from typing import Any, Mapping

import toml

from pomwalk.base.exceptions import ConfigError
from pomwalk.resolve.remote import Repository
from pomwalk.util.logging import LEVEL_NAMES, level_from_name

logger = logging.getLogger(__name__)

SECTION = "resolve"

DEFAULT_REPOSITORIES = ("https://repo1.maven.org/maven2",)


@dataclass(frozen=True)
class ResolverConfig:
    """Settings for resolving coordinates against remote repositories.

    Loaded from the `[resolve]` table of a TOML file, e.g.:

        [resolve]
        repositories = ["https://repo1.maven.org/maven2", "https://repo.example.com/snapshots"]
        timeout = 10.0
        excluded_scopes = ["test", "provided"]

    Repositories are consulted in the order in which they are listed.
    """

    repositories: tuple[str, ...] = DEFAULT_REPOSITORIES
    timeout: float = 30.0
    wait_report_interval: float = 1.0
    wait_log_level: int = logging.INFO
    excluded_scopes: tuple[str, ...] = ("test", "provided", "system")
    include_optional: bool = False

    @classmethod
    def load(cls, path: str) -> ResolverConfig:
        try:
            with open(path) as fp:
                content = fp.read()
        except OSError as e:
            raise ConfigError(f"Problem reading config file at {path}: {e!r}")
        return cls.from_toml(content, source=path)

    @classmethod
    def from_toml(cls, content: str, *, source: str = "<string>") -> ResolverConfig:
        try:
            values = toml.loads(content)
        except toml.TomlDecodeError as e:
            raise ConfigError(f"Config file {source} could not be parsed as TOML:\n  {e}")
        section = values.get(SECTION, {})
        if not isinstance(section, dict):
            raise ConfigError(f"Expected a [{SECTION}] table in {source}.")
        return cls.from_mapping(section, source=source)

    @classmethod
    def from_mapping(
        cls, section: Mapping[str, Any], *, source: str = "<mapping>"
    ) -> ResolverConfig:
        valid_keys = {f.name for f in fields(cls)}
        unknown = sorted(set(section) - valid_keys)
        if unknown:
            raise ConfigError(
                f"Invalid option(s) {', '.join(unknown)} in [{SECTION}] of {source}. "
                f"Valid options are: {', '.join(sorted(valid_keys))}"
            )

        kwargs: dict[str, Any] = {}
        for key in ("repositories", "excluded_scopes"):
            if key in section:
                kwargs[key] = _string_tuple(section[key], key, source)
        for key in ("timeout", "wait_report_interval"):
            if key in section:
                kwargs[key] = _positive_float(section[key], key, source)
        if "include_optional" in section:
            if not isinstance(section["include_optional"], bool):
                raise ConfigError(f"`include_optional` in {source} must be a boolean.")
            kwargs["include_optional"] = section["include_optional"]
        if "wait_log_level" in section:
            try:
                kwargs["wait_log_level"] = level_from_name(str(section["wait_log_level"]))
            except ValueError:
                raise ConfigError(
                    f"Unknown `wait_log_level` {section['wait_log_level']!r} in {source}. "
                    f"Choose one of: {', '.join(LEVEL_NAMES)}"
                )

        config = cls(**kwargs)
        logger.debug(f"Loaded resolver config from {source}: {config}")
        return config

    def repository_list(self) -> tuple[Repository, ...]:
        return tuple(Repository(url) for url in self.repositories)


def _string_tuple(value: Any, key: str, source: str) -> tuple[str, ...]:
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ConfigError(f"`{key}` in {source} must be a list of strings, got {value!r}.")
    return tuple(value)


def _positive_float(value: Any, key: str, source: str) -> float:
    # NB: bool is a subclass of int.
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        raise ConfigError(f"`{key}` in {source} must be a positive number, got {value!r}.")
    return float(value)
