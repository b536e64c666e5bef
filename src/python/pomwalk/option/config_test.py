# Copyright 2026 Pomwalk project contributors.
# Licensed under the Apache License, Version 2.0 (http://www.apache.org/licenses/LICENSE-2.0).

from __future__ import annotations

import logging
from pathlib import Path
from textwrap import dedent

import pytest

from pomwalk.base.exceptions import ConfigError
from pomwalk.option.config import DEFAULT_REPOSITORIES, ResolverConfig
from pomwalk.resolve.remote import Repository


def test_defaults() -> None:
    config = ResolverConfig.from_toml("")
    assert config == ResolverConfig()
    assert config.repositories == DEFAULT_REPOSITORIES
    assert config.excluded_scopes == ("test", "provided", "system")
    assert config.include_optional is False
    assert config.wait_log_level == logging.INFO


def test_from_toml() -> None:
    config = ResolverConfig.from_toml(
        dedent(
            """\
            [resolve]
            repositories = ["https://one.example.com/maven2", "https://two.example.com"]
            timeout = 5
            wait_report_interval = 0.5
            wait_log_level = "debug"
            excluded_scopes = ["test"]
            include_optional = true

            [unrelated]
            key = "ignored"
            """
        )
    )
    assert config == ResolverConfig(
        repositories=("https://one.example.com/maven2", "https://two.example.com"),
        timeout=5.0,
        wait_report_interval=0.5,
        wait_log_level=logging.DEBUG,
        excluded_scopes=("test",),
        include_optional=True,
    )
    assert config.repository_list() == (
        Repository("https://one.example.com/maven2"),
        Repository("https://two.example.com"),
    )


def test_load(tmp_path: Path) -> None:
    config_file = tmp_path / "pomwalk.toml"
    config_file.write_text('[resolve]\nrepositories = ["https://repo.example.com"]\n')
    assert ResolverConfig.load(str(config_file)).repositories == ("https://repo.example.com",)


def test_load_missing_file(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="Problem reading config file"):
        ResolverConfig.load(str(tmp_path / "missing.toml"))


@pytest.mark.parametrize(
    "content,match",
    [
        ("[resolve\n", "could not be parsed as TOML"),
        ("resolve = 1\n", r"Expected a \[resolve\] table"),
        ("[resolve]\nrepos = []\n", "Invalid option"),
        ('[resolve]\nrepositories = "https://repo.example.com"\n', "list of strings"),
        ("[resolve]\nexcluded_scopes = [1]\n", "list of strings"),
        ("[resolve]\ntimeout = 0\n", "positive number"),
        ("[resolve]\ntimeout = true\n", "positive number"),
        ('[resolve]\ninclude_optional = "yes"\n', "must be a boolean"),
        ('[resolve]\nwait_log_level = "loud"\n', "Unknown `wait_log_level`"),
    ],
)
def test_invalid_config(content: str, match: str) -> None:
    with pytest.raises(ConfigError, match=match):
        ResolverConfig.from_toml(content)
