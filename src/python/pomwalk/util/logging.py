# Copyright 2026 Pomwalk project contributors.
# Licensed under the Apache License, Version 2.0 (http://www.apache.org/licenses/LICENSE-2.0).

from __future__ import annotations

import logging

# Finer than DEBUG: per-request repository chatter.
TRACE = 5

logging.addLevelName(TRACE, "TRACE")

LEVEL_NAMES = {
    "trace": TRACE,
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


def level_from_name(name: str) -> int:
    """Map a config level name such as `debug` or `trace` to a `logging` level.

    :raises ValueError: for an unknown name.
    """
    try:
        return LEVEL_NAMES[name.strip().lower()]
    except KeyError:
        raise ValueError(f"Unknown log level {name!r}. Choose one of: {', '.join(LEVEL_NAMES)}")
