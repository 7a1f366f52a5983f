from __future__ import annotations

import logging

import pytest

from lanotify.utils.logging import resolve_level, setup_logging


def test_level_from_environment(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("LOGLEVEL", "warning")

    assert resolve_level() == "WARNING"
    assert resolve_level("debug") == "DEBUG"


def test_unknown_level():
    with pytest.raises(ValueError, match="Unknown log level"):
        resolve_level("chatty")


@pytest.mark.parametrize(("level", "expected"), [("INFO", logging.WARNING), ("DEBUG", logging.DEBUG)])
def test_library_loggers_follow_debug(level, expected):
    setup_logging(level)

    assert logging.getLogger("asyncio").level == expected
    assert logging.getLogger("httpx").level == expected
