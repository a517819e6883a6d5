"""Pytest configuration applied to the entire test suite."""

from __future__ import annotations

import logging

import pytest

from helpers import FakeHttp


@pytest.fixture
def fake_http() -> FakeHttp:
    return FakeHttp()


@pytest.fixture(autouse=True)
def _isolated_root_logger():
    """configure_logging() installs handlers on the root logger; undo that after each test."""

    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for h in list(root.handlers):
        if h not in handlers:
            root.removeHandler(h)
            h.close()
    root.setLevel(level)
