from __future__ import annotations

import logging
from typing import Iterator

import pytest

_ENV_VARS = ("GLOW_LOG_FORMAT", "GLOW_LOG_LEVEL", "GLOW_CONFLICT_RULES_PATH", "GLOW_PAO_WARNING_DAYS")


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Clear GLOW_* settings and restore root logger handlers after each test."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)

    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    for handler in root.handlers[:]:
        if handler not in handlers:
            root.removeHandler(handler)
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)
