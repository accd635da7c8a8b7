import logging
import os
from collections.abc import Generator

import pytest


@pytest.fixture(autouse=True)
def _isolate_cli(monkeypatch: pytest.MonkeyPatch) -> Generator[None]:
    """Drop PITCH_COUNTER__ env vars and undo the root handlers each CLI run installs."""
    for key in list(os.environ):
        if key.startswith("PITCH_COUNTER__"):
            monkeypatch.delenv(key)
    root = logging.getLogger()
    saved_handlers = root.handlers[:]
    saved_level = root.level
    yield
    root.handlers[:] = saved_handlers
    root.setLevel(saved_level)
