"""Shared test fixtures."""

import logging
import os

import platformdirs
import pytest


@pytest.fixture
def hello_world():
    """UTF-8 bytes of the recorded sample string."""
    return "Hello, World!".encode("utf-8")


@pytest.fixture
def hello_world_file(tmp_path, hello_world):
    """File containing the recorded sample string."""
    path = tmp_path / "hello.txt"
    path.write_bytes(hello_world)
    return path


@pytest.fixture
def isolated_config(tmp_path, monkeypatch):
    """Keep ConfigLoader away from real user, system and env configuration."""
    user_dir = tmp_path / "user_config"
    monkeypatch.setattr(
        platformdirs, "user_config_dir", lambda *args, **kwargs: str(user_dir)
    )
    for key in list(os.environ):
        if key.startswith("CRCLIB_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)
    return user_dir


@pytest.fixture
def restore_logging():
    """Restore root logger handlers and level changed by setup_logging."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)
