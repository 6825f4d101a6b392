"""Pytest configuration and fixtures for actionkit tests."""

import os
import sys
from collections.abc import Generator
from pathlib import Path

import pytest

from actionkit.constants import CONFIG_ENV_VAR
from actionkit.core.config import reset_settings
from actionkit.core.container import Container, reset_container
from actionkit.core.events import EventBus, reset_event_bus, shutdown_event_bus

project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))


@pytest.fixture(autouse=True)
def isolated_runtime(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Generator[None, None, None]:
    """Give every test a fresh container, event bus and settings.

    Yields
    ------
    None
        Control back to the test

    Notes
    -----
    ACTIONKIT_CONFIG is pointed at a file that does not exist so a stray
    actionkit.yaml in the working directory never leaks into tests.
    """
    monkeypatch.setenv(CONFIG_ENV_VAR, str(tmp_path / "absent-actionkit.yaml"))
    reset_settings()
    reset_container()
    reset_event_bus()

    yield

    shutdown_event_bus()
    reset_container()
    reset_settings()


@pytest.fixture
def container() -> Container:
    """Return the process container used by ``Action.make``."""
    from actionkit.core.container import get_container

    return get_container()


@pytest.fixture
def bus() -> EventBus:
    """Return the process event bus."""
    from actionkit.core.events import get_event_bus

    return get_event_bus()


@pytest.fixture
def config_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point ACTIONKIT_CONFIG at a temporary file path.

    Returns
    -------
    Path
        Path of the (not yet written) config file
    """
    config_path = tmp_path / "actionkit.yaml"
    monkeypatch.setenv(CONFIG_ENV_VAR, str(config_path))
    reset_settings()
    return config_path


@pytest.fixture
def env_cleanup() -> Generator[None, None, None]:
    """Restore os.environ after tests that mutate it directly."""
    original = dict(os.environ)
    yield
    os.environ.clear()
    os.environ.update(original)
