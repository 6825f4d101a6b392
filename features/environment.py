"""Behave environment configuration for actionkit scenarios."""

import logging
import os
import sys
from pathlib import Path

from behave.model import Scenario
from behave.runner import Context

PROJECT_ROOT = Path(__file__).parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

logger = logging.getLogger(__name__)


def before_all(context: Context) -> None:
    """Setup executed before all scenarios."""
    context.project_root = PROJECT_ROOT


def before_scenario(context: Context, scenario: Scenario) -> None:
    """Give every scenario a fresh container, event bus and settings."""
    from actionkit.constants import CONFIG_ENV_VAR
    from actionkit.core.config import reset_settings
    from actionkit.core.container import reset_container
    from actionkit.core.events import reset_event_bus

    context.saved_config_env = os.environ.pop(CONFIG_ENV_VAR, None)
    os.environ[CONFIG_ENV_VAR] = str(context.project_root / "tmp" / "absent-actionkit.yaml")

    reset_settings()
    reset_container()
    reset_event_bus()

    context.received = []
    context.results = []
    context.callback_calls = 0
    context.error = None
    logger.debug(f"Prepared scenario: {scenario.name}")


def after_scenario(context: Context, scenario: Scenario) -> None:
    """Tear down process-wide state created by the scenario."""
    from actionkit.constants import CONFIG_ENV_VAR
    from actionkit.core.config import reset_settings
    from actionkit.core.container import reset_container
    from actionkit.core.events import shutdown_event_bus

    shutdown_event_bus()
    reset_container()
    reset_settings()

    if context.saved_config_env is None:
        os.environ.pop(CONFIG_ENV_VAR, None)
    else:
        os.environ[CONFIG_ENV_VAR] = context.saved_config_env

    logger.debug(f"Cleaned up scenario: {scenario.name}")
