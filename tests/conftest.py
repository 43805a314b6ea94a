import logging
import os

import pytest

from metrics_core.config import reset_settings
from metrics_core.registry import CollectorRegistry


# List of environment variables that may be modified by tests
_ENV_VARS_TO_ISOLATE = [
    "METRICS_LOG_LEVEL",
    "METRICS_LOG_JSON",
    "METRICS_SERVICE_NAME",
    "METRICS_ENVIRONMENT",
    "METRICS_DEFAULT_BUCKETS",
]


@pytest.fixture(autouse=True)
def env_isolation():
    """Isolate environment variables and cached settings between tests."""
    backup = {k: os.environ.get(k) for k in _ENV_VARS_TO_ISOLATE}
    reset_settings()
    try:
        yield
    finally:
        for k, v in backup.items():
            if v is None:
                os.environ.pop(k, None)
            else:
                os.environ[k] = v
        reset_settings()


@pytest.fixture
def registry():
    """A private registry, independent of the process-wide default."""
    return CollectorRegistry()


@pytest.fixture
def root_logger_isolation():
    """Restore root logger handlers and level after a test reconfigures them."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    try:
        yield root
    finally:
        for handler in root.handlers[:]:
            root.removeHandler(handler)
        for handler in handlers:
            root.addHandler(handler)
        root.setLevel(level)
