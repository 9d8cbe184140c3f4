"""
Shared pytest fixtures.

Author: mirrorsync Project
License: MIT
"""

import logging
import pytest

from mirrorsync.utils.logger import ROOT_LOGGER_NAME

CONFIG_ENV_VARS = (
    "MIRRORSYNC_CONFIG",
    "MIRRORSYNC_LOG_LEVEL",
    "MIRRORSYNC_LOG_FILE",
    "MIRRORSYNC_JSON_LOGS",
    "SYNC_SOURCE",
    "SYNC_DESTINATION",
    "SYNC_INTERVAL",
    "SYNC_RETRY_COUNT",
    "SYNC_RETRY_DELAY",
)


@pytest.fixture(autouse=True)
def isolated_logging():
    """Keep application log records visible to caplog and undo setup_logging()."""
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    saved = (list(logger.handlers), logger.level, logger.propagate)

    logger.propagate = True
    logger.setLevel(logging.DEBUG)
    yield

    for handler in list(logger.handlers):
        if handler not in saved[0]:
            logger.removeHandler(handler)
            handler.close()
    logger.handlers[:] = saved[0]
    logger.setLevel(saved[1])
    logger.propagate = saved[2]


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Tests must not pick up configuration from the calling shell."""
    for name in CONFIG_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
