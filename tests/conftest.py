"""Pytest configuration.

Run pytest from the project root; pythonpath in pyproject.toml puts src/ and
the root on sys.path so helpers import as ``tests.unit...``.
"""

import logging

import pytest

from mess_detector.domain.constants import TELEMETRY_LOGGER


@pytest.fixture(autouse=True)
def _isolate_package_logging():
    """Drop handlers installed by ProjectTelemetry.configure_logging after each test.

    CliRunner swaps sys.stderr per invocation; a handler left bound to a closed
    stream would fail on the next record.
    """
    yield
    package_logger = logging.getLogger(TELEMETRY_LOGGER)
    for handler in list(package_logger.handlers):
        if getattr(handler, "_mess_detector", False):
            package_logger.removeHandler(handler)
    package_logger.setLevel(logging.NOTSET)
