"""Project telemetry: progress and diagnostics on stderr through the logging module."""

import logging
import sys
from typing import TextIO

from mess_detector.domain.constants import TELEMETRY_LOGGER, VERSION
from mess_detector.domain.protocols import TelemetryPort


class ProjectTelemetry(TelemetryPort):
    """TelemetryPort backed by a named logger. stdout stays reserved for the report."""

    def __init__(self, project_name: str, logger_name: str = TELEMETRY_LOGGER) -> None:
        self.project_name = project_name
        self._logger = logging.getLogger(logger_name)

    @staticmethod
    def configure_logging(verbose: bool = False, stream: TextIO | None = None) -> None:
        """Install one stderr handler on the package logger. Safe to call repeatedly."""
        package_logger = logging.getLogger(TELEMETRY_LOGGER)
        for handler in list(package_logger.handlers):
            if getattr(handler, "_mess_detector", False):
                package_logger.removeHandler(handler)
        handler = logging.StreamHandler(stream or sys.stderr)
        handler.setFormatter(logging.Formatter("[%(name)s] %(levelname)s: %(message)s"))
        handler._mess_detector = True  # type: ignore[attr-defined]
        package_logger.addHandler(handler)
        package_logger.setLevel(logging.DEBUG if verbose else logging.INFO)

    def handshake(self) -> None:
        self._logger.info("%s %s online", self.project_name, VERSION)

    def step(self, message: str) -> None:
        self._logger.info(message)

    def error(self, message: str) -> None:
        self._logger.error(message)
