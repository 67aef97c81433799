"""Configuration for mess_detector runs. Immutable value object created by Infrastructure."""

from __future__ import annotations

import logging

from mess_detector.domain.constants import DEFAULT_JOBS, DEFAULT_TREE_SUFFIX

logger = logging.getLogger(__name__)


class ConfigurationLoader:
    """
    Immutable view of the ``[tool.mess-detector]`` table.

    Domain does not read the filesystem; Infrastructure calls
    ConfigFileLoader.load_config_from_fs() and builds this at the composition root.
    Invalid values are logged and replaced by defaults.
    """

    def __init__(self, config_dict: dict[str, object] | None = None) -> None:
        self._config = dict(config_dict or {})
        self.validate_config(self._config)

    def validate_config(self, config: dict[str, object]) -> None:
        """Warn about values that will be ignored."""
        rules = config.get("rules")
        if rules is not None and not (
            isinstance(rules, list) and all(isinstance(r, str) for r in rules)
        ):
            logger.warning("Configuration Warning: 'rules' must be a list of rule names; using all rules.")
        jobs = config.get("jobs")
        if jobs is not None and not (isinstance(jobs, int) and not isinstance(jobs, bool) and jobs >= 1):
            logger.warning("Configuration Warning: 'jobs' must be an integer >= 1; using %s.", DEFAULT_JOBS)
        suffix = config.get("tree_suffix")
        if suffix is not None and not (isinstance(suffix, str) and suffix):
            logger.warning(
                "Configuration Warning: 'tree_suffix' must be a non-empty string; using %s.",
                DEFAULT_TREE_SUFFIX,
            )

    @property
    def config(self) -> dict[str, object]:
        return dict(self._config)

    @property
    def rules(self) -> list[str] | None:
        """Rule names to run, or None for every catalog rule."""
        raw = self._config.get("rules")
        if isinstance(raw, list) and all(isinstance(r, str) for r in raw):
            return list(raw)
        return None

    @property
    def jobs(self) -> int:
        raw = self._config.get("jobs")
        if isinstance(raw, int) and not isinstance(raw, bool) and raw >= 1:
            return raw
        return DEFAULT_JOBS

    @property
    def tree_suffix(self) -> str:
        raw = self._config.get("tree_suffix")
        if isinstance(raw, str) and raw:
            return raw
        return DEFAULT_TREE_SUFFIX

    @property
    def report_file(self) -> str | None:
        raw = self._config.get("report_file")
        return raw if isinstance(raw, str) and raw else None
