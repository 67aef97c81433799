"""Constants shared across layers."""

VERSION = "1.0.0"
REPORT_PACKAGE = "phpmd"
CONFIG_SECTION = "mess-detector"
DEFAULT_TREE_SUFFIX = ".ast.json"
DEFAULT_JOBS = 1
TELEMETRY_LOGGER = "mess_detector"
