from pathlib import Path
from typing import TYPE_CHECKING, Any, Optional, cast

from mess_detector.domain.config import ConfigurationLoader
from mess_detector.infrastructure.config_file_loader import ConfigFileLoader
from mess_detector.infrastructure.gateways.filesystem_gateway import FileSystemGateway
from mess_detector.infrastructure.gateways.tree_dump_gateway import TreeDumpGateway
from mess_detector.infrastructure.renderers.json_renderer import JSONRenderer
from mess_detector.interface.telemetry import ProjectTelemetry

if TYPE_CHECKING:
    from mess_detector.domain.protocols import (
        FileSystemProtocol,
        RendererProtocol,
        TelemetryPort,
        TreeLoaderProtocol,
    )


class MessDetectorContainer:
    """Dependency Injection Container for mess_detector."""

    _instance: Optional["MessDetectorContainer"] = None

    def __init__(self, config_root: Path | None = None) -> None:
        self._singletons: dict[str, Any] = {}
        self._register_defaults(config_root)

    def _register_defaults(self, config_root: Path | None) -> None:
        """Register default implementations for protocols."""
        config_dict = ConfigFileLoader.load_config_from_fs(config_root)
        self.register_singleton("ConfigurationLoader", ConfigurationLoader(config_dict))
        self.register_singleton("TelemetryPort", ProjectTelemetry("MESS-DETECTOR"))
        self.register_singleton("FileSystemGateway", FileSystemGateway())
        self.register_singleton("TreeDumpGateway", TreeDumpGateway())
        self.register_singleton("JSONRenderer", JSONRenderer())

    def register_singleton(self, key: str, instance: Any) -> None:
        """Register a singleton instance."""
        self._singletons[key] = instance

    def get(self, key: str) -> Any:
        """Retrieve a dependency by key. Prefer explicit get_* methods for type safety."""
        if key in self._singletons:
            return self._singletons[key]
        raise ValueError(f"Dependency '{key}' not registered.")

    def get_config_loader(self) -> ConfigurationLoader:
        """Return the configuration loader (created at composition root)."""
        return cast(ConfigurationLoader, self.get("ConfigurationLoader"))

    def get_telemetry_port(self) -> "TelemetryPort":
        return cast("TelemetryPort", self.get("TelemetryPort"))

    def get_filesystem_gateway(self) -> "FileSystemProtocol":
        return cast("FileSystemProtocol", self.get("FileSystemGateway"))

    def get_tree_loader(self) -> "TreeLoaderProtocol":
        """Return the tree dump loader."""
        return cast("TreeLoaderProtocol", self.get("TreeDumpGateway"))

    def get_renderer(self) -> "RendererProtocol":
        """Return the report renderer."""
        return cast("RendererProtocol", self.get("JSONRenderer"))

    @classmethod
    def get_instance(cls) -> "MessDetectorContainer":
        """Get or create global container instance."""
        if cls._instance is None:
            cls._instance = MessDetectorContainer()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Reset the singleton instance (primarily for testing)."""
        cls._instance = None
