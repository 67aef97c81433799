"""Package entry point - composition root. Wire dependencies and run the CLI app."""

from mess_detector.infrastructure.di.container import MessDetectorContainer
from mess_detector.interface.cli import CLIAppFactory, CLIDependencies


def main() -> None:
    """Entry point: wire dependencies at composition root, create app, run."""
    container = MessDetectorContainer()
    deps = CLIDependencies(
        config_loader=container.get_config_loader(),
        telemetry=container.get_telemetry_port(),
        filesystem=container.get_filesystem_gateway(),
        tree_loader=container.get_tree_loader(),
        renderer=container.get_renderer(),
    )
    app = CLIAppFactory.create_app(deps)
    app()


if __name__ == "__main__":
    main()
