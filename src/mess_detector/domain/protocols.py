from typing import TYPE_CHECKING, Protocol, TextIO

if TYPE_CHECKING:
    from mess_detector.domain.nodes import SyntaxTree
    from mess_detector.domain.report import Report


class TelemetryPort(Protocol):
    """Progress and diagnostics channel. Never writes to the report stream."""

    def handshake(self) -> None: ...

    def step(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...


class TreeLoaderProtocol(Protocol):
    def load(self, file_path: str) -> "SyntaxTree":
        """Load one unit's tree. Raises TreeLoadError when the dump is unusable."""
        ...


class FileSystemProtocol(Protocol):
    def collect_files(self, paths: list[str], suffix: str) -> list[str]:
        """Expand directories to files ending with ``suffix``; keep explicit files."""
        ...

    def write_text(self, path: str, content: str, encoding: str = "utf-8") -> None:
        ...


class RendererProtocol(Protocol):
    def render(self, report: "Report") -> str:
        """Serialize the report in one pass without mutating it."""
        ...

    def write(self, report: "Report", stream: TextIO) -> None:
        ...
