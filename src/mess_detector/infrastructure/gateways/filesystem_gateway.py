"""Filesystem Gateway - Infrastructure implementation of FileSystemProtocol."""

from pathlib import Path

from mess_detector.domain.protocols import FileSystemProtocol


class FileSystemGateway(FileSystemProtocol):
    """Infrastructure implementation of FileSystemProtocol using pathlib."""

    def collect_files(self, paths: list[str], suffix: str) -> list[str]:
        """Expand directories to their ``*suffix`` files (sorted); explicit files are kept as given."""
        collected: list[str] = []
        for path in paths:
            path_obj = Path(path)
            if path_obj.is_dir():
                collected.extend(
                    sorted(str(p) for p in path_obj.glob(f"**/*{suffix}") if p.is_file())
                )
            else:
                collected.append(str(path_obj))
        return collected

    def write_text(self, path: str, content: str, encoding: str = "utf-8") -> None:
        """Write text content to a file, creating parent directories."""
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding=encoding)
