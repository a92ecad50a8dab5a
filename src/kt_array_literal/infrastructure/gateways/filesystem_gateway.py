"""Filesystem Gateway - Infrastructure implementation of FileSystemProtocol."""

from pathlib import Path

from kt_array_literal.domain.constants import KOTLIN_SUFFIXES
from kt_array_literal.domain.protocols import FileSystemProtocol


class FileSystemGateway(FileSystemProtocol):
    """Infrastructure implementation of FileSystemProtocol using pathlib."""

    def glob_kotlin_files(self, path: str) -> list[str]:
        """Get all Kotlin files in path (recursive if directory)."""
        path_obj = Path(path).resolve()
        if path_obj.is_dir():
            return [
                str(p) for p in path_obj.glob("**/*") if p.is_file() and p.suffix in KOTLIN_SUFFIXES
            ]
        return [str(path_obj)] if path_obj.suffix in KOTLIN_SUFFIXES and path_obj.exists() else []

    def read_text(self, path: str, encoding: str = "utf-8") -> str:
        """Read text content from a file."""
        return Path(path).read_text(encoding=encoding)

    def write_text(self, path: str, content: str, encoding: str = "utf-8") -> None:
        """Write text content to a file."""
        Path(path).write_text(content, encoding=encoding)
