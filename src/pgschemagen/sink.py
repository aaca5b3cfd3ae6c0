"""Destinations for generated artifacts."""

from pathlib import Path
from typing import Protocol

from pgschemagen.exceptions import OutputError

__all__ = ["ArtifactSink", "DirectorySink"]


class ArtifactSink(Protocol):
    """Receives rendered artifacts by file name."""

    def write(self, filename: str, text: str) -> None: ...


class DirectorySink:
    """Writes artifacts as UTF-8 files into an existing directory."""

    def __init__(self, output_dir: Path):
        self.output_dir = output_dir

    def write(self, filename: str, text: str) -> None:
        path = self.output_dir / filename
        try:
            path.write_text(text, encoding="utf-8")
        except OSError as e:
            raise OutputError(f"write {path}: {e}") from e
