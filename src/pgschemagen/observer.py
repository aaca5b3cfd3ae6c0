"""Progress reporting for a generation run."""

import logging
from pathlib import Path
from typing import Optional, Protocol

__all__ = ["GenerationObserver", "LoggingObserver"]

logger = logging.getLogger(__name__)


class GenerationObserver(Protocol):
    """Receives progress events from the runner and generators."""

    def generator_started(
        self, kind: str, output: Path, templates: Optional[Path]
    ) -> None: ...

    def artifact_written(self, kind: str, filename: str) -> None: ...

    def warning(self, kind: str, message: str) -> None: ...

    def generator_finished(self, kind: str) -> None: ...


class LoggingObserver:
    """Forward progress events to the logging module."""

    def __init__(self, log: logging.Logger = logger) -> None:
        self._log = log

    def generator_started(
        self, kind: str, output: Path, templates: Optional[Path]
    ) -> None:
        self._log.info(f"Generate: {kind}")
        self._log.info(f"  output: {output}")
        if templates is not None:
            self._log.info(f"  templates: {templates}")

    def artifact_written(self, kind: str, filename: str) -> None:
        self._log.debug(f"  wrote {filename}")

    def warning(self, kind: str, message: str) -> None:
        self._log.warning(f"WARN [{kind}]: {message}")

    def generator_finished(self, kind: str) -> None:
        self._log.info("done")
