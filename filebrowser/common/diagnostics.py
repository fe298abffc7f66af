"""Diagnostics sink for non-fatal warnings and errors."""

from typing import Protocol

from loguru import logger


class Diagnostics(Protocol):
    """Receives problems that are reported instead of raised."""

    def warn(self, message: str) -> None:
        """Report degraded input or a skipped item."""
        ...

    def error(self, message: str) -> None:
        """Report a failed operation the user should know about."""
        ...


class LogDiagnostics:
    """Diagnostics sink that only writes to the log."""

    def warn(self, message: str) -> None:
        """Log a warning."""
        logger.opt(depth=1).warning(message)

    def error(self, message: str) -> None:
        """Log an error."""
        logger.opt(depth=1).error(message)
