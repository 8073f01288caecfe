"""Small logging wrapper used for SQL tracing."""

from __future__ import annotations

import logging
from typing import Any

__all__ = ["Logger"]


def _line(msg: str, args: tuple[Any, ...]) -> str:
    return " ".join(str(part) for part in (msg, "\n", *args))


class Logger:
    """Writes a message followed by its arguments on a new line."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._log = logger if logger is not None else logging.getLogger("lorm")

    def println(self, msg: str, *args: Any) -> None:
        """Log ``msg`` (starting on a fresh line) and its arguments."""
        if not msg.startswith("\n"):
            msg = "\n" + msg
        self._log.info(_line(msg, args))

    def panicln(self, msg: str, *args: Any) -> None:
        """Log the message, then raise :class:`RuntimeError` with it."""
        self._log.error(_line(msg, args))
        raise RuntimeError(msg)

    def fatalln(self, msg: str, *args: Any) -> None:
        """Log the message, then exit with status 1."""
        self._log.critical(_line(msg, args))
        raise SystemExit(1)