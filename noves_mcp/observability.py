"""
Observer hooks invoked by the tool handlers.

Handlers report validation, provider calls, and failures to a ``ToolObserver``
instead of logging inline, so callers can swap in metrics or silence output.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Protocol

logger = logging.getLogger(__name__)


class ToolObserver(Protocol):
    def validation_started(self, tool: str, arguments: Any) -> None:
        ...

    def validation_finished(self, tool: str) -> None:
        ...

    def provider_call_started(self, tool: str, operation: str, params: Mapping[str, Any]) -> None:
        ...

    def provider_call_finished(self, tool: str, operation: str, duration_ms: float) -> None:
        ...

    def tool_failed(self, tool: str, action: str, error: BaseException) -> None:
        ...


class NullObserver:
    """Observer that ignores every event."""

    def validation_started(self, tool: str, arguments: Any) -> None:
        return None

    def validation_finished(self, tool: str) -> None:
        return None

    def provider_call_started(self, tool: str, operation: str, params: Mapping[str, Any]) -> None:
        return None

    def provider_call_finished(self, tool: str, operation: str, duration_ms: float) -> None:
        return None

    def tool_failed(self, tool: str, action: str, error: BaseException) -> None:
        return None


class LoggingObserver:
    """Observer that writes structured log records."""

    def __init__(self, log: logging.Logger | None = None) -> None:
        self._logger = log or logger

    def validation_started(self, tool: str, arguments: Any) -> None:
        keys = sorted(arguments) if isinstance(arguments, Mapping) else []
        self._logger.debug("tool=%s validating keys=%s", tool, keys, extra={"tool": tool})

    def validation_finished(self, tool: str) -> None:
        self._logger.debug("tool=%s validation ok", tool, extra={"tool": tool})

    def provider_call_started(self, tool: str, operation: str, params: Mapping[str, Any]) -> None:
        self._logger.debug(
            "tool=%s provider=%s params=%s",
            tool,
            operation,
            dict(params),
            extra={"tool": tool},
        )

    def provider_call_finished(self, tool: str, operation: str, duration_ms: float) -> None:
        self._logger.debug(
            "tool=%s provider=%s duration_ms=%.2f",
            tool,
            operation,
            duration_ms,
            extra={"tool": tool},
        )

    def tool_failed(self, tool: str, action: str, error: BaseException) -> None:
        self._logger.warning(
            "tool=%s outcome=error action=%s error=%s",
            tool,
            action,
            error,
            extra={"tool": tool, "error": str(error)},
        )


default_observer: ToolObserver = LoggingObserver()
