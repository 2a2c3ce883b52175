"""Minimal in-process metrics recorder (not suitable for multi-process aggregation)."""

from __future__ import annotations

from collections import Counter, OrderedDict
from threading import Lock
from typing import Dict

MAX_RECENT_DURATIONS = 100


class MetricsRecorder:
    def __init__(self, max_recent: int = MAX_RECENT_DURATIONS) -> None:
        self._lock = Lock()
        self._max_recent = max_recent
        self._requests = 0
        self._request_durations_ms: "OrderedDict[str, float]" = OrderedDict()
        self._rate_limited = 0
        self._tool_success: Counter[str] = Counter()
        self._tool_error: Counter[str] = Counter()
        self._tool_duration_ms: Dict[str, float] = {}

    def incr_request(self) -> None:
        with self._lock:
            self._requests += 1

    def record_duration(self, request_id: str, duration_ms: float) -> None:
        with self._lock:
            self._request_durations_ms[request_id] = duration_ms
            while len(self._request_durations_ms) > self._max_recent:
                self._request_durations_ms.popitem(last=False)

    def incr_rate_limited(self) -> None:
        with self._lock:
            self._rate_limited += 1

    def record_tool(self, tool: str, *, success: bool, duration_ms: float = 0.0) -> None:
        with self._lock:
            if success:
                self._tool_success[tool] += 1
            else:
                self._tool_error[tool] += 1
            self._tool_duration_ms[tool] = self._tool_duration_ms.get(tool, 0.0) + duration_ms

    def snapshot(self) -> Dict[str, object]:
        with self._lock:
            calls = self._tool_success + self._tool_error
            return {
                "requests": self._requests,
                "rate_limited": self._rate_limited,
                "tool_success": dict(self._tool_success),
                "tool_error": dict(self._tool_error),
                "tool_avg_duration_ms": {
                    tool: self._tool_duration_ms.get(tool, 0.0) / count for tool, count in calls.items()
                },
                "recent_request_durations_ms": dict(self._request_durations_ms),
            }

    def reset(self) -> None:
        with self._lock:
            self._requests = 0
            self._request_durations_ms.clear()
            self._rate_limited = 0
            self._tool_success.clear()
            self._tool_error.clear()
            self._tool_duration_ms.clear()


default_metrics = MetricsRecorder()
