"""
Configuration helpers for the Noves MCP server.

This module centralizes provider base URL selection, API key loading, default
timeouts, and rate limits. No secrets are stored in the repository; the API
key is read from environment or a local file if present.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional

logger = logging.getLogger(__name__)

# Default connection settings
DEFAULT_TRANSLATE_URL = os.getenv("NOVES_TRANSLATE_URL", "https://translate.noves.fi")
DEFAULT_PRICING_URL = os.getenv("NOVES_PRICING_URL", "https://pricing.noves.fi")


def _load_timeout() -> float:
    raw_timeout = os.getenv("NOVES_HTTP_TIMEOUT")
    if raw_timeout:
        try:
            return float(raw_timeout)
        except ValueError:
            return 10.0
    return 10.0


DEFAULT_TIMEOUT = _load_timeout()

# API key handling
API_KEY_ENV_VAR = "NOVES_API_KEY"
API_KEY_FILE_ENV_VAR = "NOVES_API_KEY_FILE"
DEFAULT_API_KEY_FILE = "apikey.txt"


def _load_rate_limit_qps() -> float:
    raw_qps = os.getenv("NOVES_MCP_RATE_LIMIT_QPS")
    if raw_qps:
        try:
            return float(raw_qps)
        except ValueError:
            return 5.0
    return 5.0


def _parse_rate_limits(raw: Optional[str]) -> Dict[str, float]:
    """Parse ``tool=qps`` pairs separated by commas; malformed entries are skipped."""
    limits: Dict[str, float] = {}
    if not raw:
        return limits
    for entry in raw.split(","):
        tool, sep, value = entry.partition("=")
        tool = tool.strip()
        if not sep or not tool:
            continue
        try:
            limits[tool] = float(value.strip())
        except ValueError:
            logger.debug("Ignoring invalid rate limit entry: %s", entry)
    return limits


DEFAULT_RATE_LIMIT_QPS = _load_rate_limit_qps()
PER_TOOL_RATE_LIMITS = _parse_rate_limits(os.getenv("NOVES_MCP_TOOL_RATE_LIMITS"))
LOG_LEVEL = os.getenv("NOVES_MCP_LOG_LEVEL", "INFO")
LOG_FORMAT = os.getenv("NOVES_MCP_LOG_FORMAT", "json")  # json or plain


def load_api_key() -> Optional[str]:
    """
    Load the Noves API key from environment or a local file.

    Returns:
        The API key string if available, otherwise None. The key is never logged
        or returned to callers.
    """
    env_key = os.getenv(API_KEY_ENV_VAR)
    if env_key:
        return env_key.strip()

    key_path = os.getenv(API_KEY_FILE_ENV_VAR, DEFAULT_API_KEY_FILE)
    if key_path:
        path = Path(key_path)
        if path.is_file():
            return path.read_text(encoding="utf-8").strip() or None

    return None


@dataclass(slots=True)
class NovesConfig:
    """Runtime configuration for Noves API access and the tool gateway."""

    translate_base_url: str = DEFAULT_TRANSLATE_URL
    pricing_base_url: str = DEFAULT_PRICING_URL
    timeout: float = DEFAULT_TIMEOUT
    api_key: Optional[str] = load_api_key()
    rate_limit_qps: float = DEFAULT_RATE_LIMIT_QPS
    log_level: str = LOG_LEVEL
    log_format: str = LOG_FORMAT
    per_tool_rate_limits: Dict[str, float] = field(default_factory=lambda: dict(PER_TOOL_RATE_LIMITS))


default_config = NovesConfig()
