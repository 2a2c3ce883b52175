"""Response envelopes and provider-call plumbing shared by the tool handlers."""

from __future__ import annotations

import logging
import time
from typing import Any, Awaitable, Mapping, Type, TypeVar

from noves_mcp.errors import ToolValidationError
from noves_mcp.models import ToolResponse
from noves_mcp.noves_api import NovesApiError
from noves_mcp.observability import ToolObserver
from noves_mcp.tools.validators import ArgumentsT, validate_arguments

logger = logging.getLogger(__name__)

T = TypeVar("T")

UNKNOWN_ERROR = "Unknown error occurred"


def text_response(text: str) -> ToolResponse:
    return {"content": [{"type": "text", "text": text}]}


def response_text(response: Mapping[str, Any]) -> str:
    """Return the first text block of an envelope, or an empty string."""
    content = response.get("content") if isinstance(response, Mapping) else None
    if isinstance(content, list) and content and isinstance(content[0], Mapping):
        text = content[0].get("text")
        if isinstance(text, str):
            return text
    return ""


def is_error_response(response: Mapping[str, Any]) -> bool:
    return response_text(response).startswith("Error")


def error_message(error: BaseException) -> str:
    return str(error) or UNKNOWN_ERROR


def error_response(tool: str, action: str, error: BaseException, observer: ToolObserver) -> ToolResponse:
    """Report a handler failure and shape it as ``Error <action>: <message>``."""
    if not isinstance(error, (ToolValidationError, NovesApiError)):
        logger.exception("Unexpected error in tool %s", tool, extra={"tool": tool})
    observer.tool_failed(tool, action, error)
    return text_response(f"Error {action}: {error_message(error)}")


def validate(tool: str, model: Type[ArgumentsT], arguments: Any, observer: ToolObserver) -> ArgumentsT:
    observer.validation_started(tool, arguments)
    parsed = validate_arguments(model, arguments)
    observer.validation_finished(tool)
    return parsed


async def call_provider(
    tool: str,
    operation: str,
    call: Awaitable[T],
    observer: ToolObserver,
    **params: Any,
) -> T:
    """Await a provider call, reporting start and completion to the observer."""
    observer.provider_call_started(tool, operation, params)
    start = time.monotonic()
    result = await call
    observer.provider_call_finished(tool, operation, (time.monotonic() - start) * 1000)
    return result
