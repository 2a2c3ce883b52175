import json
import logging

from noves_mcp.config import NovesConfig
from noves_mcp.server import JsonFormatter, _log_tool_result, configure_logging


def test_log_tool_result_handles_non_dict():
    # Should not raise even if result is not a dict.
    _log_tool_result("dummy", {"content": [{"type": "text", "text": "ok"}]})
    _log_tool_result("dummy", {"content": [{"type": "text", "text": "Error: fail"}]})
    _log_tool_result("dummy", None)  # type: ignore[arg-type]


def test_json_formatter_includes_context_fields():
    record = logging.LogRecord("noves_mcp.test", logging.WARNING, __file__, 1, "tool failed", None, None)
    record.tool = "analyze_wallet"
    record.request_id = "req-1"
    payload = json.loads(JsonFormatter().format(record))
    assert payload == {
        "level": "WARNING",
        "message": "tool failed",
        "name": "noves_mcp.test",
        "tool": "analyze_wallet",
        "request_id": "req-1",
    }


def test_configure_logging_accepts_plain_format():
    configure_logging(NovesConfig(log_level="debug", log_format="plain"))
