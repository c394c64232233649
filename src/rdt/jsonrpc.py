"""JSON-RPC 2.0 dispatcher for the ``fetch_reddit_daily_threads`` tool.

Speaks the small subset of MCP a plain HTTP/stdin client needs:
``initialize``, ``tools/list`` and ``tools/call``.
"""
from __future__ import annotations

import json
import logging
import math
from functools import partial
from typing import Any, Callable, Dict, List, Optional, Sequence

import requests

from rdt import __version__
from rdt.config import Settings
from rdt.errors import RDTError

logger = logging.getLogger(__name__)

PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
TOOL_NOT_FOUND = -32602
SERVER_ERROR = -32000

PROTOCOL_VERSION = "2024-11-05"
SERVER_NAME = "reddit-daily-threads-server"
TOOL_NAME = "fetch_reddit_daily_threads"

ToolRunner = Callable[[Dict[str, Any]], str]


class JsonRpcError(Exception):
    def __init__(self, code: int, message: str):
        super().__init__(message)
        self.code = code
        self.message = message


# ---------------------------------------------------------------------------
# Tool definition + runner
# ---------------------------------------------------------------------------


def tool_definition(subreddits: Sequence[str]) -> Dict[str, Any]:
    """JSON description of the export tool, listing ``subreddits`` as choices."""
    names = list(subreddits)
    return {
        "name": TOOL_NAME,
        "description": (
            f"Fetches the latest daily discussion threads from {', '.join('r/' + s for s in names)} "
            "with their recent comments. Defaults to all of them, but can fetch from a single "
            "subreddit if specified."
        ),
        "inputSchema": {
            "type": "object",
            "properties": {
                "intervalHours": {
                    "type": "number",
                    "description": "Hours to look back (default: 24)",
                    "default": 24,
                },
                "subreddit": {
                    "type": "string",
                    "description": "Single subreddit to fetch from (if not provided, fetches from all)",
                    "enum": names,
                },
                "subreddits": {
                    "type": "array",
                    "description": "Multiple subreddits to fetch from",
                    "items": {"type": "string", "enum": names},
                },
            },
        },
    }


def _allowed(name: Any, allowed: Sequence[str]) -> str:
    if not isinstance(name, str) or name not in allowed:
        raise ValueError(f"Unsupported subreddit: {name!r} (expected one of {', '.join(allowed)})")
    return name


def resolve_subreddits(arguments: Dict[str, Any], default: Sequence[str]) -> List[str]:
    """A single ``subreddit`` wins over ``subreddits``, which wins over ``default``.

    Names must be among ``default``, the subreddits the tool advertises.
    """
    if arguments.get("subreddit"):
        return [_allowed(arguments["subreddit"], default)]
    subreddits = arguments.get("subreddits")
    if subreddits:
        if not isinstance(subreddits, list):
            raise ValueError("subreddits must be an array of subreddit names")
        return [_allowed(s, default) for s in subreddits]
    return list(default)


def parse_interval_hours(value: Any, default: float) -> float:
    """Validate the ``intervalHours`` argument; falsy values mean ``default``."""
    if not value:
        return float(default)
    if isinstance(value, bool):
        raise ValueError(f"intervalHours must be a number, got {value!r}")
    try:
        hours = float(value)
    except (TypeError, ValueError):
        raise ValueError(f"intervalHours must be a number, got {value!r}") from None
    if not math.isfinite(hours) or hours <= 0:
        raise ValueError(f"intervalHours must be positive, got {value!r}")
    return hours


def fetch_daily_threads(arguments: Dict[str, Any], settings: Optional[Settings] = None) -> str:
    """Run the export for the tool arguments and return the Markdown text."""
    from rdt.exporter import client_from_settings, export_subreddits

    settings = settings or Settings.load()
    interval_hours = parse_interval_hours(arguments.get("intervalHours"), settings.interval_hours)
    subreddits = resolve_subreddits(arguments, settings.subreddits)

    return export_subreddits(
        client_from_settings(settings),
        subreddits,
        interval_hours=interval_hours,
        score_threshold=settings.score_threshold,
        posts_to_fetch=settings.posts_to_fetch,
        excluded_authors=settings.excluded_authors,
    )


# ---------------------------------------------------------------------------
# Method handlers
# ---------------------------------------------------------------------------


def _initialize(params: Dict[str, Any], run_tool: ToolRunner, settings: Settings) -> Dict[str, Any]:
    return {
        "capabilities": {"tools": {}},
        "protocolVersion": PROTOCOL_VERSION,
        "serverInfo": {"name": SERVER_NAME, "version": __version__},
    }


def _tools_list(params: Dict[str, Any], run_tool: ToolRunner, settings: Settings) -> Dict[str, Any]:
    return {"tools": [tool_definition(settings.subreddits)]}


def _tools_call(params: Dict[str, Any], run_tool: ToolRunner, settings: Settings) -> Dict[str, Any]:
    name = params.get("name")
    if name != TOOL_NAME:
        raise JsonRpcError(TOOL_NOT_FOUND, f"Tool not found: {name}")

    arguments = params.get("arguments") or {}
    if not isinstance(arguments, dict):
        raise JsonRpcError(SERVER_ERROR, "Tool arguments must be a JSON object")

    try:
        text = run_tool(arguments)
    except (RDTError, requests.RequestException, ValueError) as e:
        logger.warning("Tool %s failed: %s", name, e)
        raise JsonRpcError(SERVER_ERROR, str(e) or "Failed to fetch Reddit threads") from e
    return {"content": [{"type": "text", "text": text}]}


_HANDLERS = {
    "initialize": _initialize,
    "tools/list": _tools_list,
    "tools/call": _tools_call,
}


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------


def error_response(code: int, message: str, request_id: Any = None) -> Dict[str, Any]:
    response: Dict[str, Any] = {"jsonrpc": "2.0", "error": {"code": code, "message": message}}
    if request_id is not None:
        response["id"] = request_id
    return response


def dispatch(
    message: Any,
    run_tool: Optional[ToolRunner] = None,
    settings: Optional[Settings] = None,
) -> Dict[str, Any]:
    """Handle one JSON-RPC request (raw JSON text or decoded object) and return the response."""
    if isinstance(message, (str, bytes, bytearray)):
        try:
            message = json.loads(message)
        except ValueError as e:
            return error_response(PARSE_ERROR, f"Parse error: {e}")
    if not isinstance(message, dict):
        return error_response(PARSE_ERROR, "Parse error: request must be a JSON object")

    request_id = message.get("id")
    if message.get("jsonrpc") != "2.0":
        return error_response(INVALID_REQUEST, "Invalid Request: jsonrpc must be 2.0", request_id)

    method = message.get("method")
    handler = _HANDLERS.get(method)
    if handler is None:
        return error_response(METHOD_NOT_FOUND, f"Method not found: {method}", request_id)

    settings = settings or Settings.load()
    run_tool = run_tool or partial(fetch_daily_threads, settings=settings)

    params = message.get("params")
    try:
        result = handler(params if isinstance(params, dict) else {}, run_tool, settings)
    except JsonRpcError as e:
        return error_response(e.code, e.message, request_id)

    response: Dict[str, Any] = {"jsonrpc": "2.0", "result": result}
    if request_id is not None:
        response["id"] = request_id
    return response


def http_status(response: Dict[str, Any]) -> int:
    """HTTP status to send a response with: 400 for malformed envelopes, else 200."""
    code = response.get("error", {}).get("code")
    return 400 if code in (PARSE_ERROR, INVALID_REQUEST) else 200
