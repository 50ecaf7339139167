"""JSON-RPC message shapes exchanged with the editor."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import TypeAlias

from nangosha.exceptions import MessageDecodeError

JSONScalar: TypeAlias = str | int | float | bool | None
JSONValue: TypeAlias = JSONScalar | list["JSONValue"] | dict[str, "JSONValue"]
JSONObject: TypeAlias = dict[str, JSONValue]
RequestId: TypeAlias = int | str

JSONRPC_VERSION = "2.0"


@dataclass(frozen=True)
class Notification:
    method: str
    params: JSONValue = None
    jsonrpc: str = JSONRPC_VERSION


@dataclass(frozen=True)
class Request:
    id: RequestId
    method: str
    params: JSONValue = None
    jsonrpc: str = JSONRPC_VERSION


Message: TypeAlias = Request | Notification


def decode_message(payload: bytes) -> Message:
    try:
        decoded = json.loads(payload.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise MessageDecodeError(f"invalid JSON payload: {exc}", payload=payload) from exc
    if not isinstance(decoded, dict):
        raise MessageDecodeError("JSON-RPC payload must be an object", payload=payload)
    method = decoded.get("method")
    if not isinstance(method, str):
        raise MessageDecodeError("JSON-RPC payload has no method", payload=payload)
    params = decoded.get("params")
    jsonrpc = str(decoded.get("jsonrpc", JSONRPC_VERSION))
    if "id" not in decoded or decoded["id"] is None:
        return Notification(method=method, params=params, jsonrpc=jsonrpc)
    request_id = decoded["id"]
    if isinstance(request_id, bool) or not isinstance(request_id, (int, str)):
        raise MessageDecodeError(
            f"invalid request id type: {type(request_id).__name__}", payload=payload
        )
    return Request(id=request_id, method=method, params=params, jsonrpc=jsonrpc)


def response_payload(request_id: RequestId, result: JSONValue) -> JSONObject:
    return {"jsonrpc": JSONRPC_VERSION, "id": request_id, "result": result}

