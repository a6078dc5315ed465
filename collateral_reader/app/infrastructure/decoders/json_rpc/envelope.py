from __future__ import annotations

import json
import string
from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationError

from collateral_reader.app.domain.errors import DeserializeError

JSON_RPC_HEADERS: dict[str, str] = {"content-type": "application/json"}


class JsonRpcResponse(BaseModel):
    """
    Minimal JSON-RPC 2.0 response envelope.

    `result` must be present (it may be null); an error-only envelope is
    rejected as malformed.
    """

    model_config = ConfigDict(extra="ignore")

    jsonrpc: str = "2.0"
    id: str | int | None = None
    result: str | None


def build_request(method: str, params: list[Any], *, request_id: str = "1") -> bytes:
    return json.dumps(
        {
            "jsonrpc": "2.0",
            "id": request_id,
            "method": method,
            "params": params,
        }
    ).encode("utf-8")


def parse_result(body: bytes) -> str | None:
    """Return the `result` field of a JSON-RPC response body (None when null)."""
    try:
        payload = json.loads(body)
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise DeserializeError(f"response body is not JSON: {exc}") from exc

    if not isinstance(payload, dict) or "result" not in payload:
        raise DeserializeError(f"not a JSON-RPC result envelope: {str(payload)[:200]}")

    try:
        return JsonRpcResponse.model_validate(payload).result
    except ValidationError as exc:
        raise DeserializeError(f"invalid JSON-RPC envelope: {exc}") from exc


def strip_hex_prefix(value: str) -> str:
    return value[2:] if value[:2] in ("0x", "0X") else value


def parse_hex_digits(digits: str) -> int:
    """Unsigned base-16 value of bare hex digits; anything else is a DeserializeError."""
    if not digits or any(c not in string.hexdigits for c in digits):
        raise DeserializeError(f"not a hex quantity: {digits!r}")
    return int(digits, 16)
