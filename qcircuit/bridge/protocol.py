"""JSON-line protocol for the command surface.

One message per line.  Requests carry an action and params; responses
echo the request id and carry either a data payload or an error string.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field, asdict


@dataclass
class BridgeMessage:
    """A single request or response.

    Attributes:
        type: 'request' or 'response'.
        id: Correlation ID (echoed in responses).
        action: Command name (e.g., 'run', 'measure').
        params: Request parameters dict.
        status: Response status ('ok' or 'error').
        data: Response payload dict.
        error: Error description string.
    """
    type: str = "request"
    id: str = ""
    action: str = ""
    params: dict = field(default_factory=dict)
    status: str = ""
    data: dict = field(default_factory=dict)
    error: str = ""

    @property
    def ok(self) -> bool:
        return self.status == "ok"

    def to_json(self) -> str:
        """Serialize to one line of JSON (no trailing newline)."""
        return json.dumps(asdict(self), ensure_ascii=False)

    def to_line(self) -> str:
        return self.to_json() + "\n"

    @classmethod
    def from_json(cls, raw: str) -> BridgeMessage:
        """Parse one line.  Raises ValueError for anything but a JSON object."""
        d = json.loads(raw.strip())
        if not isinstance(d, dict):
            raise ValueError("Message must be a JSON object")
        return cls(
            type=d.get("type", "request"),
            id=str(d.get("id", "")),
            action=d.get("action", ""),
            params=d.get("params") or {},
            status=d.get("status", ""),
            data=d.get("data") or {},
            error=d.get("error", ""),
        )

    @classmethod
    def request(cls, action: str, request_id: str = "", **params) -> BridgeMessage:
        return cls(type="request", id=request_id, action=action, params=params)

    @classmethod
    def ok_response(cls, request_id: str, data: dict | None = None) -> BridgeMessage:
        return cls(type="response", id=request_id, status="ok", data=data or {})

    @classmethod
    def error_response(cls, request_id: str, error: str) -> BridgeMessage:
        return cls(type="response", id=request_id, status="error", error=error)
