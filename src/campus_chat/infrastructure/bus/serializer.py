"""Stream entry encoding: ``{"event_type": <str>, "data": <json>}``."""
from __future__ import annotations

import json
from datetime import datetime
from typing import Any
from uuid import UUID


class _Encoder(json.JSONEncoder):
    def default(self, o: object) -> Any:
        if isinstance(o, UUID):
            return str(o)
        if isinstance(o, datetime):
            return o.isoformat()
        return super().default(o)


def to_stream_fields(event_type: str, payload: dict[str, Any]) -> dict[str, str]:
    return {
        "event_type": event_type,
        "data": json.dumps(payload, cls=_Encoder),
    }


def from_stream_fields(fields: dict[str, Any]) -> tuple[str, dict[str, Any]]:
    event_type = fields.get("event_type", "unknown")
    raw = fields.get("data") or "{}"
    return event_type, json.loads(raw)
