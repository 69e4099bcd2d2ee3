from __future__ import annotations

from pydantic import BaseModel


class StatusResponse(BaseModel):
    status: str = "ok"


class CountResponse(BaseModel):
    count: int


class UnreadCountResponse(BaseModel):
    unread_count: int
