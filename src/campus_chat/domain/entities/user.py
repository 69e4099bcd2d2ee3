from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True, slots=True)
class UserAccount:
    """Read-only projection of a marketplace user account."""

    id: UUID
    username: str
    email: str | None
    first_name: str | None
    last_name: str | None

    @property
    def display_name(self) -> str:
        first = (self.first_name or "").strip()
        last = (self.last_name or "").strip()
        if first and last:
            return f"{first} {last}"
        if first:
            return first
        return self.username
