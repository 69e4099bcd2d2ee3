from __future__ import annotations

from enum import StrEnum


class ParticipantRole(StrEnum):
    BUYER = "buyer"
    SELLER = "seller"
