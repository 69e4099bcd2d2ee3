from __future__ import annotations

from campus_chat.domain.entities.user import UserAccount
from campus_chat.infrastructure.db.models.user import UserModel


def model_to_entity(model: UserModel) -> UserAccount:
    return UserAccount(
        id=model.id,
        username=model.username,
        email=model.email,
        first_name=model.first_name,
        last_name=model.last_name,
    )
