from __future__ import annotations


class AppError(Exception):
    """Base application error."""

    def __init__(self, detail: str = "") -> None:
        self.detail = detail
        super().__init__(detail)


class NotFoundError(AppError):
    pass


class ConversationNotFoundError(NotFoundError):
    def __init__(self, detail: str = "Conversation not found") -> None:
        super().__init__(detail)


class MessageNotFoundError(NotFoundError):
    def __init__(self, detail: str = "Message not found") -> None:
        super().__init__(detail)


class ListingNotFoundError(NotFoundError):
    def __init__(self, detail: str = "Listing not found") -> None:
        super().__init__(detail)


class ForbiddenError(AppError):
    pass


class ValidationError(AppError):
    pass


class InvalidContentError(ValidationError):
    pass


class SelfConversationError(ValidationError):
    def __init__(self, detail: str = "Cannot start a conversation with yourself") -> None:
        super().__init__(detail)
