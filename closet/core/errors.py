class ClosetError(Exception):
    """Base class for domain errors; `code` is the API detail string."""

    code = "closet_error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.code)


class ItemNotFound(ClosetError):
    code = "item_not_found"


class ChallengeNotFound(ClosetError):
    code = "challenge_not_found"


class InvalidChallengeItem(ClosetError):
    code = "invalid_challenge_item"


class RecommendationNotFound(ClosetError):
    code = "recommendation_not_found"
