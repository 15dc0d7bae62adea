"""
Domain errors raised by the service layer. Routes map them to HTTP codes.
"""


class NotFoundError(LookupError):
    """Row does not exist or belongs to another user (404)."""


class InvalidStatusTransition(ValueError):
    """Kanban move that the board does not allow (409)."""

    def __init__(self, current: str, requested: str):
        self.current = current
        self.requested = requested
        super().__init__(f"Cannot move tweet from '{current}' to '{requested}'")


class TrainingLimitReached(ValueError):
    """User already has the maximum number of training examples (409)."""
