"""
FitTrack - Error Types

Boundary conditions in a fitness log (zero targets, empty periods, inverted
windows) are not errors and never raise; these types cover store failures,
missing sessions and invalid goal transitions.
"""


class FitTrackError(Exception):
    """Base exception for FitTrack errors."""


class StoreError(FitTrackError):
    """A record store operation failed. Surfaced to callers unchanged."""

    def __init__(self, operation: str, message: str, original_error: Exception | None = None):
        self.operation = operation
        self.message = message
        self.original_error = original_error
        super().__init__(f"[{operation}] {message}")


class RecordNotFoundError(StoreError):
    """The requested record does not exist in the store."""

    def __init__(self, operation: str, record_type: str, record_id: str):
        self.record_type = record_type
        self.record_id = record_id
        super().__init__(operation, f"{record_type} {record_id} not found")


class SessionError(FitTrackError):
    """No user is signed in."""

    def __init__(self, message: str = "User not logged in"):
        super().__init__(message)


class GoalStateError(FitTrackError):
    """A goal transition was requested from a state that does not allow it."""

    def __init__(self, goal_id: str, message: str):
        self.goal_id = goal_id
        super().__init__(f"Goal {goal_id}: {message}")
