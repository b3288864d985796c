"""Domain errors raised by the service layer.

Each error carries the HTTP status it maps to; the API layer renders them
as ``{"error": message}``.
"""


class CockpitError(Exception):
    """Base class for all ToDo Cockpit errors."""

    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(CockpitError):
    """Malformed or missing input, detected before touching the store."""

    status_code = 400


class NotFoundError(CockpitError):
    """One or more referenced ids do not exist."""

    status_code = 404


class StoreError(CockpitError):
    """Unexpected persistence failure."""

    status_code = 500


class ReorderError(StoreError):
    """A reorder write failed; every write of the call was rolled back."""
