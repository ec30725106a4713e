"""
Matching errors.

Every error carries the HTTP status it maps to so the API layer can render
it without knowing the individual error kinds.
"""


class MatchingError(Exception):
    """Base class for matching and repository errors."""

    status_code = 500
    default_message = "Matching failed"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class NotFoundError(MatchingError):
    """Seeker is missing or belongs to the wrong category."""

    status_code = 404
    default_message = "Seeker not found"


class InvalidInputError(MatchingError):
    """Malformed identifier or out-of-range parameter."""

    status_code = 400
    default_message = "Invalid input"


class RepositoryUnavailableError(MatchingError):
    """Registration store could not be reached or failed the query."""

    status_code = 503
    default_message = "Registration store unavailable"


class MatchTimeoutError(MatchingError):
    """Repository call exceeded the configured timeout."""

    status_code = 504
    default_message = "Registration store timed out"
