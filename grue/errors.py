"""Exceptions raised by the Grue link store, service and configuration.

Classes:
    GrueError:
        Base class for every error raised by this package.

    ValidationError:
        The submitted long URL is empty or not a well-formed absolute URL.

    CollisionError:
        A generated short code is already taken. Retried by the service.

    DuplicateURLError:
        The long URL was shortened concurrently by another request.

    GenerationExhaustedError:
        No free short code was found within the retry budget.

    NotFoundError:
        No record exists for the given short code.

    StoreUnavailableError:
        The link store could not be reached or timed out.

    ConfigurationError:
        Required configuration is missing or malformed.
"""


class GrueError(Exception):
    """Base class for Grue errors."""

    pass


class ValidationError(GrueError):
    """Raised when user input fails validation."""

    pass


class CollisionError(GrueError):
    """Raised when inserting a record whose short code already exists."""

    pass


class DuplicateURLError(GrueError):
    """Raised when inserting a record whose long URL already exists."""

    pass


class GenerationExhaustedError(GrueError):
    """Raised when every short code attempt collided."""

    pass


class NotFoundError(GrueError):
    """Raised when a short code has no record in the store."""

    pass


class StoreUnavailableError(GrueError):
    """Raised on connectivity issues or timeouts talking to the store."""

    pass


class ConfigurationError(GrueError):
    """Raised when the service cannot be configured."""

    pass
