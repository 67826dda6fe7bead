import asyncio
import functools
from typing import TypeVar, Any
from collections.abc import Callable

import asyncpg

from grue.errors import StoreUnavailableError


__all__ = ['handle_store_errors', 'STORE_CONNECTION_ERRORS']

F = TypeVar('F', bound=Callable[..., Any])

STORE_CONNECTION_ERRORS = (
    OSError,
    asyncio.TimeoutError,
    asyncpg.exceptions.InterfaceError,
    asyncpg.exceptions.PostgresConnectionError,
    asyncpg.exceptions.CannotConnectNowError,
    asyncpg.exceptions.TooManyConnectionsError,
)


def handle_store_errors(method: F) -> F:
    """Wrap store coroutines so connectivity failures raise StoreUnavailableError

    The failure is logged through the store's logger with the operation name
    and the short code or URL it was called with.

    Args:
        method (Callable[..., Awaitable[Any]]):
            Store method performing I/O which may fail to reach the database or time out.

    Returns:
        Callable[..., Awaitable[Any]]:
            Wrapped coroutine function raising StoreUnavailableError instead.

    Example:
        >>> @handle_store_errors
        ... async def find_by_code(self, short_code):
        ...     ...
    """

    @functools.wraps(method)
    async def wrapper(self, *args, **kwargs):
        try:
            return await method(self, *args, **kwargs)
        except STORE_CONNECTION_ERRORS as e:
            operation = method.__name__
            subject = f" ({args[0]!r})" if args else ""
            self.logger.error(f"Store {operation}{subject} failed at {self.host}:{self.port}/{self.database}: {e!r}")
            raise StoreUnavailableError(
                f"Can't reach store at {self.host}:{self.port}/{self.database} during {operation}{subject}."
            ) from e

    return wrapper
