"""Backoff for remote store calls.

The remote mirror is best effort: a call is retried a couple of times on
connection-level failures and then the error is handed back to the engine,
which logs it and carries on with the local result.
"""

import asyncio
import functools
import re
from collections.abc import Awaitable, Callable, Iterator
from dataclasses import dataclass
from typing import ParamSpec, TypeVar

import structlog

log = structlog.get_logger(__name__)

P = ParamSpec("P")
R = TypeVar("R")

# user:password@ in postgres DSNs, and key=value secrets in query strings
_DSN_PASSWORD = re.compile(r"(postgres(?:ql)?://[^:/@\s]+:)[^@\s]+(@)", re.IGNORECASE)
_SECRET_PARAM = re.compile(r"((?:password|secret|token)=)[^&\s'\")]+", re.IGNORECASE)


def redact(message: str) -> str:
    """Hide database credentials that drivers like to echo back in errors."""
    message = _DSN_PASSWORD.sub(r"\1***\2", message)
    return _SECRET_PARAM.sub(r"\1***", message)


@dataclass(frozen=True)
class Backoff:
    retries: int = 2
    initial: float = 0.5
    ceiling: float = 10.0

    def delays(self) -> Iterator[float]:
        """Sleep before each retry: initial, 2x initial, ... capped at ceiling."""
        for n in range(self.retries):
            yield min(self.initial * 2 ** n, self.ceiling)


REMOTE_BACKOFF = Backoff()


def async_retry(
    backoff: Backoff = REMOTE_BACKOFF,
    exceptions: tuple[type[BaseException], ...] = (OSError,),
) -> Callable[[Callable[P, Awaitable[R]]], Callable[P, Awaitable[R]]]:
    """Retry the wrapped coroutine on ``exceptions``; re-raise the last one when out of tries."""

    def decorator(func: Callable[P, Awaitable[R]]) -> Callable[P, Awaitable[R]]:
        @functools.wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            for attempt, delay in enumerate(backoff.delays(), start=1):
                try:
                    return await func(*args, **kwargs)
                except exceptions as e:
                    log.warning(
                        "remote_call_retry",
                        call=func.__qualname__,
                        attempt=attempt,
                        delay=delay,
                        error=redact(str(e)),
                    )
                await asyncio.sleep(delay)
            try:
                return await func(*args, **kwargs)
            except exceptions as e:
                log.warning("remote_call_gave_up", call=func.__qualname__, error=redact(str(e)))
                raise

        return wrapper

    return decorator
