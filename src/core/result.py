"""Tagged success/failure container returned by every service operation.

Services raise ``AppException`` subclasses internally; the ``returns_result``
decorator turns the outcome into a ``Success`` or ``Failure`` so nothing
escapes a public service method. Callers branch on ``result.success``::

    result = await friend_service.send_friend_request("u1", "u2")
    if result.success:
        print(result.data.status)
    else:
        print(result.error.message)
"""

import functools
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, Generic, Literal, NoReturn, ParamSpec, TypeVar

import structlog

from core.exceptions import AppException, InternalError

logger = structlog.get_logger()

T = TypeVar("T")
U = TypeVar("U")
E = TypeVar("E", bound=Exception)
P = ParamSpec("P")


@dataclass(frozen=True)
class Success(Generic[T]):
    """Successful outcome carrying the operation's response."""

    data: T

    @property
    def success(self) -> Literal[True]:
        return True

    def is_success(self) -> bool:
        return True

    def is_failure(self) -> bool:
        return False

    def get_or_none(self) -> T:
        return self.data

    def get_or_default(self, default: Any) -> T:
        return self.data

    def get_or_raise(self) -> T:
        return self.data

    def map(self, transform: Callable[[T], U]) -> "Success[U]":
        return Success(transform(self.data))

    def fold(self, on_success: Callable[[T], U], on_failure: Callable[[Any], U]) -> U:
        return on_success(self.data)

    def on_success(self, action: Callable[[T], Any]) -> "Success[T]":
        action(self.data)
        return self

    def on_failure(self, action: Callable[[Any], Any]) -> "Success[T]":
        return self


@dataclass(frozen=True)
class Failure(Generic[E]):
    """Failed outcome carrying the domain error."""

    error: E

    @property
    def success(self) -> Literal[False]:
        return False

    def is_success(self) -> bool:
        return False

    def is_failure(self) -> bool:
        return True

    def get_or_none(self) -> None:
        return None

    def get_or_default(self, default: U) -> U:
        return default

    def get_or_raise(self) -> NoReturn:
        raise self.error

    def map(self, transform: Callable[[Any], Any]) -> "Failure[E]":
        return self

    def fold(self, on_success: Callable[[Any], U], on_failure: Callable[[E], U]) -> U:
        return on_failure(self.error)

    def on_success(self, action: Callable[[Any], Any]) -> "Failure[E]":
        return self

    def on_failure(self, action: Callable[[E], Any]) -> "Failure[E]":
        action(self.error)
        return self


CustomResult = Success[T] | Failure[E]


def returns_result(
    func: Callable[P, Awaitable[T]],
) -> Callable[P, Awaitable[CustomResult[T, AppException]]]:
    """Run an async service operation and capture its outcome as a result.

    Domain errors become ``Failure(exc)``. Anything else is logged and
    wrapped in an ``InternalError`` whose ``__cause__`` is the original.
    """

    @functools.wraps(func)
    async def wrapper(*args: P.args, **kwargs: P.kwargs) -> CustomResult[T, AppException]:
        try:
            return Success(await func(*args, **kwargs))
        except AppException as exc:
            logger.info(
                "operation_failed",
                operation=func.__qualname__,
                error_code=exc.error_code.value,
                message=exc.message,
            )
            return Failure(exc)
        except Exception as exc:
            logger.exception(
                "operation_crashed",
                operation=func.__qualname__,
                error_type=type(exc).__name__,
            )
            error = InternalError(str(exc) or f"{func.__name__} failed")
            error.__cause__ = exc
            return Failure(error)

    return wrapper
