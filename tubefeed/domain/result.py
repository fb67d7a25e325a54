from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Generic, TypeVar, Union


T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T
    ok = True


@dataclass(frozen=True)
class Err:
    error: Exception
    ok = False

    @property
    def kind(self) -> str:
        return type(self.error).__name__

    @property
    def message(self) -> str:
        return str(self.error)


Result = Union[Ok[T], Err]


def capture(operation: Callable[[], T]) -> Result:
    """Run operation and turn a raised Exception into an Err.

    BaseException subclasses outside Exception (KeyboardInterrupt, SystemExit,
    asyncio.CancelledError) are not captured: cancellation is not a failure.
    """
    try:
        return Ok(operation())
    except Exception as e:
        return Err(e)
