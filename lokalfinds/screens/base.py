"""
Screen controller base.

A screen awaits one operation at a time, wraps the outcome in a Result and
applies it to its state only while still mounted. Failures never propagate
out of a screen: the error lands in state next to the last good data.
"""
import dataclasses
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Generic, Optional, TypeVar, Union

from lokalfinds.core.exceptions import ErrorKind, LokalFindsError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Err:
    error: LokalFindsError

    @property
    def ok(self) -> bool:
        return False

    @property
    def kind(self) -> ErrorKind:
        return self.error.kind

    @property
    def message(self) -> str:
        return self.error.message


Result = Union[Ok[T], Err]


async def capture(operation: Awaitable[T]) -> Result:
    """Await operation; package errors raised by this package as Err."""
    try:
        return Ok(await operation)
    except LokalFindsError as e:
        return Err(e)


@dataclass(frozen=True)
class ScreenState(Generic[T]):
    data: Optional[T] = None
    error: Optional[LokalFindsError] = None
    loading: bool = False
    refreshing: bool = False

    @property
    def can_retry(self) -> bool:
        # Fetch failures get a retry affordance; validation errors need user input
        return self.error is not None and self.error.kind == ErrorKind.FETCH


class Screen(Generic[T]):
    """
    Base class for screen controllers.

    Subclasses implement _fetch(). Concurrent load()/refresh() calls are not
    de-duplicated: the last one to resolve wins.
    """

    def __init__(self):
        self.mounted = True
        self.state: ScreenState[T] = ScreenState()

    def unmount(self) -> None:
        self.mounted = False

    def _update(self, **changes: Any) -> None:
        if self.mounted:
            self.state = dataclasses.replace(self.state, **changes)

    async def _fetch(self) -> T:
        raise NotImplementedError

    async def _settle(self, operation: Awaitable[Any], keep_data: bool = False) -> Result:
        """
        Await operation and apply its Result.

        Ok replaces data unless keep_data is set; Err keeps prior data. Either
        is discarded if the screen unmounted meanwhile. Any other exception
        clears the busy flags and propagates.
        """
        try:
            result = await capture(operation)
        except Exception:
            self._update(loading=False, refreshing=False)
            raise
        if not self.mounted:
            logger.debug(f"{type(self).__name__} unmounted, discarding result")
            return result
        if isinstance(result, Ok):
            changes = {"error": None, "loading": False, "refreshing": False}
            if not keep_data:
                changes["data"] = result.value
            self._update(**changes)
        else:
            logger.warning(f"{type(self).__name__}: {result.kind.value} error: {result.message}")
            self._update(error=result.error, loading=False, refreshing=False)
        return result

    async def load(self) -> Result:
        self._update(loading=True, error=None)
        return await self._settle(self._fetch())

    async def refresh(self) -> Result:
        """Pull-to-refresh: prior data stays visible while refreshing and on failure."""
        self._update(refreshing=True)
        return await self._settle(self._fetch())

    async def retry(self) -> Result:
        return await self.load()

    async def _submit(self, operation: Awaitable[Any]) -> Result:
        """Run a user action (form submit, delete) without replacing loaded data."""
        self._update(loading=True, error=None)
        return await self._settle(operation, keep_data=True)
