import asyncio
from abc import ABC, abstractmethod
from typing import Callable, Protocol


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(ABC):
    """Runs callbacks after a delay. Handles must support ``cancel()``."""

    @abstractmethod
    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        pass


class AsyncioScheduler(Scheduler):
    """Schedules on the running event loop, so callbacks never overlap requests."""

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        loop = asyncio.get_running_loop()
        return loop.call_later(delay, callback)
