from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Awaitable, Callable
from typing import Any

logger = logging.getLogger(__name__)


class PeriodicTask:
  """
  One asyncio task that calls `fn` every `interval` seconds until stopped.
  Failures are logged and the loop keeps going.
  """

  def __init__(self, fn: Callable[[], Awaitable[Any]], *, interval: float, name: str = "periodic") -> None:
    if interval <= 0:
      raise ValueError("interval must be positive")
    self.fn = fn
    self.interval = float(interval)
    self.name = name
    self._task: asyncio.Task | None = None

  @property
  def running(self) -> bool:
    return self._task is not None and not self._task.done()

  def start(self) -> None:
    if self.running:
      return
    self._task = asyncio.get_running_loop().create_task(self._loop(), name=self.name)

  def stop(self) -> None:
    task, self._task = self._task, None
    if task is not None and not task.done():
      task.cancel()

  async def aclose(self) -> None:
    task, self._task = self._task, None
    if task is None:
      return
    task.cancel()
    with contextlib.suppress(asyncio.CancelledError):
      await task

  async def _loop(self) -> None:
    while True:
      await asyncio.sleep(self.interval)
      try:
        await self.fn()
      except Exception as exc:
        # Never let one failed tick kill the loop.
        logger.warning("%s tick failed: %s", self.name, exc)


class Debouncer:
  """
  Runs the most recently scheduled callback once `delay` seconds pass without
  another `schedule()` call. Only the timer is cancellable; a callback that
  already started runs to completion.
  """

  def __init__(self, delay: float, *, name: str = "debounce") -> None:
    self.delay = max(0.0, float(delay))
    self.name = name
    self._timer: asyncio.Task | None = None
    self._inflight: set[asyncio.Task] = set()

  @property
  def pending(self) -> bool:
    return self._timer is not None and not self._timer.done()

  def schedule(self, fn: Callable[[], Awaitable[Any]]) -> None:
    self.cancel()
    self._timer = asyncio.get_running_loop().create_task(self._fire(fn), name=self.name)

  def cancel(self) -> None:
    timer, self._timer = self._timer, None
    if timer is not None and not timer.done():
      timer.cancel()

  async def _fire(self, fn: Callable[[], Awaitable[Any]]) -> None:
    await asyncio.sleep(self.delay)
    run = asyncio.get_running_loop().create_task(fn(), name=f"{self.name}:run")
    self._inflight.add(run)
    run.add_done_callback(self._inflight.discard)
    if self._timer is asyncio.current_task():
      self._timer = None

  async def wait(self) -> None:
    """Wait for the pending timer (if any) and every started callback."""
    timer = self._timer
    if timer is not None:
      with contextlib.suppress(asyncio.CancelledError):
        await timer
    if self._inflight:
      await asyncio.gather(*list(self._inflight), return_exceptions=True)

  async def aclose(self) -> None:
    self.cancel()
    if self._inflight:
      await asyncio.gather(*list(self._inflight), return_exceptions=True)
