from __future__ import annotations

import logging

from workflow_client.config import settings
from workflow_client.errors import ApiError
from workflow_client.ports import TaskPort
from workflow_client.scheduling import Debouncer
from workflow_client.schemas import TaskOut

logger = logging.getLogger(__name__)


class TaskSearch:
  """Search-as-you-type state for the header search box."""

  def __init__(
    self,
    service: TaskPort,
    *,
    debounce_seconds: float | None = None,
    min_length: int | None = None,
  ) -> None:
    self.service = service
    self.min_length = settings.search_min_query_length if min_length is None else int(min_length)
    self._debouncer = Debouncer(
      settings.search_debounce_seconds if debounce_seconds is None else debounce_seconds,
      name="task-search",
    )
    self.query = ""
    self.results: list[TaskOut] = []
    self.error: str | None = None
    self.is_searching = False
    self.show_results = False

  def set_query(self, text: str) -> None:
    self.query = text or ""
    q = self.query.strip()
    if len(q) < self.min_length:
      self._debouncer.cancel()
      self.results = []
      self.show_results = False
      self.error = None
      return
    self._debouncer.schedule(lambda: self._run(q))

  async def _run(self, q: str) -> None:
    self.is_searching = True
    self.error = None
    try:
      self.results = await self.service.search(q)
    except ApiError as exc:
      logger.warning("Search for %r failed: %s", q, exc.message)
      self.error = exc.message or "Failed to search tasks. Please try again."
      self.results = []
    finally:
      self.is_searching = False
    self.show_results = True

  def hide(self) -> None:
    self.show_results = False

  async def wait(self) -> None:
    await self._debouncer.wait()

  async def aclose(self) -> None:
    await self._debouncer.aclose()
