from __future__ import annotations

import asyncio
import logging

from workflow_client.config import settings
from workflow_client.ports import NotificationPort
from workflow_client.scheduling import PeriodicTask
from workflow_client.schemas import NotificationOut, Session
from workflow_client.session import SessionState

logger = logging.getLogger(__name__)


class NotificationCache:
  """
  Notifications plus an unread counter that is polled on its own schedule.

  The poll lives exactly as long as the session: it starts when a session
  appears and is cancelled the moment it goes away.

  Read marks are optimistic and are not rolled back if the request fails;
  the next fetch or poll brings the state back in line.
  """

  def __init__(
    self,
    service: NotificationPort,
    session_state: SessionState,
    *,
    poll_interval: float | None = None,
  ) -> None:
    self.service = service
    self.session_state = session_state
    self.notifications: list[NotificationOut] = []
    self.unread_count = 0
    self.loading = 0
    self._poll = PeriodicTask(
      self.refresh_unread_count,
      interval=settings.unread_poll_interval_seconds if poll_interval is None else poll_interval,
      name="notifications-unread-poll",
    )
    self._bootstrap: asyncio.Task | None = None
    self._unsubscribe = session_state.subscribe(self._on_session)

  @property
  def polling(self) -> bool:
    return self._poll.running

  @property
  def is_loading(self) -> bool:
    return self.loading > 0

  def _on_session(self, session: Session | None) -> None:
    if session is None:
      self.stop()
      self.notifications = []
      self.unread_count = 0
      return
    self.start()

  def start(self) -> None:
    """Fetch once right away, then keep the unread counter fresh."""
    self._poll.start()
    if self._bootstrap is None or self._bootstrap.done():
      self._bootstrap = asyncio.get_running_loop().create_task(self._initial_fetch(), name="notifications-bootstrap")

  def stop(self) -> None:
    self._poll.stop()
    boot, self._bootstrap = self._bootstrap, None
    if boot is not None and not boot.done():
      boot.cancel()

  async def _initial_fetch(self) -> None:
    try:
      await self.fetch_all()
      await self.refresh_unread_count()
    except Exception as exc:
      logger.warning("Initial notification fetch failed: %s", exc)

  async def fetch_all(self) -> list[NotificationOut]:
    self.loading += 1
    try:
      fetched = await self.service.list()
    finally:
      self.loading -= 1
    self.notifications = list(fetched)
    return list(self.notifications)

  async def refresh_unread_count(self) -> int:
    count = await self.service.unread_count()
    self.unread_count = max(0, int(count))
    return self.unread_count

  async def mark_read(self, notification_id: int) -> NotificationOut:
    was_unread = True
    updated: list[NotificationOut] = []
    for n in self.notifications:
      if n.id == notification_id:
        was_unread = not n.isRead
        n = n.model_copy(update={"isRead": True})
      updated.append(n)
    self.notifications = updated
    if was_unread:
      self.unread_count = max(0, self.unread_count - 1)

    try:
      confirmed = await self.service.mark_read(notification_id)
    except Exception:
      logger.warning("Failed to mark notification %s as read; keeping local read state", notification_id)
      raise
    if not confirmed.isRead:
      confirmed = confirmed.model_copy(update={"isRead": True})
    self.notifications = [confirmed if n.id == confirmed.id else n for n in self.notifications]
    return confirmed

  async def mark_all_read(self) -> None:
    self.notifications = [n if n.isRead else n.model_copy(update={"isRead": True}) for n in self.notifications]
    self.unread_count = 0
    try:
      await self.service.mark_all_read()
    except Exception:
      logger.warning("Failed to mark all notifications as read; keeping local read state")
      raise

  async def aclose(self) -> None:
    self._unsubscribe()
    boot, self._bootstrap = self._bootstrap, None
    if boot is not None and not boot.done():
      boot.cancel()
    await self._poll.aclose()
