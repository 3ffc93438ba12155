from __future__ import annotations

import logging

import httpx

from workflow_client.analytics import AnalyticsLoader
from workflow_client.api import AnalyticsService, ApiClient, AuthService, NotificationService, TaskService, UserService
from workflow_client.authz import Permissions
from workflow_client.board import BoardController
from workflow_client.credentials import CredentialStore, default_credential_store
from workflow_client.notifications.cache import NotificationCache
from workflow_client.schemas import Session
from workflow_client.session import SessionState
from workflow_client.tasks.cache import TaskCache
from workflow_client.tasks.search import TaskSearch
from workflow_client.users import UserDirectory

logger = logging.getLogger(__name__)


class WorkflowClient:
  """Wires the API services, session, caches and board together."""

  def __init__(
    self,
    *,
    base_url: str | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
    store: CredentialStore | None = None,
    poll_interval: float | None = None,
    search_debounce_seconds: float | None = None,
  ) -> None:
    self.api = ApiClient(base_url=base_url, transport=transport)
    self.auth_service = AuthService(self.api)
    self.task_service = TaskService(self.api)
    self.notification_service = NotificationService(self.api)
    self.user_service = UserService(self.api)
    self.analytics_service = AnalyticsService(self.api)

    self.session = SessionState(
      self.auth_service,
      store=store if store is not None else default_credential_store(),
      on_token=self.api.set_token,
    )
    self.permissions = Permissions(self.session)
    self.tasks = TaskCache(self.task_service, self.session)
    self.notifications = NotificationCache(self.notification_service, self.session, poll_interval=poll_interval)
    self.board = BoardController(self.tasks)
    self.search = TaskSearch(self.task_service, debounce_seconds=search_debounce_seconds)
    self.users = UserDirectory(self.user_service)
    self.analytics = AnalyticsLoader(self.analytics_service, self.session)
    self.session.subscribe(self._on_session)

  def _on_session(self, session: Session | None) -> None:
    if session is None:
      logger.debug("Session ended; dropping cached tasks")
      self.tasks.clear()

  async def start(self) -> Session | None:
    return await self.session.restore()

  async def aclose(self) -> None:
    await self.search.aclose()
    await self.notifications.aclose()
    await self.api.aclose()

  async def __aenter__(self) -> "WorkflowClient":
    await self.start()
    return self

  async def __aexit__(self, *exc: object) -> None:
    await self.aclose()
