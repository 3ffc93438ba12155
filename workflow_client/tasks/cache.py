from __future__ import annotations

import logging
from collections.abc import Callable

from workflow_client import authz
from workflow_client.errors import PermissionRefused
from workflow_client.ports import TaskPort
from workflow_client.schemas import TaskCreateIn, TaskFilters, TaskOut, TaskUpdateIn
from workflow_client.session import SessionState

logger = logging.getLogger(__name__)

CacheListener = Callable[["TaskCache"], None]


class TaskCache:
  """
  Client-side copy of the server's task list, newest first.

  Every mutation is request-then-reconcile: nothing is written locally until
  the service confirms it, and a failed request leaves the cache untouched.
  Reconciliation is replace-by-id, so applying the same confirmed result twice
  is the same as applying it once.

  Full loads are not sequenced: whichever response completes last wins.
  """

  def __init__(self, service: TaskPort, session_state: SessionState) -> None:
    self.service = service
    self.session_state = session_state
    self._tasks: list[TaskOut] = []
    self._selected: TaskOut | None = None
    self.filters = TaskFilters()
    self.loading = 0
    self.revision = 0
    self._listeners: list[CacheListener] = []

  @property
  def tasks(self) -> list[TaskOut]:
    return list(self._tasks)

  @property
  def selected(self) -> TaskOut | None:
    return self._selected

  @property
  def is_loading(self) -> bool:
    return self.loading > 0

  def find(self, task_id: int) -> TaskOut | None:
    for t in self._tasks:
      if t.id == task_id:
        return t
    return None

  def select(self, task: TaskOut | None) -> None:
    self._selected = task
    self._changed()

  def subscribe(self, listener: CacheListener) -> Callable[[], None]:
    self._listeners.append(listener)

    def _unsubscribe() -> None:
      if listener in self._listeners:
        self._listeners.remove(listener)

    return _unsubscribe

  def _changed(self) -> None:
    self.revision += 1
    for listener in list(self._listeners):
      listener(self)

  def _replace(self, task: TaskOut) -> None:
    self._tasks = [task if t.id == task.id else t for t in self._tasks]
    if self._selected is not None and self._selected.id == task.id:
      self._selected = task
    self._changed()

  def _lookup(self, task_id: int) -> TaskOut | None:
    t = self.find(task_id)
    if t is None and self._selected is not None and self._selected.id == task_id:
      return self._selected
    return t

  def _edit_refused(self, task_id: int) -> bool:
    session = self.session_state.current_session()
    if session is None:
      return True
    task = self._lookup(task_id)
    # an uncached task is left to the server to judge
    if task is None:
      return False
    return not authz.can_edit_task(session, task)

  def clear(self) -> None:
    self._tasks = []
    self._selected = None
    self._changed()

  async def load(self, filters: TaskFilters | None = None) -> list[TaskOut]:
    if filters is not None:
      self.filters = filters
    self.loading += 1
    try:
      fetched = await self.service.list(self.filters)
    finally:
      self.loading -= 1
    self._tasks = list(fetched)
    logger.debug("Loaded %d tasks (filters=%s)", len(fetched), self.filters.as_params())
    self._changed()
    return self.tasks

  async def get(self, task_id: int) -> TaskOut:
    self.loading += 1
    try:
      task = await self.service.get(task_id)
    finally:
      self.loading -= 1
    self._selected = task
    self._changed()
    return task

  async def create(self, draft: TaskCreateIn) -> TaskOut:
    if not authz.can_create_task(self.session_state.current_session()):
      raise PermissionRefused("You must be logged in to create tasks", action="create")
    self.loading += 1
    try:
      created = await self.service.create(draft)
    finally:
      self.loading -= 1
    if self.find(created.id) is not None:
      self._replace(created)
    else:
      self._tasks = [created, *self._tasks]
      self._changed()
    logger.debug("Task %s created", created.id)
    return created

  async def update(self, task_id: int, patch: TaskUpdateIn) -> TaskOut:
    if self._edit_refused(task_id):
      raise PermissionRefused("You don't have permission to update this task", action="update")
    self.loading += 1
    try:
      updated = await self.service.update(task_id, patch)
    finally:
      self.loading -= 1
    self._replace(updated)
    return updated

  async def delete(self, task_id: int) -> None:
    if self._edit_refused(task_id):
      raise PermissionRefused("You don't have permission to delete this task", action="delete")
    self.loading += 1
    try:
      await self.service.delete(task_id)
    finally:
      self.loading -= 1
    self._tasks = [t for t in self._tasks if t.id != task_id]
    if self._selected is not None and self._selected.id == task_id:
      self._selected = None
    logger.debug("Task %s deleted", task_id)
    self._changed()

  async def reassign(self, task_id: int, user_id: int) -> TaskOut:
    if not authz.can_assign_tasks(self.session_state.current_session()):
      raise PermissionRefused("Only admins and managers can assign tasks", action="assign")
    self.loading += 1
    try:
      updated = await self.service.assign(task_id, user_id)
    finally:
      self.loading -= 1
    self._replace(updated)
    return updated

  async def transition_status(self, task_id: int, status: str) -> TaskOut:
    task = self._lookup(task_id)
    if not authz.can_update_status(self.session_state.current_session(), task):
      logger.warning("Status change of task %s to %s refused locally", task_id, status)
      raise PermissionRefused("You don't have permission to update this task's status", action="status")
    self.loading += 1
    try:
      updated = await self.service.set_status(task_id, status)
    finally:
      self.loading -= 1
    self._replace(updated)
    logger.debug("Task %s is now %s", task_id, updated.status)
    return updated

  async def search(self, query: str) -> list[TaskOut]:
    return await self.service.search(query)
