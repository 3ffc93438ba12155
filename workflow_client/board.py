from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from workflow_client import authz
from workflow_client.config import settings
from workflow_client.errors import ApiError, PermissionRefused, WorkflowError
from workflow_client.schemas import TASK_STATUSES, TaskOut
from workflow_client.tasks.cache import TaskCache
from workflow_client.views import ListFilters, board_lanes, filter_tasks

logger = logging.getLogger(__name__)


class DragState(str, Enum):
  IDLE = "idle"
  DRAGGING = "dragging"
  DROPPED = "dropped"
  CANCELLED = "cancelled"


class DropOutcome(str, Enum):
  MOVED = "moved"
  UNCHANGED = "unchanged"
  CANCELLED = "cancelled"
  REFUSED = "refused"
  FAILED = "failed"


@dataclass(frozen=True)
class DropResult:
  outcome: DropOutcome
  task: TaskOut | None = None
  target: str | None = None
  error: WorkflowError | None = None

  @property
  def ok(self) -> bool:
    return self.outcome == DropOutcome.MOVED

  @property
  def message(self) -> str | None:
    if self.error is None:
      return None
    return getattr(self.error, "message", None) or str(self.error)


class BoardController:
  """
  Turns a drag gesture on the board into a status transition.

  IDLE -> DRAGGING(task) -> DROPPED(lane) | CANCELLED

  A permitted drop is shown in the target lane right away (an overlay on top
  of the cache) while the request is in flight. When the request resolves the
  overlay is dropped, so the board is once again a pure projection of the
  cache: the confirmed status on success, the untouched one on failure.
  """

  def __init__(
    self,
    cache: TaskCache,
    *,
    filters: ListFilters | None = None,
    reload_after_transition: bool | None = None,
  ) -> None:
    self.cache = cache
    self.filters = filters or ListFilters()
    self.reload_after_transition = (
      settings.reload_after_transition if reload_after_transition is None else reload_after_transition
    )
    self.state = DragState.IDLE
    self.dragging: TaskOut | None = None
    self.target: str | None = None
    self._optimistic: dict[int, str] = {}

  @property
  def pending(self) -> dict[int, str]:
    return dict(self._optimistic)

  def drag_start(self, task_id: int) -> TaskOut | None:
    task = self.cache.find(task_id)
    if task is None:
      self.state = DragState.IDLE
      self.dragging = None
      return None
    self.state = DragState.DRAGGING
    self.dragging = task
    self.target = None
    return task

  def cancel(self) -> None:
    if self.state == DragState.DRAGGING:
      self.state = DragState.CANCELLED
    self.dragging = None
    self.target = None

  def _abort(self, outcome: DropOutcome, task: TaskOut | None, *, error: WorkflowError | None = None) -> DropResult:
    self.state = DragState.CANCELLED
    self.dragging = None
    self.target = None
    return DropResult(outcome=outcome, task=task, error=error)

  async def drop(self, lane: str | None) -> DropResult:
    if self.state != DragState.DRAGGING or self.dragging is None:
      return self._abort(DropOutcome.CANCELLED, None)

    task = self.cache.find(self.dragging.id) or self.dragging
    if lane is None or lane not in TASK_STATUSES:
      return self._abort(DropOutcome.CANCELLED, task)
    if lane == task.status:
      return self._abort(DropOutcome.UNCHANGED, task)

    session = self.cache.session_state.current_session()
    if not authz.can_update_status(session, task):
      logger.info("Drop of task %s onto %s refused for user %s", task.id, lane, session.id if session else None)
      return self._abort(
        DropOutcome.REFUSED,
        task,
        error=PermissionRefused("You don't have permission to move this task", action="status"),
      )

    self.state = DragState.DROPPED
    self.dragging = None
    self.target = lane
    self._optimistic[task.id] = lane
    try:
      updated = await self.cache.transition_status(task.id, lane)
      result = DropResult(outcome=DropOutcome.MOVED, task=updated, target=lane)
    except PermissionRefused as exc:
      result = DropResult(outcome=DropOutcome.REFUSED, task=task, target=lane, error=exc)
    except ApiError as exc:
      logger.warning("Moving task %s to %s failed: %s", task.id, lane, exc.message)
      result = DropResult(outcome=DropOutcome.FAILED, task=task, target=lane, error=exc)
    finally:
      self._optimistic.pop(task.id, None)

    if self.reload_after_transition and result.outcome != DropOutcome.REFUSED:
      try:
        await self.cache.load()
      except ApiError as exc:
        logger.warning("Board reload after moving task %s failed: %s", task.id, exc.message)
    return result

  def visible_tasks(self) -> list[TaskOut]:
    out: list[TaskOut] = []
    for t in self.cache.tasks:
      lane = self._optimistic.get(t.id)
      out.append(t if lane is None else t.model_copy(update={"status": lane}))
    return filter_tasks(out, self.filters, self.cache.session_state.current_session())

  def lanes(self) -> dict[str, list[TaskOut]]:
    return board_lanes(self.visible_tasks())
