from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Literal

from workflow_client.config import settings
from workflow_client.schemas import TASK_STATUSES, Session, TaskOut

SortKey = Literal["dueDate", "priority", "status", "createdAt"]

PRIORITY_ORDER = {"HIGH": 0, "MEDIUM": 1, "LOW": 2}


@dataclass(frozen=True)
class ListFilters:
  status: str | None = None
  priority: str | None = None
  assigned_to_id: int | None = None
  mine: bool = False


@dataclass(frozen=True)
class DashboardSummary:
  total: int
  counts: dict[str, int]
  my_tasks: list[TaskOut] = field(default_factory=list)
  recent: list[TaskOut] = field(default_factory=list)

  @property
  def todo(self) -> int:
    return self.counts.get("TODO", 0)

  @property
  def in_progress(self) -> int:
    return self.counts.get("IN_PROGRESS", 0)

  @property
  def done(self) -> int:
    return self.counts.get("DONE", 0)

  @property
  def cancelled(self) -> int:
    return self.counts.get("CANCELLED", 0)


def dashboard(tasks: Iterable[TaskOut], session: Session | None, *, recent_limit: int | None = None) -> DashboardSummary:
  items = list(tasks)
  counts = {s: 0 for s in TASK_STATUSES}
  for t in items:
    if t.status in counts:
      counts[t.status] += 1
  mine = [t for t in items if session is not None and t.assignedToId == session.id]
  limit = settings.dashboard_recent_limit if recent_limit is None else recent_limit
  return DashboardSummary(total=len(items), counts=counts, my_tasks=mine, recent=items[: max(0, limit)])


def filter_tasks(tasks: Iterable[TaskOut], filters: ListFilters | None, session: Session | None) -> list[TaskOut]:
  out = list(tasks)
  if filters is None:
    return out
  if filters.status is not None:
    out = [t for t in out if t.status == filters.status]
  if filters.priority is not None:
    out = [t for t in out if t.priority == filters.priority]
  if filters.assigned_to_id is not None:
    out = [t for t in out if t.assignedToId == filters.assigned_to_id]
  if filters.mine:
    # "mine" with nobody logged in matches nothing
    out = [t for t in out if session is not None and t.assignedToId == session.id]
  return out


def sort_tasks(tasks: Iterable[TaskOut], sort_by: SortKey = "createdAt") -> list[TaskOut]:
  items = list(tasks)
  if sort_by == "dueDate":
    dated = sorted((t for t in items if t.dueDate is not None), key=lambda t: t.dueDate)
    return dated + [t for t in items if t.dueDate is None]
  if sort_by == "priority":
    return sorted(items, key=lambda t: PRIORITY_ORDER.get(t.priority, len(PRIORITY_ORDER)))
  if sort_by == "status":
    return sorted(items, key=lambda t: t.status)
  return sorted(items, key=lambda t: t.createdAt, reverse=True)


def list_view(
  tasks: Iterable[TaskOut],
  session: Session | None,
  *,
  filters: ListFilters | None = None,
  sort_by: SortKey = "createdAt",
) -> list[TaskOut]:
  return sort_tasks(filter_tasks(tasks, filters, session), sort_by)


def board_lanes(tasks: Iterable[TaskOut]) -> dict[str, list[TaskOut]]:
  """Four lanes in board order. A task with any other status is left out."""
  lanes: dict[str, list[TaskOut]] = {s: [] for s in TASK_STATUSES}
  for t in tasks:
    lane = lanes.get(t.status)
    if lane is not None:
      lane.append(t)
  return lanes
