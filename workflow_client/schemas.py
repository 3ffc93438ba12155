from __future__ import annotations

import re
from datetime import datetime, timezone
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic import field_validator


TASK_STATUSES: tuple[str, ...] = ("TODO", "IN_PROGRESS", "DONE", "CANCELLED")
TASK_PRIORITIES: tuple[str, ...] = ("LOW", "MEDIUM", "HIGH")
NOTIFICATION_TYPES: tuple[str, ...] = ("TASK_ASSIGNED", "TASK_UPDATED", "TASK_COMPLETED", "TASK_CANCELLED", "SYSTEM")
ROLES: tuple[str, ...] = ("ADMIN", "MANAGER", "EMPLOYEE")

TaskStatus = Literal["TODO", "IN_PROGRESS", "DONE", "CANCELLED"]
TaskPriority = Literal["LOW", "MEDIUM", "HIGH"]
Role = Literal["ADMIN", "MANAGER", "EMPLOYEE"]

_DATE_ONLY_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def _parse_dt_utc(value: object) -> object:
  if value is None:
    return None
  if isinstance(value, datetime):
    dt = value
  elif isinstance(value, str):
    s = value.strip()
    if not s:
      return None
    if _DATE_ONLY_RE.fullmatch(s):
      dt = datetime.fromisoformat(s)
    else:
      dt = datetime.fromisoformat(s.replace("Z", "+00:00"))
  else:
    return value

  if dt.tzinfo is None:
    return dt.replace(tzinfo=timezone.utc)
  return dt.astimezone(timezone.utc)


class ApiEnvelope(BaseModel):
  success: bool
  message: str = ""
  data: Any = None


class TaskOut(BaseModel):
  id: int
  title: str
  description: str | None = None
  # Kept as plain strings: a server may send a status the board does not know.
  status: str
  priority: str
  assignedToId: int | None = None
  assignedToUsername: str | None = None
  createdById: int
  createdByUsername: str
  dueDate: datetime | None = None
  createdAt: datetime
  updatedAt: datetime

  @field_validator("dueDate", "createdAt", "updatedAt", mode="before")
  @classmethod
  def _utc(cls, v: object) -> object:
    return _parse_dt_utc(v)


class TaskCreateIn(BaseModel):
  title: str = Field(min_length=1, max_length=200)
  description: str | None = None
  priority: TaskPriority | None = None
  assignedToId: int | None = None
  dueDate: datetime | None = None

  @field_validator("dueDate", mode="before")
  @classmethod
  def _due_utc(cls, v: object) -> object:
    return _parse_dt_utc(v)


class TaskUpdateIn(BaseModel):
  title: str | None = Field(default=None, min_length=1, max_length=200)
  description: str | None = None
  priority: TaskPriority | None = None
  dueDate: datetime | None = None

  @field_validator("dueDate", mode="before")
  @classmethod
  def _due_utc(cls, v: object) -> object:
    return _parse_dt_utc(v)


class TaskAssignIn(BaseModel):
  userId: int


class TaskStatusIn(BaseModel):
  status: TaskStatus


class TaskFilters(BaseModel):
  model_config = ConfigDict(frozen=True)

  status: TaskStatus | None = None
  assignedToId: int | None = None
  createdById: int | None = None

  def as_params(self) -> dict[str, str]:
    return {k: str(v) for k, v in self.model_dump(exclude_none=True).items()}


class NotificationOut(BaseModel):
  id: int
  message: str
  type: str
  isRead: bool = False
  createdAt: datetime

  @field_validator("createdAt", mode="before")
  @classmethod
  def _utc(cls, v: object) -> object:
    return _parse_dt_utc(v)


class UserOut(BaseModel):
  id: int
  username: str
  email: str
  roles: list[str] = Field(default_factory=list)
  createdAt: datetime | None = None
  updatedAt: datetime | None = None

  @field_validator("createdAt", "updatedAt", mode="before")
  @classmethod
  def _utc(cls, v: object) -> object:
    return _parse_dt_utc(v)


class Session(BaseModel):
  model_config = ConfigDict(frozen=True)

  id: int
  username: str
  email: str = ""
  roles: frozenset[Role] = frozenset()


class LoginIn(BaseModel):
  username: str = Field(min_length=1)
  password: str = Field(min_length=1)


class LoginOut(BaseModel):
  token: str
  tokenType: str = "Bearer"
  username: str = ""
  email: str = ""
  roles: list[str] = Field(default_factory=list)


class RegisterIn(BaseModel):
  username: str = Field(min_length=3, max_length=50)
  email: str = Field(min_length=3, max_length=320)
  password: str = Field(min_length=6, max_length=200)
  role: str | None = None


class ProductivityMetricsOut(BaseModel):
  totalTasks: int = 0
  completedTasks: int = 0
  inProgressTasks: int = 0
  todoTasks: int = 0
  completionRate: float = 0.0


class TaskStatisticsOut(BaseModel):
  totalTasks: int = 0
  tasksByStatus: dict[str, int] = Field(default_factory=dict)
  tasksByPriority: dict[str, int] = Field(default_factory=dict)


class TeamAnalyticsOut(BaseModel):
  tasksPerUser: dict[str, int] = Field(default_factory=dict)
  completionRatePerUser: dict[str, float] = Field(default_factory=dict)
