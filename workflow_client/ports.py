from __future__ import annotations

from typing import Protocol

from workflow_client.schemas import (
  LoginOut,
  NotificationOut,
  ProductivityMetricsOut,
  RegisterIn,
  TaskCreateIn,
  TaskFilters,
  TaskOut,
  TaskStatisticsOut,
  TaskUpdateIn,
  TeamAnalyticsOut,
  UserOut,
)


class AuthPort(Protocol):
  async def login(self, username: str, password: str) -> LoginOut: ...

  async def register(self, profile: RegisterIn) -> str: ...

  async def logout(self) -> None: ...

  async def validate_token(self) -> bool: ...

  async def refresh_token(self) -> LoginOut: ...

  async def get_current_user(self) -> UserOut: ...


class TaskPort(Protocol):
  async def list(self, filters: TaskFilters | None = None) -> list[TaskOut]: ...

  async def get(self, task_id: int) -> TaskOut: ...

  async def create(self, draft: TaskCreateIn) -> TaskOut: ...

  async def update(self, task_id: int, patch: TaskUpdateIn) -> TaskOut: ...

  async def delete(self, task_id: int) -> None: ...

  async def assign(self, task_id: int, user_id: int) -> TaskOut: ...

  async def set_status(self, task_id: int, status: str) -> TaskOut: ...

  async def search(self, query: str) -> list[TaskOut]: ...


class NotificationPort(Protocol):
  async def list(self) -> list[NotificationOut]: ...

  async def unread_count(self) -> int: ...

  async def mark_read(self, notification_id: int) -> NotificationOut: ...

  async def mark_all_read(self) -> None: ...


class UserPort(Protocol):
  async def list_all(self) -> list[UserOut]: ...


class AnalyticsPort(Protocol):
  async def productivity(self) -> ProductivityMetricsOut: ...

  async def task_statistics(self) -> TaskStatisticsOut: ...

  async def team_analytics(self) -> TeamAnalyticsOut: ...
