from __future__ import annotations

from workflow_client.api.client import ApiClient, expect_dict, expect_list
from workflow_client.config import settings
from workflow_client.schemas import TaskAssignIn, TaskCreateIn, TaskFilters, TaskOut, TaskStatusIn, TaskUpdateIn


class TaskService:
  def __init__(self, api: ApiClient) -> None:
    self.api = api

  async def list(self, filters: TaskFilters | None = None) -> list[TaskOut]:
    params = filters.as_params() if filters else None
    data = await self.api.get("/tasks", params=params or None)
    return [TaskOut.model_validate(t) for t in expect_list(data)]

  async def get(self, task_id: int) -> TaskOut:
    data = await self.api.get(f"/tasks/{int(task_id)}")
    return TaskOut.model_validate(expect_dict(data))

  async def create(self, draft: TaskCreateIn) -> TaskOut:
    data = await self.api.post("/tasks", json=draft.model_dump(mode="json", exclude_none=True))
    return TaskOut.model_validate(expect_dict(data))

  async def update(self, task_id: int, patch: TaskUpdateIn) -> TaskOut:
    data = await self.api.put(f"/tasks/{int(task_id)}", json=patch.model_dump(mode="json", exclude_unset=True))
    return TaskOut.model_validate(expect_dict(data))

  async def delete(self, task_id: int) -> None:
    await self.api.delete(f"/tasks/{int(task_id)}")

  async def assign(self, task_id: int, user_id: int) -> TaskOut:
    body = TaskAssignIn(userId=user_id)
    data = await self.api.put(f"/tasks/{int(task_id)}/assign", json=body.model_dump())
    return TaskOut.model_validate(expect_dict(data))

  async def set_status(self, task_id: int, status: str) -> TaskOut:
    body = TaskStatusIn(status=status)
    data = await self.api.patch(f"/tasks/{int(task_id)}/status", json=body.model_dump())
    return TaskOut.model_validate(expect_dict(data))

  async def search(self, query: str) -> list[TaskOut]:
    q = (query or "").strip()
    if len(q) < settings.search_min_query_length:
      raise ValueError(f"query must be at least {settings.search_min_query_length} characters")
    data = await self.api.get("/tasks/search", params={"query": q})
    return [TaskOut.model_validate(t) for t in expect_list(data)]
