from __future__ import annotations

from workflow_client.api.client import ApiClient, expect_dict, expect_list
from workflow_client.schemas import NotificationOut


class NotificationService:
  def __init__(self, api: ApiClient) -> None:
    self.api = api

  async def list(self) -> list[NotificationOut]:
    data = await self.api.get("/notifications")
    return [NotificationOut.model_validate(n) for n in expect_list(data)]

  async def list_unread(self) -> list[NotificationOut]:
    data = await self.api.get("/notifications/unread")
    return [NotificationOut.model_validate(n) for n in expect_list(data)]

  async def unread_count(self) -> int:
    data = await self.api.get("/notifications/count")
    return max(0, int(data or 0))

  async def mark_read(self, notification_id: int) -> NotificationOut:
    data = await self.api.put(f"/notifications/{int(notification_id)}/read")
    return NotificationOut.model_validate(expect_dict(data))

  async def mark_all_read(self) -> None:
    await self.api.put("/notifications/read-all")
