from __future__ import annotations

from workflow_client.api.client import ApiClient, expect_dict, expect_list
from workflow_client.schemas import UserOut


class UserService:
  def __init__(self, api: ApiClient) -> None:
    self.api = api

  async def list_all(self) -> list[UserOut]:
    data = await self.api.get("/users")
    return [UserOut.model_validate(u) for u in expect_list(data)]

  async def get(self, user_id: int) -> UserOut:
    data = await self.api.get(f"/users/{int(user_id)}")
    return UserOut.model_validate(expect_dict(data))

  async def get_by_username(self, username: str) -> UserOut:
    data = await self.api.get(f"/users/username/{username}")
    return UserOut.model_validate(expect_dict(data))

  async def list_by_role(self, role: str) -> list[UserOut]:
    data = await self.api.get(f"/users/role/{role}")
    return [UserOut.model_validate(u) for u in expect_list(data)]
