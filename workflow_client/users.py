from __future__ import annotations

from workflow_client.ports import UserPort
from workflow_client.schemas import UserOut
from workflow_client.session import normalize_roles


class UserDirectory:
  """User list for the assignee and filter pickers. Not used for authorization."""

  def __init__(self, service: UserPort) -> None:
    self.service = service
    self.users: list[UserOut] = []

  async def list_all(self) -> list[UserOut]:
    self.users = list(await self.service.list_all())
    return list(self.users)

  def assignable(self) -> list[UserOut]:
    return [u for u in self.users if "ADMIN" not in normalize_roles(u.roles)]

  def username_for(self, user_id: int | None) -> str | None:
    for u in self.users:
      if u.id == user_id:
        return u.username
    return None
