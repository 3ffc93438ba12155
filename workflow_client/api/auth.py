from __future__ import annotations

from workflow_client.api.client import ApiClient, expect_dict
from workflow_client.errors import ApiError
from workflow_client.schemas import LoginIn, LoginOut, RegisterIn, UserOut


class AuthService:
  def __init__(self, api: ApiClient) -> None:
    self.api = api

  async def login(self, username: str, password: str) -> LoginOut:
    payload = LoginIn(username=username, password=password)
    data = await self.api.post("/auth/login", json=payload.model_dump())
    return LoginOut.model_validate(expect_dict(data))

  async def register(self, profile: RegisterIn) -> str:
    data = await self.api.post("/auth/register", json=profile.model_dump(exclude_none=True))
    return data if isinstance(data, str) else "registered"

  async def logout(self) -> None:
    await self.api.post("/auth/logout")

  async def validate_token(self) -> bool:
    try:
      await self.api.get("/auth/validate")
      return True
    except ApiError:
      return False

  async def refresh_token(self) -> LoginOut:
    data = await self.api.post("/auth/refresh")
    return LoginOut.model_validate(expect_dict(data))

  async def get_current_user(self) -> UserOut:
    data = await self.api.get("/users/me")
    return UserOut.model_validate(expect_dict(data))
