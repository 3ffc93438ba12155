from __future__ import annotations

import logging
from typing import Any

import httpx

from workflow_client.config import settings
from workflow_client.errors import ApiError, NotAuthenticated, RequestRejected, ServiceUnavailable

logger = logging.getLogger(__name__)


def normalize_base_url(base_url: str) -> str:
  b = (base_url or "").strip().rstrip("/")
  if not b:
    raise ValueError("baseUrl is required")
  if not (b.startswith("http://") or b.startswith("https://")):
    b = "https://" + b
  return b


def _extract_error(payload: Any, status_code: int) -> tuple[str, dict[str, Any]]:
  if isinstance(payload, dict):
    msg = payload.get("message") or payload.get("error") or payload.get("detail")
    details = {k: v for k, v in payload.items() if k not in ("message", "success", "data")}
    if isinstance(msg, str) and msg.strip():
      return msg.strip(), details
    return f"Request failed with status {status_code}", details
  if isinstance(payload, str) and payload.strip():
    return payload.strip()[:500], {}
  return f"Request failed with status {status_code}", {}


def _raise_for_status(status_code: int, payload: Any) -> None:
  msg, details = _extract_error(payload, status_code)
  if status_code >= 500:
    raise ServiceUnavailable(status_code=status_code, message=msg, details=details)
  if status_code == 401:
    raise NotAuthenticated(status_code=status_code, message=msg, details=details)
  raise RequestRejected(status_code=status_code, message=msg, details=details)


class ApiClient:
  """
  One httpx.AsyncClient bound to the workflow API.

  Every response is expected in a `{success, message, data}` envelope; `data`
  is returned, anything else is raised as an ApiError subclass.
  """

  def __init__(
    self,
    *,
    base_url: str | None = None,
    timeout: float | None = None,
    user_agent: str | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
  ) -> None:
    self._token: str | None = None
    self._client = httpx.AsyncClient(
      base_url=normalize_base_url(base_url or settings.api_base_url),
      timeout=timeout if timeout is not None else settings.request_timeout_seconds,
      headers={"Accept": "application/json", "User-Agent": user_agent or settings.user_agent},
      transport=transport,
    )

  @property
  def token(self) -> str | None:
    return self._token

  def set_token(self, token: str | None) -> None:
    self._token = (token or "").strip() or None

  async def request(
    self,
    method: str,
    path: str,
    *,
    params: dict[str, Any] | None = None,
    json: Any = None,
  ) -> Any:
    headers: dict[str, str] = {}
    if self._token:
      headers["Authorization"] = f"Bearer {self._token}"
    try:
      r = await self._client.request(method, path, params=params, json=json, headers=headers)
    except httpx.HTTPError as exc:
      logger.warning("%s %s failed: %s", method, path, exc)
      raise ServiceUnavailable(status_code=0, message="Service unavailable, please try again", details={"error": str(exc)}) from exc

    if r.status_code == 204 or not r.content:
      if r.status_code >= 400:
        _raise_for_status(r.status_code, None)
      return None
    try:
      payload = r.json()
    except ValueError:
      payload = (r.text or "")[:800]

    if r.status_code >= 400:
      logger.debug("%s %s -> %s", method, path, r.status_code)
      _raise_for_status(r.status_code, payload)

    if isinstance(payload, dict) and "success" in payload:
      if not payload.get("success"):
        msg, details = _extract_error(payload, r.status_code)
        raise RequestRejected(status_code=r.status_code, message=msg, details=details)
      return payload.get("data")
    return payload

  async def get(self, path: str, *, params: dict[str, Any] | None = None) -> Any:
    return await self.request("GET", path, params=params)

  async def post(self, path: str, *, json: Any = None) -> Any:
    return await self.request("POST", path, json=json)

  async def put(self, path: str, *, json: Any = None) -> Any:
    return await self.request("PUT", path, json=json)

  async def patch(self, path: str, *, json: Any = None) -> Any:
    return await self.request("PATCH", path, json=json)

  async def delete(self, path: str) -> Any:
    return await self.request("DELETE", path)

  async def aclose(self) -> None:
    await self._client.aclose()

  async def __aenter__(self) -> "ApiClient":
    return self

  async def __aexit__(self, *exc: object) -> None:
    await self.aclose()


def expect_list(data: Any) -> list[Any]:
  if data is None:
    return []
  if not isinstance(data, list):
    raise ApiError(status_code=200, message="Unexpected response: expected a list")
  return data


def expect_dict(data: Any) -> dict[str, Any]:
  if not isinstance(data, dict):
    raise ApiError(status_code=200, message="Unexpected response: expected an object")
  return data
