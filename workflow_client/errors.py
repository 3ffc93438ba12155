from __future__ import annotations

from typing import Any


class WorkflowError(RuntimeError):
  pass


class PermissionRefused(WorkflowError):
  """Raised before any request is made when the local predicate says no."""

  retryable = False

  def __init__(self, message: str = "You do not have permission to perform this action", *, action: str | None = None) -> None:
    super().__init__(message)
    self.message = message
    self.action = action


class ApiError(WorkflowError):
  retryable = False

  def __init__(self, *, status_code: int, message: str, details: dict[str, Any] | None = None) -> None:
    super().__init__(message)
    self.status_code = status_code
    self.message = message
    self.details = details or {}


class RequestRejected(ApiError):
  """The service answered but refused the request (4xx or success=false)."""


class NotAuthenticated(RequestRejected):
  pass


class ServiceUnavailable(ApiError):
  """Network failure or 5xx. Callers may offer a manual retry."""

  retryable = True
