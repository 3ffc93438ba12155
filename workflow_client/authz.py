from __future__ import annotations

from collections.abc import Iterable

from workflow_client.schemas import Session, TaskOut
from workflow_client.session import SessionState, normalize_role

ADMIN = "ADMIN"
MANAGER = "MANAGER"
EMPLOYEE = "EMPLOYEE"

# These predicates gate the UI and pre-flight checks. The server enforces the
# same rules on its own; every predicate answers False when in doubt.


def _wanted(roles: Iterable[str]) -> list[str]:
  out: list[str] = []
  for r in roles:
    n = normalize_role(r)
    if n is not None:
      out.append(n)
  return out


def has_role(session: Session | None, role: str) -> bool:
  if session is None:
    return False
  r = normalize_role(role)
  return r is not None and r in session.roles


def has_any_role(session: Session | None, roles: Iterable[str]) -> bool:
  if session is None:
    return False
  return any(r in session.roles for r in _wanted(roles))


def has_all_roles(session: Session | None, roles: Iterable[str]) -> bool:
  if session is None:
    return False
  wanted = list(roles)
  normalized = _wanted(wanted)
  if len(normalized) != len(wanted):
    return False
  return all(r in session.roles for r in normalized)


def is_admin(session: Session | None) -> bool:
  return has_role(session, ADMIN)


def is_manager(session: Session | None) -> bool:
  return has_role(session, MANAGER)


def is_employee(session: Session | None) -> bool:
  return has_role(session, EMPLOYEE)


def can_view_analytics(session: Session | None) -> bool:
  return has_any_role(session, (ADMIN, MANAGER))


def can_assign_tasks(session: Session | None) -> bool:
  return has_any_role(session, (ADMIN, MANAGER))


def can_manage_users(session: Session | None) -> bool:
  return has_role(session, ADMIN)


def can_create_task(session: Session | None) -> bool:
  return session is not None


def can_update_status(session: Session | None, task: TaskOut | None) -> bool:
  if session is None or task is None:
    return False
  if has_any_role(session, (ADMIN, MANAGER)):
    return True
  return task.createdById == session.id or task.assignedToId == session.id


def can_edit_task(session: Session | None, task: TaskOut | None) -> bool:
  """Edit and delete: the creator, or ADMIN/MANAGER."""
  if session is None or task is None:
    return False
  if has_any_role(session, (ADMIN, MANAGER)):
    return True
  return task.createdById == session.id


class Permissions:
  """
  Predicates bound to live session state. Each call reads the session once;
  nothing is cached between calls.
  """

  def __init__(self, session_state: SessionState) -> None:
    self._state = session_state

  def has_role(self, role: str) -> bool:
    return has_role(self._state.current_session(), role)

  def has_any_role(self, roles: Iterable[str]) -> bool:
    return has_any_role(self._state.current_session(), roles)

  def has_all_roles(self, roles: Iterable[str]) -> bool:
    return has_all_roles(self._state.current_session(), roles)

  @property
  def is_admin(self) -> bool:
    return is_admin(self._state.current_session())

  @property
  def is_manager(self) -> bool:
    return is_manager(self._state.current_session())

  @property
  def is_employee(self) -> bool:
    return is_employee(self._state.current_session())

  @property
  def can_view_analytics(self) -> bool:
    return can_view_analytics(self._state.current_session())

  @property
  def can_assign_tasks(self) -> bool:
    return can_assign_tasks(self._state.current_session())

  @property
  def can_manage_users(self) -> bool:
    return can_manage_users(self._state.current_session())

  @property
  def can_create_task(self) -> bool:
    return can_create_task(self._state.current_session())

  def can_update_status(self, task: TaskOut | None) -> bool:
    return can_update_status(self._state.current_session(), task)

  def can_edit_task(self, task: TaskOut | None) -> bool:
    return can_edit_task(self._state.current_session(), task)
