from __future__ import annotations

import pytest

from fakes import anonymous, logged_in, make_session, make_task
from workflow_client import authz
from workflow_client.authz import Permissions

ADMIN = make_session(1, "ADMIN")
MANAGER = make_session(2, "MANAGER")
EMPLOYEE = make_session(7, "EMPLOYEE")
NOBODY = make_session(9)


@pytest.mark.parametrize(
  "session,analytics,assign,users",
  [
    (ADMIN, True, True, True),
    (MANAGER, True, True, False),
    (EMPLOYEE, False, False, False),
    (NOBODY, False, False, False),
    (None, False, False, False),
  ],
)
def test_role_predicates(session, analytics: bool, assign: bool, users: bool) -> None:
  assert authz.can_view_analytics(session) is analytics
  assert authz.can_assign_tasks(session) is assign
  assert authz.can_manage_users(session) is users
  assert authz.can_create_task(session) is (session is not None)


@pytest.mark.parametrize(
  "session,created_by,assigned_to,expected",
  [
    (EMPLOYEE, 5, 7, True),
    (EMPLOYEE, 7, None, True),
    (EMPLOYEE, 5, 8, False),
    (EMPLOYEE, 5, None, False),
    (MANAGER, 5, 8, True),
    (ADMIN, 5, None, True),
    (None, 5, 7, False),
  ],
)
def test_can_update_status(session, created_by: int, assigned_to: int | None, expected: bool) -> None:
  task = make_task(1, created_by=created_by, assigned_to=assigned_to)
  assert authz.can_update_status(session, task) is expected


def test_can_edit_task_is_creator_or_privileged() -> None:
  assigned_only = make_task(1, created_by=5, assigned_to=7)
  own = make_task(2, created_by=7)
  assert authz.can_edit_task(EMPLOYEE, assigned_only) is False
  assert authz.can_edit_task(EMPLOYEE, own) is True
  assert authz.can_edit_task(MANAGER, assigned_only) is True
  assert authz.can_edit_task(EMPLOYEE, None) is False
  assert authz.can_update_status(EMPLOYEE, None) is False


def test_has_role_takes_one_role_and_has_any_role_a_list() -> None:
  both = make_session(3, "ADMIN", "EMPLOYEE")
  assert authz.has_role(both, "ROLE_ADMIN") is True
  assert authz.has_role(both, "MANAGER") is False
  assert authz.has_role(both, ["ADMIN"]) is False
  assert authz.has_any_role(both, ["MANAGER", "EMPLOYEE"]) is True
  assert authz.has_any_role(EMPLOYEE, ["MANAGER", "ADMIN"]) is False
  assert authz.has_any_role(both, ["manager"]) is False
  assert authz.has_all_roles(both, ["ADMIN", "EMPLOYEE"]) is True
  assert authz.has_all_roles(both, ["ADMIN", "MANAGER"]) is False
  assert authz.has_all_roles(both, ["ADMIN", "AUDITOR"]) is False
  assert authz.has_role(None, "ADMIN") is False
  assert authz.is_admin(both) and authz.is_employee(both) and not authz.is_manager(both)


@pytest.mark.anyio
async def test_permissions_follow_the_live_session() -> None:
  state = await logged_in(2, "MANAGER")
  perms = Permissions(state)
  assert perms.is_manager is True
  assert perms.can_assign_tasks is True
  assert perms.can_update_status(make_task(1, created_by=5)) is True

  await state.logout()
  assert perms.is_manager is False
  assert perms.can_assign_tasks is False
  assert perms.can_create_task is False
  assert perms.can_update_status(make_task(1, created_by=5)) is False


def test_permissions_without_session() -> None:
  perms = Permissions(anonymous())
  assert perms.has_role("ADMIN") is False
  assert perms.has_any_role(["ADMIN", "EMPLOYEE"]) is False
  assert perms.can_view_analytics is False
  assert perms.can_edit_task(make_task(1)) is False
