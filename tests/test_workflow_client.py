from __future__ import annotations

import asyncio

import pytest
from httpx import ASGITransport

from conftest import ADMIN, ALICE, BASE_URL, BOB, MANAGER, login
from fake_backend import BackendState, create_app
from workflow_client.app import WorkflowClient
from workflow_client.board import DropOutcome
from workflow_client.credentials import MemoryCredentialStore
from workflow_client.errors import PermissionRefused, RequestRejected
from workflow_client.schemas import TaskCreateIn
from workflow_client.views import dashboard


@pytest.mark.anyio
async def test_assignee_completes_task_on_the_board(wf: WorkflowClient, backend: BackendState) -> None:
  backend.add_task(title="Prepare demo", created_by=ALICE[0], assigned_to=BOB[0])
  await login(wf, BOB)
  await wf.tasks.load()
  session = wf.session.current_session()
  assert dashboard(wf.tasks.tasks, session).done == 0

  wf.board.drag_start(1)
  result = await wf.board.drop("DONE")
  assert result.outcome == DropOutcome.MOVED
  assert backend.tasks[1]["status"] == "DONE"
  assert dashboard(wf.tasks.tasks, session).done == 1
  assert [t.id for t in dashboard(wf.tasks.tasks, session).my_tasks] == [1]


@pytest.mark.anyio
async def test_outsider_cannot_move_task(wf: WorkflowClient, backend: BackendState) -> None:
  backend.add_task(title="Prepare demo", created_by=ADMIN[0], assigned_to=ALICE[0])
  await login(wf, BOB)
  await wf.tasks.load()
  wf.board.drag_start(1)
  result = await wf.board.drop("IN_PROGRESS")
  assert result.outcome == DropOutcome.REFUSED
  assert "set_status" not in backend.calls
  assert backend.tasks[1]["status"] == "TODO"


@pytest.mark.anyio
async def test_server_rejection_is_surfaced(wf: WorkflowClient, backend: BackendState) -> None:
  await login(wf, ALICE)
  with pytest.raises(RequestRejected) as exc:
    await wf.tasks.create(TaskCreateIn(title="ab"))
  assert exc.value.message == "Title must be between 3 and 200 characters"
  assert wf.tasks.tasks == []

  created = await wf.tasks.create(TaskCreateIn(title="Write the summary"))
  assert wf.tasks.tasks == [created]
  assert created.createdById == ALICE[0]


@pytest.mark.anyio
async def test_manager_assigns_and_assignee_gets_notified(wf: WorkflowClient, backend: BackendState) -> None:
  backend.add_task(title="Review expenses", created_by=MANAGER[0])
  await login(wf, MANAGER)
  await wf.tasks.load()
  await wf.users.list_all()
  assert ADMIN[0] not in [u.id for u in wf.users.assignable()]
  assert wf.users.username_for(BOB[0]) == "bob"

  moved = await wf.tasks.reassign(1, BOB[0])
  assert moved.assignedToUsername == "bob"
  assert backend.notifications[BOB[0]][0]["type"] == "TASK_ASSIGNED"


@pytest.mark.anyio
async def test_employee_reassign_is_refused_before_the_request(wf: WorkflowClient, backend: BackendState) -> None:
  backend.add_task(title="Review expenses", created_by=ALICE[0])
  await login(wf, ALICE)
  await wf.tasks.load()
  with pytest.raises(PermissionRefused):
    await wf.tasks.reassign(1, BOB[0])
  assert "assign_task" not in backend.calls


@pytest.mark.anyio
async def test_notification_poll_follows_login_and_logout(wf: WorkflowClient, backend: BackendState) -> None:
  backend.notify(BOB[0], "Welcome")
  assert wf.notifications.polling is False
  await login(wf, BOB)
  assert wf.notifications.polling is True
  await asyncio.sleep(0.08)
  assert wf.notifications.unread_count == 1
  assert [n.message for n in wf.notifications.notifications] == ["Welcome"]

  backend.notify(BOB[0], "Task assigned", "TASK_ASSIGNED")
  await asyncio.sleep(0.08)
  assert wf.notifications.unread_count == 2

  await wf.notifications.mark_all_read()
  assert all(n["isRead"] for n in backend.notifications[BOB[0]])

  await wf.session.logout()
  assert wf.notifications.polling is False
  assert wf.notifications.unread_count == 0
  assert wf.tasks.tasks == []
  polled = backend.calls.count("unread_count")
  await asyncio.sleep(0.06)
  assert backend.calls.count("unread_count") == polled


@pytest.mark.anyio
async def test_analytics_depend_on_role(wf: WorkflowClient, backend: BackendState) -> None:
  backend.add_task(title="One", created_by=MANAGER[0], assigned_to=BOB[0], status="DONE")
  backend.add_task(title="Two", created_by=MANAGER[0], assigned_to=BOB[0])

  await login(wf, BOB)
  snap = await wf.analytics.fetch()
  assert snap.productivity.totalTasks == 2
  assert snap.productivity.completionRate == pytest.approx(0.5)
  assert snap.task_statistics is None and snap.team is None
  assert "task_statistics" not in backend.calls
  await wf.session.logout()

  await login(wf, MANAGER)
  snap = await wf.analytics.fetch()
  assert snap.task_statistics is not None
  assert snap.task_statistics.tasksByStatus == {"DONE": 1, "TODO": 1}
  assert snap.team.tasksPerUser == {"bob": 2}


@pytest.mark.anyio
async def test_search_box_against_the_server(wf: WorkflowClient, backend: BackendState) -> None:
  backend.add_task(title="Quarterly report", created_by=ALICE[0])
  backend.add_task(title="Fix login", created_by=ALICE[0])
  await login(wf, ALICE)
  wf.search.set_query("rep")
  wf.search.set_query("report")
  await wf.search.wait()
  assert [t.title for t in wf.search.results] == ["Quarterly report"]
  assert backend.calls.count("search") == 1


@pytest.mark.anyio
async def test_stored_credential_restores_session(backend: BackendState) -> None:
  store = MemoryCredentialStore()
  async with WorkflowClient(base_url=BASE_URL, transport=ASGITransport(app=create_app(backend)), store=store, poll_interval=60) as first:
    await login(first, ALICE)

  async with WorkflowClient(base_url=BASE_URL, transport=ASGITransport(app=create_app(backend)), store=store, poll_interval=60) as second:
    session = second.session.current_session()
    assert session is not None
    assert session.username == "alice"
    assert second.permissions.is_employee is True

  backend.tokens.clear()
  async with WorkflowClient(base_url=BASE_URL, transport=ASGITransport(app=create_app(backend)), store=store, poll_interval=60) as third:
    assert third.session.current_session() is None
    assert store.load() is None
