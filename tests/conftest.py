from __future__ import annotations

import sys
from pathlib import Path

import pytest
from httpx import ASGITransport

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
  sys.path.insert(0, str(ROOT))

from fake_backend import BackendState, create_app
from workflow_client.api.client import ApiClient
from workflow_client.app import WorkflowClient
from workflow_client.credentials import MemoryCredentialStore

BASE_URL = "http://testserver/api"

ADMIN = (1, "admin", "admin123")
MANAGER = (2, "manager", "manager123")
ALICE = (5, "alice", "alice123")
BOB = (7, "bob", "bob123")


@pytest.fixture(scope="session")
def anyio_backend() -> str:
  return "asyncio"


@pytest.fixture
def backend() -> BackendState:
  state = BackendState()
  state.add_user(ADMIN[0], ADMIN[1], ADMIN[2], "ADMIN")
  state.add_user(MANAGER[0], MANAGER[1], MANAGER[2], "MANAGER")
  state.add_user(ALICE[0], ALICE[1], ALICE[2], "EMPLOYEE")
  state.add_user(BOB[0], BOB[1], BOB[2], "EMPLOYEE")
  return state


@pytest.fixture
async def api(backend: BackendState) -> ApiClient:
  client = ApiClient(base_url=BASE_URL, transport=ASGITransport(app=create_app(backend)))
  yield client
  await client.aclose()


@pytest.fixture
async def wf(backend: BackendState) -> WorkflowClient:
  client = WorkflowClient(
    base_url=BASE_URL,
    transport=ASGITransport(app=create_app(backend)),
    store=MemoryCredentialStore(),
    poll_interval=0.02,
    search_debounce_seconds=0.01,
  )
  yield client
  await client.aclose()


async def login(wf: WorkflowClient, who: tuple[int, str, str]) -> None:
  await wf.session.login(who[1], who[2])
