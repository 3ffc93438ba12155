from __future__ import annotations

from pathlib import Path

import pytest

from fakes import FakeAuthService
from workflow_client.credentials import FileCredentialStore, MemoryCredentialStore, StoredCredential
from workflow_client.errors import NotAuthenticated
from workflow_client.schemas import RegisterIn, Session, UserOut
from workflow_client.session import SessionState, normalize_role, normalize_roles

CAROL = UserOut(id=9, username="carol", email="carol@example.com", roles=["ROLE_MANAGER", "employee", "ROLE_AUDITOR"])


def test_roles_are_normalized_at_the_boundary() -> None:
  assert normalize_role("ROLE_ADMIN") == "ADMIN"
  assert normalize_role(" manager ") == "MANAGER"
  assert normalize_role("role_employee") == "EMPLOYEE"
  assert normalize_role("AUDITOR") is None
  assert normalize_role(None) is None
  assert normalize_roles(["ROLE_ADMIN", "ADMIN", "x"]) == frozenset({"ADMIN"})


@pytest.mark.anyio
async def test_login_publishes_session_and_persists_credential() -> None:
  auth = FakeAuthService([CAROL])
  store = MemoryCredentialStore()
  tokens: list[str | None] = []
  seen: list[Session | None] = []
  state = SessionState(auth, store=store, on_token=tokens.append)
  state.subscribe(seen.append)

  assert state.is_authenticated() is False
  session = await state.login("carol", "pw")

  assert state.is_authenticated() is True
  assert state.current_session() == session
  assert session.roles == frozenset({"MANAGER", "EMPLOYEE"})
  assert tokens == ["tok-carol"]
  assert seen == [session]
  cred = store.load()
  assert cred is not None and cred.token == "tok-carol"
  assert cred.user["username"] == "carol"


@pytest.mark.anyio
async def test_failed_login_leaves_no_session() -> None:
  state = SessionState(FakeAuthService([CAROL]))
  with pytest.raises(NotAuthenticated):
    await state.login("carol", "wrong")
  assert state.current_session() is None


@pytest.mark.anyio
async def test_restore_with_valid_token() -> None:
  auth = FakeAuthService([CAROL])
  auth.valid_tokens.add("tok-carol")
  store = MemoryCredentialStore(StoredCredential(token="tok-carol", user=CAROL.model_dump(mode="json")))
  tokens: list[str | None] = []
  state = SessionState(auth, store=store, on_token=tokens.append)

  session = await state.restore()
  assert session is not None
  assert session.id == 9
  assert tokens == ["tok-carol"]
  assert "validate" in auth.calls


@pytest.mark.anyio
async def test_restore_with_invalid_token_clears_everything() -> None:
  auth = FakeAuthService([CAROL])
  store = MemoryCredentialStore(StoredCredential(token="stale", user=CAROL.model_dump(mode="json")))
  tokens: list[str | None] = []
  state = SessionState(auth, store=store, on_token=tokens.append)

  assert await state.restore() is None
  assert state.is_authenticated() is False
  assert store.load() is None
  assert tokens == ["stale", None]


@pytest.mark.anyio
async def test_restore_without_stored_credential_skips_validation() -> None:
  auth = FakeAuthService([CAROL])
  state = SessionState(auth)
  assert await state.restore() is None
  assert auth.calls == []


@pytest.mark.anyio
async def test_logout_clears_session_and_notifies() -> None:
  auth = FakeAuthService([CAROL])
  store = MemoryCredentialStore()
  seen: list[Session | None] = []
  state = SessionState(auth, store=store)
  await state.login("carol", "pw")
  state.subscribe(seen.append)

  await state.logout()
  assert seen == [None]
  assert state.current_session() is None
  assert store.load() is None


@pytest.mark.anyio
async def test_refresh_failure_ends_session() -> None:
  auth = FakeAuthService([CAROL])
  state = SessionState(auth)
  await state.login("carol", "pw")
  auth.fail_refresh = True
  with pytest.raises(NotAuthenticated):
    await state.refresh_token()
  assert state.is_authenticated() is False


@pytest.mark.anyio
async def test_refresh_swaps_token() -> None:
  auth = FakeAuthService([CAROL])
  tokens: list[str | None] = []
  state = SessionState(auth, on_token=tokens.append)
  await state.login("carol", "pw")
  await state.refresh_token()
  assert tokens[-1] == "tok-carol-refreshed"
  assert state.is_authenticated() is True


@pytest.mark.anyio
async def test_register_then_login() -> None:
  auth = FakeAuthService([CAROL])
  state = SessionState(auth)
  session = await state.register(RegisterIn(username="dave", email="dave@example.com", password="dave-secret"))
  assert session.username == "dave"
  assert session.roles == frozenset({"EMPLOYEE"})
  assert auth.calls[:2] == ["register", "login"]


def test_file_credential_store_is_encrypted(tmp_path: Path) -> None:
  path = tmp_path / "cred.bin"
  store = FileCredentialStore(path, key="unit-test-key")
  store.save(StoredCredential(token="secret-token", user={"id": 1, "username": "u"}))

  assert b"secret-token" not in path.read_bytes()
  loaded = store.load()
  assert loaded == StoredCredential(token="secret-token", user={"id": 1, "username": "u"})

  assert FileCredentialStore(path, key="another-key").load() is None

  store.clear()
  assert store.load() is None
  store.clear()
