from __future__ import annotations

import logging
from collections.abc import Callable, Iterable

from pydantic import ValidationError

from workflow_client.credentials import CredentialStore, MemoryCredentialStore, StoredCredential
from workflow_client.errors import ApiError
from workflow_client.ports import AuthPort
from workflow_client.schemas import ROLES, RegisterIn, Session, UserOut

logger = logging.getLogger(__name__)

SessionListener = Callable[[Session | None], None]


def normalize_role(token: object) -> str | None:
  """
  Map a raw role token ("ROLE_ADMIN", "admin", " Manager ") to the canonical
  vocabulary, or None when it is not a known role.
  """
  if not isinstance(token, str):
    return None
  r = token.strip().upper()
  if r.startswith("ROLE_"):
    r = r[len("ROLE_") :]
  return r if r in ROLES else None


def normalize_roles(tokens: Iterable[object] | None) -> frozenset[str]:
  out: set[str] = set()
  for t in tokens or []:
    r = normalize_role(t)
    if r is None:
      logger.debug("Dropping unknown role token %r", t)
      continue
    out.add(r)
  return frozenset(out)


def session_from_user(user: UserOut) -> Session:
  return Session(id=user.id, username=user.username, email=user.email, roles=normalize_roles(user.roles))


class SessionState:
  """
  Single source of truth for who is logged in.

  Login, logout and token checks are delegated to the auth service; this
  object only publishes the resulting session to subscribers.
  """

  def __init__(
    self,
    auth: AuthPort,
    *,
    store: CredentialStore | None = None,
    on_token: Callable[[str | None], None] | None = None,
  ) -> None:
    self.auth = auth
    self.store = store if store is not None else MemoryCredentialStore()
    self._on_token = on_token
    self._session: Session | None = None
    self._listeners: list[SessionListener] = []

  def current_session(self) -> Session | None:
    return self._session

  def is_authenticated(self) -> bool:
    return self._session is not None

  def subscribe(self, listener: SessionListener) -> Callable[[], None]:
    self._listeners.append(listener)

    def _unsubscribe() -> None:
      if listener in self._listeners:
        self._listeners.remove(listener)

    return _unsubscribe

  def _set_token(self, token: str | None) -> None:
    if self._on_token is not None:
      self._on_token(token)

  def _publish(self, session: Session | None) -> None:
    changed = session != self._session
    self._session = session
    if not changed:
      return
    for listener in list(self._listeners):
      listener(session)

  def _clear(self) -> None:
    self.store.clear()
    self._set_token(None)
    self._publish(None)

  async def restore(self) -> Session | None:
    cred = self.store.load()
    if cred is None:
      return None
    try:
      user = UserOut.model_validate(cred.user)
    except ValidationError:
      logger.warning("Stored user snapshot is invalid; clearing credential")
      self._clear()
      return None

    self._set_token(cred.token)
    if not await self.auth.validate_token():
      logger.info("Stored credential for %s is no longer valid", user.username)
      self._clear()
      return None

    session = session_from_user(user)
    self._publish(session)
    logger.info("Restored session for %s", session.username)
    return session

  async def login(self, username: str, password: str) -> Session:
    res = await self.auth.login(username, password)
    self._set_token(res.token)
    try:
      user = await self.auth.get_current_user()
    except ApiError:
      self._set_token(None)
      raise
    self.store.save(StoredCredential(token=res.token, user=user.model_dump(mode="json")))
    session = session_from_user(user)
    self._publish(session)
    logger.info("Logged in as %s (%s)", session.username, ",".join(sorted(session.roles)) or "no roles")
    return session

  async def register(self, profile: RegisterIn) -> Session:
    await self.auth.register(profile)
    return await self.login(profile.username, profile.password)

  async def logout(self) -> None:
    try:
      await self.auth.logout()
    finally:
      self._clear()
      logger.info("Logged out")

  async def refresh_token(self) -> Session:
    try:
      res = await self.auth.refresh_token()
      self._set_token(res.token)
      user = await self.auth.get_current_user()
    except ApiError:
      logger.warning("Token refresh failed; ending session")
      self._clear()
      raise
    self.store.save(StoredCredential(token=res.token, user=user.model_dump(mode="json")))
    session = session_from_user(user)
    self._publish(session)
    return session
