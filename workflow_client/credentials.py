from __future__ import annotations

import base64
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol

from cryptography.fernet import Fernet, InvalidToken

from workflow_client.config import settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoredCredential:
  token: str
  user: dict[str, Any]


class CredentialStore(Protocol):
  def load(self) -> StoredCredential | None: ...

  def save(self, credential: StoredCredential) -> None: ...

  def clear(self) -> None: ...


class MemoryCredentialStore:
  def __init__(self, credential: StoredCredential | None = None) -> None:
    self._credential = credential

  def load(self) -> StoredCredential | None:
    return self._credential

  def save(self, credential: StoredCredential) -> None:
    self._credential = credential

  def clear(self) -> None:
    self._credential = None


def _fernet(key: str) -> Fernet:
  # accept raw strings as well as proper Fernet keys
  try:
    base64.urlsafe_b64decode(key.encode("utf-8"))
    return Fernet(key.encode("utf-8"))
  except ValueError:
    b = base64.urlsafe_b64encode(key.encode("utf-8").ljust(32, b"\0")[:32])
    return Fernet(b)


class FileCredentialStore:
  """
  Token + user snapshot persisted as Fernet-encrypted JSON.

  An unreadable file (wrong key, corrupt content) is treated as "no credential".
  """

  def __init__(self, path: str | Path, *, key: str | None = None) -> None:
    self.path = Path(path)
    self._fernet = _fernet(key or settings.credential_key)

  def load(self) -> StoredCredential | None:
    if not self.path.exists():
      return None
    try:
      raw = self._fernet.decrypt(self.path.read_bytes()).decode("utf-8")
      obj = json.loads(raw)
    except (InvalidToken, ValueError) as exc:
      logger.warning("Ignoring unreadable credential file %s: %s", self.path, exc)
      return None
    if not isinstance(obj, dict):
      return None
    token = obj.get("token")
    user = obj.get("user")
    if not isinstance(token, str) or not token.strip() or not isinstance(user, dict):
      return None
    return StoredCredential(token=token, user=user)

  def save(self, credential: StoredCredential) -> None:
    self.path.parent.mkdir(parents=True, exist_ok=True)
    raw = json.dumps({"token": credential.token, "user": credential.user})
    self.path.write_bytes(self._fernet.encrypt(raw.encode("utf-8")))

  def clear(self) -> None:
    self.path.unlink(missing_ok=True)


def default_credential_store() -> CredentialStore:
  if settings.credential_file:
    return FileCredentialStore(settings.credential_file)
  return MemoryCredentialStore()
