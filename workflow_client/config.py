from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
  model_config = SettingsConfigDict(env_prefix="WORKFLOW_", env_file=".env", extra="ignore")

  api_base_url: str = "http://localhost:8080/api"
  request_timeout_seconds: float = 20
  user_agent: str = "workflow-client/0.1"

  unread_poll_interval_seconds: float = 30
  search_debounce_seconds: float = 0.3
  search_min_query_length: int = 2
  dashboard_recent_limit: int = 5
  reload_after_transition: bool = True

  credential_file: str | None = None
  credential_key: str = "AAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAA="

  log_level: str = "INFO"
  log_dir: str | None = None


settings = Settings()
