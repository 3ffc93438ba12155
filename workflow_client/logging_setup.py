from __future__ import annotations

import logging
import sys
from pathlib import Path

from workflow_client.config import settings


class _ConsoleNoiseFilter(logging.Filter):
  """
  Keep our own records; only let third-party loggers (httpx, httpcore) through at WARNING+.
  """

  def filter(self, record: logging.LogRecord) -> bool:
    if record.name.startswith("workflow_client"):
      return True
    return record.levelno >= logging.WARNING


def setup_logging(*, level: str | int | None = None, log_dir: str | Path | None = None) -> None:
  """
  Configure root logging once: a filtered console handler and, when a log dir
  is configured, a file handler that receives everything.
  """
  lvl = level if level is not None else settings.log_level
  if isinstance(lvl, str):
    lvl = logging.getLevelName(lvl.upper())
    if not isinstance(lvl, int):
      lvl = logging.INFO

  root = logging.getLogger()
  root.setLevel(logging.DEBUG)
  for h in list(root.handlers):
    root.removeHandler(h)

  fmt = logging.Formatter(
    fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
  )

  ch = logging.StreamHandler(sys.stderr)
  ch.setLevel(lvl)
  ch.setFormatter(fmt)
  ch.addFilter(_ConsoleNoiseFilter())
  root.addHandler(ch)

  target = log_dir if log_dir is not None else settings.log_dir
  if target:
    path = Path(target)
    path.mkdir(parents=True, exist_ok=True)
    fh = logging.FileHandler(str(path / "workflow-client.log"), encoding="utf-8")
    fh.setLevel(logging.DEBUG)
    fh.setFormatter(fmt)
    root.addHandler(fh)

  logging.captureWarnings(True)
