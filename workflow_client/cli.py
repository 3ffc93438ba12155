from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from typing import Any

import httpx
from pydantic import ValidationError

from workflow_client.app import WorkflowClient
from workflow_client.credentials import CredentialStore
from workflow_client.errors import ApiError
from workflow_client.logging_setup import setup_logging
from workflow_client.schemas import TaskOut
from workflow_client.views import ListFilters, dashboard

logger = logging.getLogger(__name__)


def _task_line(t: TaskOut) -> dict[str, Any]:
  return {
    "id": t.id,
    "title": t.title,
    "status": t.status,
    "priority": t.priority,
    "assignedTo": t.assignedToUsername,
    "dueDate": t.dueDate.isoformat() if t.dueDate else None,
  }


def build_parser() -> argparse.ArgumentParser:
  parser = argparse.ArgumentParser(prog="workflow-client", description="Inspect tasks on a Workflow server")
  parser.add_argument("--base-url", default=None)
  parser.add_argument("--username", default=None)
  parser.add_argument("--password", default=None)
  parser.add_argument("--log-level", default=None)
  parser.add_argument("--log-dir", default=None)
  sub = parser.add_subparsers(dest="command", required=True)
  sub.add_parser("summary", help="Dashboard counts, my tasks and recent tasks")
  board = sub.add_parser("board", help="Tasks grouped into board lanes")
  board.add_argument("--mine", action="store_true")
  move = sub.add_parser("move", help="Move a task to another lane")
  move.add_argument("task_id", type=int)
  move.add_argument("status", choices=["TODO", "IN_PROGRESS", "DONE", "CANCELLED"])
  return parser


async def run(
  args: argparse.Namespace,
  *,
  transport: httpx.AsyncBaseTransport | None = None,
  store: CredentialStore | None = None,
) -> dict[str, Any]:
  async with WorkflowClient(base_url=args.base_url, transport=transport, store=store) as wf:
    if args.username:
      await wf.session.login(args.username, args.password)
    elif not wf.session.is_authenticated():
      raise SystemExit("Not logged in: pass --username/--password or configure WORKFLOW_CREDENTIAL_FILE")

    session = wf.session.current_session()
    await wf.tasks.load()

    if args.command == "summary":
      s = dashboard(wf.tasks.tasks, session)
      return {
        "user": session.username if session else None,
        "total": s.total,
        "counts": s.counts,
        "myTasks": [_task_line(t) for t in s.my_tasks],
        "recent": [_task_line(t) for t in s.recent],
      }

    if args.command == "board":
      wf.board.filters = ListFilters(mine=bool(args.mine))
      return {lane: [_task_line(t) for t in tasks] for lane, tasks in wf.board.lanes().items()}

    wf.board.drag_start(args.task_id)
    result = await wf.board.drop(args.status)
    return {"outcome": result.outcome.value, "taskId": args.task_id, "target": args.status, "message": result.message}


def main(argv: list[str] | None = None, *, transport: httpx.AsyncBaseTransport | None = None, store: CredentialStore | None = None) -> int:
  parser = build_parser()
  args = parser.parse_args(argv)
  if args.username and args.password is None:
    parser.error("--password is required with --username")
  setup_logging(level=args.log_level, log_dir=args.log_dir)
  try:
    out = asyncio.run(run(args, transport=transport, store=store))
  except ApiError as exc:
    logger.error("Request failed (%s): %s", exc.status_code, exc.message)
    print(exc.message, file=sys.stderr)
    return 1
  except ValidationError as exc:
    logger.error("Invalid input: %s", exc)
    print(f"Invalid input: {exc}", file=sys.stderr)
    return 1
  print(json.dumps(out, indent=2))
  if args.command == "move" and out["outcome"] not in ("moved", "unchanged"):
    return 2
  return 0


if __name__ == "__main__":
  raise SystemExit(main())
