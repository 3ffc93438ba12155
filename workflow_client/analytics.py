from __future__ import annotations

import asyncio
from dataclasses import dataclass

from workflow_client import authz
from workflow_client.ports import AnalyticsPort
from workflow_client.schemas import ProductivityMetricsOut, TaskStatisticsOut, TeamAnalyticsOut
from workflow_client.session import SessionState


@dataclass(frozen=True)
class AnalyticsSnapshot:
  productivity: ProductivityMetricsOut
  task_statistics: TaskStatisticsOut | None = None
  team: TeamAnalyticsOut | None = None


class AnalyticsLoader:
  """
  Decides which analytics numbers to fetch. Everyone gets their own
  productivity; the team-wide figures need ADMIN or MANAGER.
  """

  def __init__(self, service: AnalyticsPort, session_state: SessionState) -> None:
    self.service = service
    self.session_state = session_state
    self.snapshot: AnalyticsSnapshot | None = None

  async def fetch(self) -> AnalyticsSnapshot:
    if authz.can_view_analytics(self.session_state.current_session()):
      productivity, stats, team = await asyncio.gather(
        self.service.productivity(),
        self.service.task_statistics(),
        self.service.team_analytics(),
      )
      snap = AnalyticsSnapshot(productivity=productivity, task_statistics=stats, team=team)
    else:
      snap = AnalyticsSnapshot(productivity=await self.service.productivity())
    self.snapshot = snap
    return snap
