from __future__ import annotations

from workflow_client.api.client import ApiClient, expect_dict
from workflow_client.schemas import ProductivityMetricsOut, TaskStatisticsOut, TeamAnalyticsOut


class AnalyticsService:
  def __init__(self, api: ApiClient) -> None:
    self.api = api

  async def productivity(self) -> ProductivityMetricsOut:
    data = await self.api.get("/analytics/productivity")
    return ProductivityMetricsOut.model_validate(expect_dict(data))

  async def task_statistics(self) -> TaskStatisticsOut:
    data = await self.api.get("/analytics/tasks")
    return TaskStatisticsOut.model_validate(expect_dict(data))

  async def team_analytics(self) -> TeamAnalyticsOut:
    data = await self.api.get("/analytics/team")
    return TeamAnalyticsOut.model_validate(expect_dict(data))
