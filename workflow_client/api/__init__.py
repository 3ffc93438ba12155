from workflow_client.api.analytics import AnalyticsService
from workflow_client.api.auth import AuthService
from workflow_client.api.client import ApiClient
from workflow_client.api.notifications import NotificationService
from workflow_client.api.tasks import TaskService
from workflow_client.api.users import UserService

__all__ = [
  "AnalyticsService",
  "ApiClient",
  "AuthService",
  "NotificationService",
  "TaskService",
  "UserService",
]
