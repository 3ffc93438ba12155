from workflow_client.notifications.cache import NotificationCache

__all__ = ["NotificationCache"]
