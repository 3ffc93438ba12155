from workflow_client.tasks.cache import TaskCache
from workflow_client.tasks.search import TaskSearch

__all__ = ["TaskCache", "TaskSearch"]
