from workflow_client.app import WorkflowClient

__all__ = ["WorkflowClient"]

__version__ = "0.1.0"
