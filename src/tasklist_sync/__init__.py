"""
Client for synchronizing a shared task list with a remote server.

Writes are guarded by a server-side version number; sync() merges with the
latest server state and retries on conflicting updates.
"""

from .config import ClientConfig
from .core.certs import get_certificate
from .core.client import OVERWRITE_VERSION, Client, DownloadResult, SyncResult, setup_client
from .core.errors import ConflictError, DataCorruptionError, DecryptionError, HttpError
from .tasks.task_models import DiffStat, Task, TaskList, TaskStatus

__all__ = [
    "OVERWRITE_VERSION",
    "Client",
    "ClientConfig",
    "ConflictError",
    "DataCorruptionError",
    "DecryptionError",
    "DiffStat",
    "DownloadResult",
    "HttpError",
    "SyncResult",
    "Task",
    "TaskList",
    "TaskStatus",
    "get_certificate",
    "setup_client",
]
