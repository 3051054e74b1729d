"""
Shared API state - sio and the task repository.
Initialized by register_routes; routes read the repository from here.
"""

from typing import Any, Optional

# Set by register_routes
sio: Any = None
repository: Optional[Any] = None


def init_api_state(sio_instance, repo):
    global sio, repository
    sio = sio_instance
    repository = repo
