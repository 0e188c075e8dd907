"""Process-local credential store"""

from threading import Lock
from typing import Dict, Optional, Tuple
import logging

from .base import BaseCredentialStore

logger = logging.getLogger(__name__)


class InMemoryCredentialStore(BaseCredentialStore):
    """Dictionary-backed store for development and tests. Lost on restart."""

    def __init__(self) -> None:
        self._values: Dict[Tuple[str, str], str] = {}
        self._lock = Lock()

    def get_property(self, user_id: str, name: str) -> Optional[str]:
        with self._lock:
            return self._values.get((user_id, name))

    def set_property(self, user_id: str, name: str, value: str) -> None:
        with self._lock:
            self._values[(user_id, name)] = value
        logger.debug(f"Stored property {name} for user {user_id}")

    def delete_property(self, user_id: str, name: str) -> None:
        with self._lock:
            self._values.pop((user_id, name), None)
        logger.debug(f"Deleted property {name} for user {user_id}")
