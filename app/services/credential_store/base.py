"""Base credential store interface"""

from abc import ABC, abstractmethod
from typing import Optional
import logging

logger = logging.getLogger(__name__)

class BaseCredentialStore(ABC):
    """Key-value storage scoped to a single user, one string per property name"""

    @abstractmethod
    def get_property(self, user_id: str, name: str) -> Optional[str]:
        """
        Read a stored property

        Args:
            user_id: Owner of the property
            name: Property name

        Returns:
            Stored value, or None if nothing is stored
        """
        pass

    @abstractmethod
    def set_property(self, user_id: str, name: str, value: str) -> None:
        """Store value under name, replacing any previous value"""
        pass

    @abstractmethod
    def delete_property(self, user_id: str, name: str) -> None:
        """Remove a stored property. Missing properties are ignored."""
        pass
