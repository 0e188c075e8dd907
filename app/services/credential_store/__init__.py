"""Per-user credential storage backends"""

from .factory import CredentialStoreFactory
from .base import BaseCredentialStore
from .memory import InMemoryCredentialStore
from .secret_manager import SecretManagerCredentialStore

__all__ = [
    "CredentialStoreFactory",
    "BaseCredentialStore",
    "InMemoryCredentialStore",
    "SecretManagerCredentialStore",
]
