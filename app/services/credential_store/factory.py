"""Credential store factory"""

import logging
from typing import Optional

from .base import BaseCredentialStore
from .memory import InMemoryCredentialStore
from .secret_manager import SecretManagerCredentialStore

logger = logging.getLogger(__name__)


class CredentialStoreFactory:
    """Factory for creating credential store instances"""

    BACKENDS = {
        "memory": InMemoryCredentialStore,
        "secret_manager": SecretManagerCredentialStore,
    }

    @classmethod
    def create_store(
        cls,
        backend: str,
        project_id: Optional[str] = None,
        secret_id_prefix: str = "github-connector",
    ) -> BaseCredentialStore:
        """
        Create credential store instance.

        Args:
            backend: Store type (memory, secret_manager)
            project_id: Google Cloud project, required for secret_manager
            secret_id_prefix: Prefix for per-user secret IDs

        Returns:
            Credential store instance
        """
        if backend not in cls.BACKENDS:
            raise ValueError(
                f"Unknown credential backend: {backend}. "
                f"Available: {list(cls.BACKENDS.keys())}"
            )

        logger.info(f"Using {backend} credential store")

        if backend == "secret_manager":
            if not project_id:
                raise ValueError("GCP_PROJECT_ID is required for the secret_manager credential backend")
            return SecretManagerCredentialStore(project_id=project_id, prefix=secret_id_prefix)

        return cls.BACKENDS[backend]()

    @classmethod
    def list_backends(cls) -> list:
        """List available backend types"""
        return list(cls.BACKENDS.keys())
