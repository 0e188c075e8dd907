"""Google Secret Manager credential store"""

from google.api_core import exceptions as gcp_exceptions
from google.cloud import secretmanager
import hashlib
import logging
import re
from typing import Optional

from .base import BaseCredentialStore
from ...utils import CredentialStoreError

logger = logging.getLogger(__name__)

# Secret IDs allow letters, digits, underscores and hyphens only
_UNSAFE_SECRET_ID_CHARS = re.compile(r"[^A-Za-z0-9_-]")


class SecretManagerCredentialStore(BaseCredentialStore):
    """Stores each user's property as its own secret; the latest version is the current value"""

    def __init__(self, project_id: str, prefix: str = "github-connector"):
        self.client = secretmanager.SecretManagerServiceClient()
        self.project_id = project_id
        self.prefix = prefix

    def secret_id(self, user_id: str, name: str) -> str:
        """Secret ID for a user's property: <prefix>-<sha256(user_id)>-<sanitized name>"""
        # User IDs are hashed so distinct users never share a secret
        user_digest = hashlib.sha256(user_id.encode("UTF-8")).hexdigest()
        safe_name = _UNSAFE_SECRET_ID_CHARS.sub("_", name)
        return f"{self.prefix}-{user_digest}-{safe_name}"

    def _secret_name(self, user_id: str, name: str) -> str:
        return f"projects/{self.project_id}/secrets/{self.secret_id(user_id, name)}"

    def get_property(self, user_id: str, name: str) -> Optional[str]:
        secret_name = self._secret_name(user_id, name)
        try:
            response = self.client.access_secret_version(
                request={"name": f"{secret_name}/versions/latest"}
            )
        except gcp_exceptions.NotFound:
            return None
        except gcp_exceptions.GoogleAPICallError as e:
            logger.error(f"❌ Failed to read credential: {str(e)}")
            raise CredentialStoreError(str(e)) from e

        logger.info("🔐 Retrieved credential from Secret Manager")
        return response.payload.data.decode("UTF-8")

    def set_property(self, user_id: str, name: str, value: str) -> None:
        parent = f"projects/{self.project_id}"
        secret_name = self._secret_name(user_id, name)

        try:
            try:
                self.client.get_secret(request={"name": secret_name})
                logger.info("Secret already exists, adding new version")
            except gcp_exceptions.NotFound:
                self.client.create_secret(
                    request={
                        "parent": parent,
                        "secret_id": self.secret_id(user_id, name),
                        "secret": {
                            "replication": {"automatic": {}},
                            "labels": {"managed-by": self.prefix},
                        },
                    }
                )
                logger.info("Created new secret")

            self.client.add_secret_version(
                request={
                    "parent": secret_name,
                    "payload": {"data": value.encode("UTF-8")},
                }
            )
        except gcp_exceptions.GoogleAPICallError as e:
            logger.error(f"❌ Failed to store credential: {str(e)}")
            raise CredentialStoreError(str(e)) from e

        logger.info("✅ Stored credential in Secret Manager")

    def delete_property(self, user_id: str, name: str) -> None:
        try:
            self.client.delete_secret(request={"name": self._secret_name(user_id, name)})
        except gcp_exceptions.NotFound:
            return
        except gcp_exceptions.GoogleAPICallError as e:
            logger.error(f"❌ Failed to delete credential: {str(e)}")
            raise CredentialStoreError(str(e)) from e

        logger.info("🗑️ Deleted credential")
