from pydantic_settings import BaseSettings
from pydantic import Field
from typing import List, Optional


class Settings(BaseSettings):
    """Settings for the GitHub repository connector service"""

    ENV: str = Field(..., description="Environment: dev, staging, production")

    HOST: str = "0.0.0.0"
    PORT: int = 8080

    LOG_LEVEL: str = "INFO"

    # Per-user credential property holding the GitHub API key
    API_KEY_PROPERTY: str = Field(
        "githubConnector.key",
        description="Property name of the stored API key in per-user storage",
    )

    GITHUB_GRAPHQL_URL: str = Field(
        "https://api.github.com/graphql",
        description="GitHub GraphQL endpoint",
    )

    # Credential storage
    CREDENTIAL_BACKEND: str = Field("memory", description="Credential store: memory, secret_manager")
    GCP_PROJECT_ID: Optional[str] = Field(
        None,
        description="Google Cloud Project ID (secret_manager backend only)"
    )
    SECRET_ID_PREFIX: str = Field("github-connector", description="Prefix for per-user secret IDs")

    # Connector behaviour
    VALIDATE_CREDENTIALS: bool = Field(
        False,
        description="Check the API key against GitHub before storing it",
    )
    AUTH_HELP_URL: Optional[str] = Field(None, description="Help page shown during connector auth")
    DATE_RANGE_REQUIRED: bool = False

    DATA_RATE_LIMIT: str = Field("30/minute", description="Inbound rate limit for /data")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"

    @property
    def ALLOWED_ORIGINS(self) -> List[str]:
        base = [
            "https://lookerstudio.google.com",
            "https://datastudio.google.com",
        ]
        if self.ENV != "production":
            base.append("http://localhost:3000")
        return base


settings = Settings()  # type: ignore
