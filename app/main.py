from fastapi import Depends, FastAPI, Header, Request
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from typing import Optional
import logging
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from .config import settings
from .models.connectorRequest import (
    AuthTypeResponse, AuthValidResponse,
    KeyCredentials, SetCredentialsResponse,
    ConfigResponse, HealthResponse,
    GetSchemaRequest, GetSchemaResponse,
    GetDataRequest, GetDataResponse,
)
from .services.credential_store import CredentialStoreFactory
from .services.github_client import SEARCH_PAGE_SIZE, GitHubGraphQLClient
from .services.field_schema import get_fields
from .services.github_connector import GitHubRepoConnector
from .utils import ValidationError, raise_http_exception

SERVICE_NAME = "github-repo-connector"
SERVICE_VERSION = "1.0.0"

# Setup logging
logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

# Setup rate limiter
limiter = Limiter(key_func=get_remote_address)

_connector: Optional[GitHubRepoConnector] = None


def get_connector() -> GitHubRepoConnector:
    """Get or create the global connector wired from settings"""
    global _connector
    if _connector is None:
        store = CredentialStoreFactory.create_store(
            settings.CREDENTIAL_BACKEND,
            project_id=settings.GCP_PROJECT_ID,
            secret_id_prefix=settings.SECRET_ID_PREFIX,
        )
        _connector = GitHubRepoConnector(
            store=store,
            client=GitHubGraphQLClient(endpoint=settings.GITHUB_GRAPHQL_URL),
            api_key_property=settings.API_KEY_PROPERTY,
            validate_credentials=settings.VALIDATE_CREDENTIALS,
            auth_help_url=settings.AUTH_HELP_URL,
            date_range_required=settings.DATE_RANGE_REQUIRED,
        )
    return _connector


def get_user_id(x_user_id: str = Header(..., description="Owner of the stored credentials")) -> str:
    if not x_user_id.strip():
        raise_http_exception(ValidationError("X-User-Id header must not be empty"))
    return x_user_id


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info(f"🚀 Starting {SERVICE_NAME} ({settings.CREDENTIAL_BACKEND} credential store)")
    yield
    # Shutdown
    logger.info(f"🛑 {SERVICE_NAME} shutdown complete")

# Create FastAPI app
app = FastAPI(
    title="GitHub Repository Connector",
    description="Reporting-platform connector exposing GitHub repository search results as rows",
    version=SERVICE_VERSION,
    lifespan=lifespan
)

# Add rate limiter state and exception handler
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=False,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)

@app.get("/", response_model=HealthResponse)
async def root():
    """Root endpoint"""
    return HealthResponse(
        status="running",
        service=SERVICE_NAME,
        version=SERVICE_VERSION
    )

@app.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint"""
    return HealthResponse(
        status="healthy",
        service=SERVICE_NAME,
        version=SERVICE_VERSION
    )

@app.get("/auth/type", response_model=AuthTypeResponse, response_model_exclude_none=True)
async def get_auth_type(connector: GitHubRepoConnector = Depends(get_connector)):
    """Authentication type of the connector"""
    return connector.get_auth_type()

@app.post("/auth/reset", status_code=204)
async def reset_auth(
    user_id: str = Depends(get_user_id),
    connector: GitHubRepoConnector = Depends(get_connector),
):
    """Delete the stored API key"""
    try:
        connector.reset_auth(user_id)
    except Exception as e:
        logger.error(f"❌ Credential reset failed: {str(e)}")
        raise_http_exception(e)

@app.get("/auth/valid", response_model=AuthValidResponse)
async def is_auth_valid(
    user_id: str = Depends(get_user_id),
    connector: GitHubRepoConnector = Depends(get_connector),
):
    """Whether a non-empty API key is stored"""
    try:
        return AuthValidResponse(valid=connector.is_auth_valid(user_id))
    except Exception as e:
        logger.error(f"❌ Credential check failed: {str(e)}")
        raise_http_exception(e)

@app.post("/auth/credentials", response_model=SetCredentialsResponse)
async def set_credentials(
    body: KeyCredentials,
    user_id: str = Depends(get_user_id),
    connector: GitHubRepoConnector = Depends(get_connector),
):
    """Store the submitted API key"""
    try:
        return await connector.set_credentials(user_id, body.key)
    except Exception as e:
        logger.error(f"❌ Storing credentials failed: {str(e)}")
        raise_http_exception(e)

@app.get("/config", response_model=ConfigResponse, response_model_exclude_none=True)
async def get_config(connector: GitHubRepoConnector = Depends(get_connector)):
    """User-facing configuration form"""
    return connector.get_config()

@app.post("/schema", response_model=GetSchemaResponse)
async def get_schema(
    body: Optional[GetSchemaRequest] = None,
    connector: GitHubRepoConnector = Depends(get_connector),
):
    """Field schema, optionally restricted to the requested fields"""
    return connector.get_schema(body)

@app.post("/data", response_model=GetDataResponse)
@limiter.limit(settings.DATA_RATE_LIMIT)
async def get_data(
    request: Request,
    body: GetDataRequest,
    user_id: str = Depends(get_user_id),
    connector: GitHubRepoConnector = Depends(get_connector),
):
    """Search GitHub repositories and return the requested fields as rows"""
    logger.info(f"📊 Data request from {user_id}: {body.field_ids}")

    try:
        return await connector.get_data(user_id, body)
    except Exception as e:
        logger.error(f"❌ Data request failed: {str(e)}")
        raise_http_exception(e)

@app.get("/info")
async def service_info():
    """Get service capabilities"""
    return {
        "service": SERVICE_NAME,
        "version": SERVICE_VERSION,
        "auth_type": "KEY",
        "credential_backend": settings.CREDENTIAL_BACKEND,
        "credential_backends": CredentialStoreFactory.list_backends(),
        "fields": [field.name for field in get_fields()],
        "limits": {
            "max_rows_per_request": SEARCH_PAGE_SIZE,
            "data_rate_limit": settings.DATA_RATE_LIMIT,
        },
        "features": {
            "credential_validation": settings.VALIDATE_CREDENTIALS,
            "pagination": False,
            "date_range_required": settings.DATE_RANGE_REQUIRED,
        }
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.HOST, port=settings.PORT)
