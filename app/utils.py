"""Error types and HTTP error mapping"""

from fastapi import HTTPException
import httpx
import logging
from typing import Optional

logger = logging.getLogger(__name__)


class ConnectorException(Exception):
    """Base exception for connector errors with HTTP status codes"""

    def __init__(self, status_code: int, detail: str, error_code: str = "internal_error"):
        self.status_code = status_code
        self.detail = detail
        self.error_code = error_code
        super().__init__(detail)

class ValidationError(ConnectorException):
    """User input validation error (400)"""
    def __init__(self, detail: str):
        super().__init__(status_code=400, detail=detail, error_code="validation_error")

class UpstreamError(ConnectorException):
    """External service error (502)"""
    def __init__(self, detail: str, service: str):
        super().__init__(
            status_code=502,
            detail=f"{service} error: {detail}",
            error_code="upstream_error"
        )

class GitHubApiError(UpstreamError):
    """GitHub GraphQL API error"""
    def __init__(self, detail: str, upstream_status: Optional[int] = None):
        self.upstream_status = upstream_status
        super().__init__(detail=detail, service="GitHub")

class CredentialStoreError(UpstreamError):
    """Credential storage error"""
    def __init__(self, detail: str):
        super().__init__(detail=detail, service="Credential store")

def classify_error(exception: Exception) -> tuple[int, str, str]:
    """
    Classify exception and return appropriate HTTP status code

    Args:
        exception: Exception to classify

    Returns:
        Tuple of (status_code, error_code, detail)
    """
    # User errors (400)
    if isinstance(exception, ValueError):
        return 400, "validation_error", str(exception)

    # Network errors talking to GitHub (502)
    if isinstance(exception, httpx.RequestError):
        return 502, "upstream_error", f"GitHub request failed: {exception}"

    # Default to 500
    return 500, "internal_error", f"Internal server error: {exception}"

def raise_http_exception(exception: Exception) -> None:
    """
    Convert exception to HTTPException with appropriate status code

    Args:
        exception: Exception to convert

    Raises:
        HTTPException: With appropriate status code
    """
    if isinstance(exception, ConnectorException):
        logger.error(f"Error [{exception.error_code}]: {exception.detail}")
        raise HTTPException(
            status_code=exception.status_code,
            detail=exception.detail
        )

    status_code, error_code, detail = classify_error(exception)

    logger.error(f"Error [{error_code}]: {detail}")

    raise HTTPException(status_code=status_code, detail=detail)
