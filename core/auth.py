"""
API authentication using a shared Bearer token.

Guards the endpoints that write match data. Read endpoints are public.
"""

from fastapi import HTTPException, Security
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from core.settings import settings

security = HTTPBearer()


def verify_api_token(
    credentials: HTTPAuthorizationCredentials = Security(security),
) -> str:
    """
    Verify the bearer token matches the configured API token.

    Raises:
        HTTPException: If the server has no token configured or the token is invalid
    """
    if settings.api_token is None:
        raise HTTPException(
            status_code=500,
            detail="Server misconfigured: API_TOKEN not set",
        )

    if credentials.credentials != settings.api_token.get_secret_value():
        raise HTTPException(
            status_code=401,
            detail="Invalid authentication token",
        )

    return credentials.credentials
