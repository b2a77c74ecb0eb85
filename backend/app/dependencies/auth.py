"""
Authentication dependency for route protection.
"""
import logging
import secrets
from typing import Annotated, Optional

from fastapi import Depends, Header, Request

from app.config import Settings, get_settings
from app.core.exceptions import UnauthorizedError

logger = logging.getLogger(__name__)


async def require_token(
    request: Request,
    settings: Annotated[Settings, Depends(get_settings)],
    authorization: Annotated[
        Optional[str], Header(description="Bearer <api token>")
    ] = None,
) -> None:
    """
    Dependency that gates a route behind the shared static bearer token.

    The header must equal ``Bearer <api_token>`` exactly. There is no
    per-user identity or expiry.

    Raises:
        UnauthorizedError: If the header is absent or does not match
    """
    expected = f"Bearer {settings.api_token}"

    if authorization is None or not secrets.compare_digest(
        authorization.encode(), expected.encode()
    ):
        client = request.client.host if request.client else "unknown"
        logger.warning(
            "Rejected %s %s from %s: bad or missing token",
            request.method,
            request.url.path,
            client,
        )
        raise UnauthorizedError()
