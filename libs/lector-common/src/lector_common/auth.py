"""Bearer credential extraction for lector services.

Services tolerate unauthenticated callers: these helpers only pull the
credential out of the request, they never reject it. Turning a token into
a caller identity is the job of the service that consumes it.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request


def extract_bearer_token(authorization: str | None) -> str | None:
    """Extract token from Authorization: Bearer <token> header."""
    if not authorization:
        return None
    parts = authorization.split(" ", 1)
    if len(parts) == 2 and parts[0].lower() == "bearer":
        token = parts[1].strip()
        return token or None
    return None


async def optional_bearer_token(request: Request) -> str | None:
    """FastAPI dependency returning the bearer token, or None when absent."""
    return extract_bearer_token(request.headers.get("authorization"))


BearerToken = Annotated[str | None, Depends(optional_bearer_token)]
