"""Best-effort caller identity from bearer session tokens.

Tokens are HS256 JWTs signed with the project's JWT secret (the format
Supabase auth issues). Resolution never fails a request: anything that
does not verify is treated as an anonymous caller.
"""

from __future__ import annotations

import jwt

from lector_common.logging import get_logger

log = get_logger(__name__)


class CallerResolver:
    """Turns a bearer token into a caller id (the ``sub`` claim) or None."""

    def __init__(self, jwt_secret: str, audience: str = "authenticated") -> None:
        self._secret = jwt_secret
        self._audience = audience

    @property
    def enabled(self) -> bool:
        return bool(self._secret)

    def resolve(self, token: str | None) -> str | None:
        if not token or not self._secret:
            return None

        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=["HS256"],
                audience=self._audience or None,
                options={
                    "verify_exp": True,
                    "verify_aud": bool(self._audience),
                },
            )
        except jwt.ExpiredSignatureError:
            log.debug("caller_token_expired")
            return None
        except jwt.InvalidTokenError as e:
            log.debug("caller_token_rejected", error=str(e))
            return None

        sub = payload.get("sub")
        if not sub:
            log.warning("caller_token_missing_sub")
            return None
        return str(sub)
