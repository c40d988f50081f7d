"""Bearer token check guarding the schema inspection and DDL endpoints.

Every /api route samples live source data through the configured engine, so
none of them is reachable without the shared API_AUTH_TOKEN.
"""

from __future__ import annotations

import os
import secrets

from fastapi import Header, HTTPException

_BEARER_PREFIX = "bearer "


async def require_bearer_token(authorization: str | None = Header(default=None)) -> None:
    """Route dependency: reject callers before any catalog or sampling query runs.

    503 when the server was started without API_AUTH_TOKEN, 401 when the
    Authorization header is not "Bearer <API_AUTH_TOKEN>". The scheme is
    matched case-insensitively and the token in constant time.
    """
    token = os.environ.get("API_AUTH_TOKEN")
    if not token:
        raise HTTPException(
            status_code=503,
            detail="Server configuration error: API_AUTH_TOKEN not set",
        )
    header = (authorization or "").strip()
    if not header.lower().startswith(_BEARER_PREFIX):
        raise HTTPException(status_code=401, detail="Unauthorized")
    supplied = header[len(_BEARER_PREFIX):].strip()
    if not secrets.compare_digest(supplied.encode(), token.encode()):
        raise HTTPException(status_code=401, detail="Unauthorized")
