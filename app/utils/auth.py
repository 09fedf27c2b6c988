"""Caller identity for owner-scoped routes.

Authentication itself happens upstream (gateway or session middleware); the
authenticated user id reaches this service in the ``X-User-Id`` header.
"""
from typing import Optional

from fastapi import Header, HTTPException


async def get_current_user_id(
    x_user_id: Optional[str] = Header(None, alias="X-User-Id"),
) -> str:
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(status_code=401, detail="Unauthorized")
    return x_user_id.strip()
