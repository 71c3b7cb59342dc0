from __future__ import annotations

from fastapi import Header, HTTPException


async def require_user_id(x_user_id: str | None = Header(default=None, alias="X-User-Id")) -> str:
    user_id = (x_user_id or "").strip()
    if not user_id:
        raise HTTPException(status_code=401, detail="Missing user id")
    return user_id
