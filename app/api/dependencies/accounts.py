"""Caller identity for API routes.

Authentication happens upstream; the gateway forwards the authenticated
account id in a header (``ACCOUNT_HEADER``, default ``X-Account-Id``).
"""

from typing import Annotated

from fastapi import Depends, HTTPException, Request

from infrastructure.services import SettingsDep


def get_current_account_id(request: Request, settings: SettingsDep) -> str:
    """Return the caller's account id or reject the request with 401."""
    account_id = request.headers.get(settings.server.ACCOUNT_HEADER, "").strip()
    if not account_id:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return account_id


CurrentAccountDep = Annotated[str, Depends(get_current_account_id)]
