"""Request rate limiting.

Authenticated calls are limited per account so that several members behind
one church network address do not share a bucket; anonymous calls fall back
to the client address.
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded

from infrastructure.services import get_settings


def account_key_func(request: Request) -> str:
    account_id = request.headers.get(get_settings().server.ACCOUNT_HEADER, "").strip()
    if account_id:
        return f"account:{account_id}"
    return get_remote_address(request)


limiter = Limiter(
    key_func=account_key_func,
)


async def rate_limit_handler(_request: Request, exc: Exception):
    """Return a 429 with a JSON error body when a limit is exceeded."""
    if isinstance(exc, RateLimitExceeded):
        return JSONResponse(
            status_code=429,
            content={"message": "Rate limit exceeded"},
        )


def setup_rate_limiter(app: FastAPI):
    """Attach the limiter and its 429 handler to the application."""
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_handler)


def get_limiter():
    return limiter
