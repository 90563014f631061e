from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from api.router import api_router
from api.dependencies.rate_limits import setup_rate_limiter, get_limiter
from infrastructure.logging import bind_request_context, get_module_logger
from infrastructure.services import get_settings
from server.lifespan import lifespan

logger = get_module_logger()
settings = get_settings()


handler = FastAPI(title="Ekklesia Messaging", lifespan=lifespan)
setup_rate_limiter(handler)
limiter = get_limiter()


handler.add_middleware(
    CORSMiddleware,
    allow_origins=settings.server.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@handler.middleware("http")
async def request_context_middleware(request: Request, call_next):
    with bind_request_context(
        correlation_id=request.headers.get("X-Correlation-ID"),
        account_id=request.headers.get(settings.server.ACCOUNT_HEADER),
        request_path=request.url.path,
        request_method=request.method,
    ):
        return await call_next(request)


handler.include_router(api_router)
