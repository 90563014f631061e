from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from api.dependencies.rate_limits import get_limiter
from infrastructure.services import DatabaseDep, DispatcherDep, SettingsDep

router = APIRouter(tags=["System"])
limiter = get_limiter()


@router.get("/version")
@limiter.limit("50/minute")
def get_version(request: Request, settings: SettingsDep):  # pylint: disable=unused-argument
    """Get the version of the application."""
    return {"version": settings.GIT_SHA}


@router.get("/health")
@limiter.limit("50/minute")
def get_health(
    request: Request,  # pylint: disable=unused-argument
    database: DatabaseDep,
    dispatcher: DispatcherDep,
):
    """Healthcheck endpoint.

    Returns 503 when the database cannot be reached. Unconfigured delivery
    channels are reported but do not fail the check.
    """
    database_ok = database.ping()
    body = {
        "status": "ok" if database_ok else "degraded",
        "database": "ok" if database_ok else "unavailable",
        "channels": {
            channel.value: provider.is_configured()
            for channel, provider in dispatcher.channels.items()
        },
    }
    return JSONResponse(status_code=200 if database_ok else 503, content=body)
