# vapi_dialer/main.py
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from vapi_dialer.config import get_settings
from vapi_dialer.logging_config import configure_logging
from vapi_dialer.routers import assistants, calls, dashboard
from vapi_dialer.services.vapi_client import VapiClient, get_vapi_client

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    yield


app = FastAPI(title=settings.APP_NAME, lifespan=lifespan)

# Routers
app.include_router(dashboard.router)
app.include_router(assistants.router)
app.include_router(calls.router)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """
    Keep the {success, error} shape for bad bodies too.
    Unparseable or missing JSON is a 500, a well-formed body with bad
    fields a 400.
    """
    errors = exc.errors()
    if any(err.get("type") == "json_invalid" for err in errors):
        return JSONResponse(
            status_code=500,
            content={"success": False, "error": "Invalid JSON in request body"},
        )
    if any(
        err.get("type") == "missing" and tuple(err.get("loc", ())) == ("body",)
        for err in errors
    ):
        return JSONResponse(
            status_code=500,
            content={"success": False, "error": "Request body is required"},
        )
    message = "; ".join(
        f"{'.'.join(str(p) for p in err.get('loc', ()) if p != 'body')}: {err.get('msg')}"
        for err in errors
    )
    return JSONResponse(
        status_code=400,
        content={"success": False, "error": message or "Invalid request body"},
    )


@app.get("/health")
def health_check(vapi_client: VapiClient = Depends(get_vapi_client)):
    missing = vapi_client.missing_config()
    gateway_status = "configured" if not missing else "missing"

    return {
        "status": "ok" if gateway_status == "configured" else "degraded",
        "app": settings.APP_NAME,
        "env": settings.ENV,
        "gateway": gateway_status,
    }
