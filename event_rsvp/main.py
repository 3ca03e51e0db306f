import asyncio
import contextlib
import logging
import traceback
from contextlib import asynccontextmanager

import httpx
import sentry_sdk
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.starlette import StarletteIntegration
from starlette.exceptions import HTTPException as StarletteHTTPException

from event_rsvp.config.logging import setup_logging
from event_rsvp.config.settings import settings
from event_rsvp.errors import EventRSVPError, EventValidationError
from event_rsvp.invitations.routers import router as invitations_router
from event_rsvp.routers.healthz.router import router as healthz_router
from event_rsvp.routers.stats.router import router as stats_router
from event_rsvp.services import Services, build_services
from event_rsvp.webhooks.router import router as webhooks_router

logger = logging.getLogger(__name__)


async def validate_gateway(services: Services) -> None:
    if not services.gateway.is_ready():
        logger.warning("WhatsApp gateway is not configured; invitations cannot be sent")
        return
    try:
        await services.gateway.validate_connection()
    except (httpx.HTTPError, ValueError) as e:
        logger.error(f"WhatsApp gateway validation failed: {e}")


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    services: Services = app.state.services
    await validate_gateway(services)

    consumer = asyncio.create_task(services.dispatcher.consume(services.gateway.inbound))
    yield

    services.dispatcher.throttle.stop_event.set()
    consumer.cancel()
    with contextlib.suppress(asyncio.CancelledError):
        await consumer


if settings.SENTRY_DSN:
    sentry_sdk.init(
        dsn=settings.SENTRY_DSN,
        environment=settings.ENVIRONMENT,
        traces_sample_rate=settings.SENTRY_TRACES_SAMPLE_RATE,
        profiles_sample_rate=settings.SENTRY_PROFILES_SAMPLE_RATE,
        integrations=[
            StarletteIntegration(transaction_style="endpoint"),
            FastApiIntegration(transaction_style="endpoint"),
        ],
        send_default_pii=False,
    )

app = FastAPI(
    title="Event RSVP API",
    description="Send event invitations over WhatsApp and collect RSVPs from the replies",
    version="0.1.0",
    lifespan=lifespan,
)
app.state.services = build_services(settings)

# CORS middleware
app.add_middleware(
    CORSMiddleware,  # type: ignore[arg-type]
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Error envelopes


def error_response(status_code: int, message: str, **extra) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "message": message, **extra})


@app.exception_handler(EventRSVPError)
async def event_rsvp_error_handler(request: Request, exc: EventRSVPError) -> JSONResponse:
    if isinstance(exc, EventValidationError):
        return error_response(exc.status_code, exc.message, errors=exc.errors)
    return error_response(exc.status_code, exc.message)


@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}" for error in exc.errors()]
    return error_response(400, "Invalid request", errors=errors)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = "Route not found" if exc.status_code == 404 else str(exc.detail)
    return error_response(exc.status_code, message)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
    if settings.debug:
        return error_response(500, "Internal Server Error", stack="".join(traceback.format_exception(exc)))
    return error_response(500, "Internal Server Error")


# Include routers
app.include_router(healthz_router, prefix="/healthz", tags=["Healthz"])
app.include_router(invitations_router, prefix=settings.api_prefix, tags=["Events"])
app.include_router(webhooks_router, prefix=settings.api_prefix, tags=["Webhook"])
app.include_router(stats_router, prefix=settings.api_prefix, tags=["Stats"])


@app.get("/", tags=["Root"])
async def root():
    return {
        "success": True,
        "message": f"Welcome to {settings.app_name}",
        "version": "0.1.0",
        "endpoints": {
            "health": "/healthz/",
            "events": f"{settings.api_prefix}/events",
            "webhook": f"{settings.api_prefix}/webhook",
        },
    }
