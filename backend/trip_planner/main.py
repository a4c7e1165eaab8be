"""Travel itinerary planner - main application"""
import time
import uuid
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from trip_planner import __version__
from trip_planner.agents import ActivityImageEnricher, TripGenerator
from trip_planner.api.routes import chat_router, trips_router
from trip_planner.config import Settings, get_settings
from trip_planner.logging_config import bind_request_context, get_logger, setup_logging
from trip_planner.services import (
    ConversationOrchestrator,
    InMemoryTripStore,
    RoutingPolicy,
    TripService,
    TripStore,
    build_routing_policy,
)

logger = get_logger(__name__)


def _validation_message(error: Dict[str, Any]) -> str:
    ctx_error = (error.get("ctx") or {}).get("error")
    if isinstance(ctx_error, Exception):
        return str(ctx_error)
    loc = [str(part) for part in error.get("loc", ()) if part != "body"]
    return f"{'.'.join(loc)}: {error['msg']}" if loc else error["msg"]


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    message = _validation_message(errors[0]) if errors else "Invalid request"
    logger.info(
        "request_validation_failed",
        path=request.url.path,
        error=message,
        error_count=len(errors),
    )
    return JSONResponse(
        status_code=400,
        content={"success": False, "error": message},
    )


async def logging_middleware(request: Request, call_next):
    """Request/response logging"""
    request_id = str(uuid.uuid4())[:8]
    start_time = time.time()

    bind_request_context(request_id=request_id)

    logger.debug(
        "request_started",
        method=request.method,
        path=request.url.path,
        query_params=str(request.query_params),
        client_host=request.client.host if request.client else None,
    )

    try:
        response = await call_next(request)
    except Exception as e:
        logger.error(
            "request_failed",
            method=request.method,
            path=request.url.path,
            error=str(e),
            error_type=type(e).__name__,
            duration_ms=round((time.time() - start_time) * 1000, 2),
        )
        raise

    logger.info(
        "request_completed",
        method=request.method,
        path=request.url.path,
        status_code=response.status_code,
        duration_ms=round((time.time() - start_time) * 1000, 2),
    )
    return response


def create_app(
    settings: Optional[Settings] = None,
    store: Optional[TripStore] = None,
    generator: Optional[TripGenerator] = None,
    enricher: Optional[ActivityImageEnricher] = None,
    routing_policy: Optional[RoutingPolicy] = None,
) -> FastAPI:
    """Build the application with explicitly constructed collaborators"""
    settings = settings or get_settings()
    setup_logging(settings)

    store = store or InMemoryTripStore()
    generator = generator or TripGenerator(settings)
    enricher = enricher or ActivityImageEnricher(settings)
    routing_policy = routing_policy or build_routing_policy(settings, generator)
    trip_service = TripService(store, generator, enricher)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(
            "application_startup",
            env=settings.app_env,
            debug=settings.debug,
            log_level=settings.log_level,
            openai_model=settings.openai_model,
            routing_policy=settings.routing_policy,
        )
        yield
        logger.info("application_shutdown")

    app = FastAPI(
        title="Trip Planner",
        description="Generates multi-day travel itineraries from free-text requests.",
        version=__version__,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.store = store
    app.state.trip_service = trip_service
    app.state.orchestrator = ConversationOrchestrator(store, generator, trip_service)
    app.state.routing_policy = routing_policy

    app.middleware("http")(logging_middleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    app.include_router(trips_router)
    app.include_router(chat_router)

    @app.get("/")
    async def root():
        """Health check"""
        return {
            "message": "Trip Planner API",
            "version": __version__,
            "status": "running",
        }

    @app.get("/health")
    async def health():
        return {"status": "healthy"}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "trip_planner.main:app",
        host="0.0.0.0",
        port=8000,
        reload=get_settings().debug,
    )
