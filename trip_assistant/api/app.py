"""
FastAPI application factory.

``create_app`` wires the repository, AI Gateway and services onto
``app.state`` and installs error handlers that answer every failure with
``{"error": "<message>"}``.
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from trip_assistant import __version__
from trip_assistant.agents.gateway import AIGateway
from trip_assistant.api import chat, speech, trips, users
from trip_assistant.config import StorageBackend, TripAssistantConfig
from trip_assistant.config import config as default_config
from trip_assistant.data.dynamodb import DynamoDBClient
from trip_assistant.data.repository import (
    DynamoDBRepository,
    InMemoryRepository,
    TripRepository,
)
from trip_assistant.services.cache_service import (
    CacheService,
    DynamoDBCache,
    InMemoryCache,
)
from trip_assistant.services.conversation_service import ConversationService
from trip_assistant.services.speech_service import SpeechService
from trip_assistant.services.trip_service import TripService
from trip_assistant.utils.error_handling import TripAssistantError
from trip_assistant.utils.logging import get_logger

logger = get_logger(__name__)


def build_storage(settings: TripAssistantConfig) -> tuple[TripRepository, CacheService]:
    """Repository and vibe cache for the configured storage backend."""
    ttl = settings.system.vibe_cache_ttl
    if settings.system.storage_backend is StorageBackend.DYNAMODB:
        db = DynamoDBClient(
            settings.api.dynamodb_table_name,
            region=settings.api.aws_region,
            endpoint_url=settings.api.dynamodb_endpoint,
        )
        return DynamoDBRepository(db), DynamoDBCache(db, ttl=ttl)
    return InMemoryRepository(), InMemoryCache(ttl=ttl)


def _validation_message(exc: RequestValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(p) for p in error.get("loc", ()) if p != "body")
        parts.append(f"{location}: {error.get('msg')}" if location else error.get("msg"))
    return "Invalid request: " + "; ".join(parts)


def install_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(TripAssistantError)
    async def handle_trip_assistant_error(request: Request, exc: TripAssistantError):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc!s}")
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"error": _validation_message(exc)})

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_error(request: Request, exc: StarletteHTTPException):
        return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return JSONResponse(status_code=500, content={"error": "Internal server error"})


def create_app(
    repo: TripRepository | None = None,
    gateway: AIGateway | None = None,
    settings: TripAssistantConfig | None = None,
    speech_service: SpeechService | None = None,
    vibe_cache: CacheService | None = None,
) -> FastAPI:
    """
    Build the application.

    Args:
        repo: Repository to use (built from settings when omitted)
        gateway: AI Gateway to use (built from settings when omitted)
        settings: Service configuration (the global config when omitted)
        speech_service: Text-to-speech service (optional)
        vibe_cache: Cache for vibe suggestions (optional)
    """
    settings = settings or default_config
    if repo is None:
        repo, built_cache = build_storage(settings)
        vibe_cache = vibe_cache or built_cache
    gateway = gateway or AIGateway(settings)

    trip_service = TripService(
        repo,
        gateway,
        vibe_cache=vibe_cache,
        default_user_id=settings.system.default_user_id,
    )

    app = FastAPI(title="Trip Assistant", version=__version__)
    app.state.repo = repo
    app.state.gateway = gateway
    app.state.trip_service = trip_service
    app.state.conversation_service = ConversationService(trip_service, gateway)
    app.state.speech_service = speech_service or SpeechService(settings.api)
    app.state.storage_backend = settings.system.storage_backend.value

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.system.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    install_error_handlers(app)

    for module in (trips, chat, users, speech):
        app.include_router(module.router)

    @app.get("/api/health", tags=["health"])
    async def health():
        return {
            "status": "ok",
            "version": __version__,
            "storage": app.state.storage_backend,
        }

    logger.info(
        f"Trip Assistant app created (storage={app.state.storage_backend}, "
        f"environment={settings.system.environment})"
    )
    return app
