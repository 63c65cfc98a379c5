"""
Church Review Workflow - FastAPI application

Builds one transition registry and state machine per process and serves
the review workflow under /api/v1.
"""

from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config.settings import settings
from .api.routes import api_router
from .api.middleware import CorrelationIdMiddleware, register_error_handlers
from .engine.registry import TransitionRegistry
from .engine.state_machine import WorkflowStateMachine
from .repositories.church_repo import ChurchRepository
from .repositories.audit_repo import AuditRepository
from .repositories.mongo_client import create_indexes, close_connection, health_check
from .services.church_review_service import ChurchReviewService
from .services.notification_service import NotificationService
from .utils.logger import setup_logging, get_logger

setup_logging()
logger = get_logger(__name__)

VERSION = "1.0.0"


def build_review_service(registry: Optional[TransitionRegistry] = None) -> ChurchReviewService:
    """Wire the MongoDB-backed service around a single registry"""
    church_repo = ChurchRepository()
    audit_repo = AuditRepository()
    state_machine = WorkflowStateMachine(
        registry=registry or TransitionRegistry.default(),
        store=church_repo,
        audit_sink=audit_repo,
    )
    return ChurchReviewService(
        state_machine=state_machine,
        church_repo=church_repo,
        audit_repo=audit_repo,
        notifier=NotificationService(),
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    An injected review service is used as is. Otherwise the Mongo-backed one
    is built and its indexes are ensured; index errors are logged, not fatal.
    """
    if getattr(app.state, "review_service", None) is None:
        logger.info(f"Connecting review workflow to MongoDB database {settings.mongo_db}")
        app.state.review_service = build_review_service()
        try:
            await create_indexes()
        except Exception as e:
            logger.error(f"Index creation failed, continuing without: {e}")

    rules = app.state.review_service.state_machine.registry.rules
    logger.info(f"Church review workflow ready ({len(rules)} transition rules)")

    yield

    await close_connection()
    logger.info("Church review workflow stopped")


def create_app(review_service: Optional[ChurchReviewService] = None) -> FastAPI:
    """
    Application factory

    Args:
        review_service: Pre-built service (tests pass one wired to fakes)
    """
    docs = settings.debug
    application = FastAPI(
        title="Church Review Workflow",
        description="Review and publication workflow for church directory profiles",
        version=VERSION,
        lifespan=lifespan,
        docs_url="/api/docs" if docs else None,
        redoc_url="/api/redoc" if docs else None,
        openapi_url="/api/openapi.json" if docs else None,
    )
    application.state.review_service = review_service

    _add_middleware(application)
    register_error_handlers(application)
    application.include_router(api_router, prefix="/api/v1")
    _add_health_route(application)

    return application


def _add_middleware(app: FastAPI) -> None:
    # Browsers reject credentials with a wildcard origin
    wildcard = settings.cors_origins.strip() == "*"
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if wildcard else settings.cors_origins_list,
        allow_credentials=not wildcard,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
        expose_headers=["X-Correlation-Id"],
    )
    app.add_middleware(CorrelationIdMiddleware)


def _add_health_route(app: FastAPI) -> None:
    @app.get("/health", tags=["Health"])
    async def health():
        mongo = await health_check()
        return {
            "status": "healthy" if mongo.get("status") == "healthy" else "degraded",
            "version": VERSION,
            "environment": settings.environment,
            "mongo": mongo,
        }


app = create_app()
