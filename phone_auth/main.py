import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI

# Load environment variables as early as possible
load_dotenv()

from .core.config import Settings, get_settings
from .application.ports.audit_logger import AuditLogger
from .application.ports.identity_provider import IdentityProvider
from .application.ports.otp_provider import OTPProvider
from .application.services.verification_service import VerificationService
from .exceptions import register_exception_handlers
from .infrastructure.audit.std_logger import StdAuditLogger
from .middleware import ErrorHandlingMiddleware, LoggingMiddleware
from .routers import auth_router
from .schemas import HealthResponse

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
    logging.basicConfig(level=level, format=settings.LOG_FORMAT)
    # basicConfig is a no-op once the root logger has handlers (uvicorn, pytest)
    logging.getLogger("phone_auth").setLevel(level)


def create_app(
    settings: Optional[Settings] = None,
    otp_provider: Optional[OTPProvider] = None,
    identity_provider: Optional[IdentityProvider] = None,
    audit_logger: Optional[AuditLogger] = None,
) -> FastAPI:
    """Build the API. Providers that are not passed in are created from settings at startup."""
    settings = settings or get_settings()
    configure_logging(settings)
    audit_logger = audit_logger or StdAuditLogger()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"Starting {settings.APP_NAME}...")
        # Only the Ding client built here is closed on shutdown; injected providers belong to the caller
        owned_ding = None
        if getattr(app.state, "verification_service", None) is None:
            from .infrastructure.identity.firebase_provider import FirebaseIdentityProvider, init_firebase_app
            from .infrastructure.otp.ding_provider import DingOTPProvider

            otp = otp_provider
            if otp is None:
                otp = owned_ding = DingOTPProvider(settings.ding_config())
            identity = identity_provider or FirebaseIdentityProvider(init_firebase_app(settings))
            app.state.verification_service = VerificationService(
                otp_provider=otp,
                identity_provider=identity,
                audit_logger=audit_logger,
            )
        yield
        logger.info(f"Shutting down {settings.APP_NAME}...")
        if owned_ding is not None:
            await owned_ding.aclose()

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        debug=settings.DEBUG,
        lifespan=lifespan,
        docs_url=("/docs" if settings.DOCS_ENABLED else None),
        redoc_url=("/redoc" if settings.DOCS_ENABLED else None),
        openapi_url=("/openapi.json" if settings.DOCS_ENABLED else None),
    )
    app.state.settings = settings
    app.state.verification_service = None
    if otp_provider is not None and identity_provider is not None:
        app.state.verification_service = VerificationService(
            otp_provider=otp_provider,
            identity_provider=identity_provider,
            audit_logger=audit_logger,
        )

    register_exception_handlers(app)

    app.add_middleware(ErrorHandlingMiddleware, debug=settings.DEBUG)
    app.add_middleware(LoggingMiddleware)

    app.include_router(auth_router.router)

    @app.get("/health", response_model=HealthResponse)
    def health_check():
        return {
            "status": "healthy" if app.state.verification_service is not None else "starting",
            "service": settings.APP_NAME,
            "version": settings.APP_VERSION,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    return app


def run() -> None:
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        create_app(settings),
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    run()
