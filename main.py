import logging
from contextlib import asynccontextmanager
from datetime import timedelta

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.core.config import Settings, settings as default_settings
from app.core.database import Database
from app.core.errors import AppError, ValidationError
from app.core.hashing import SecretHasher
from app.core.logging_config import setup_logging
from app.core.middleware import RequestContextMiddleware
from app.core.rate_limit import RateLimiter
from app.core.security import SessionTokenManager
from app.domain.parents.services import ParentDirectory
from app.domain.verification.services import ChallengeIssuer, ChallengeVerifier, CodeSender
from app.domain.verification.store import CodeStore
from app.services.mailer import VerificationMailer
from app.web.routes import api, health

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables on startup and release connections on shutdown."""
    database: Database = app.state.database
    await database.create_all()
    yield
    await database.dispose()


def create_app(
    settings: Settings | None = None,
    database: Database | None = None,
    mailer: CodeSender | None = None,
) -> FastAPI:
    """Build the application and wire its process-wide components."""
    settings = settings or default_settings
    database = database or Database(settings.DATABASE_URL, echo=settings.DEBUG)

    app = FastAPI(
        title=settings.APP_NAME,
        description="Parent verification and session API",
        version="1.0.0",
        lifespan=lifespan,
    )

    hasher = SecretHasher(rounds=settings.CODE_HASH_ROUNDS)
    token_manager = SessionTokenManager(
        settings.SECRET_KEY,
        ttl=timedelta(minutes=settings.SESSION_TTL_MINUTES),
    )
    store = CodeStore(database)
    directory = ParentDirectory(database)

    app.state.settings = settings
    app.state.database = database
    app.state.token_manager = token_manager
    app.state.rate_limiter = RateLimiter(
        settings.RATE_LIMIT_MAX,
        settings.RATE_LIMIT_WINDOW_SECONDS,
    )
    app.state.challenge_issuer = ChallengeIssuer(
        store,
        directory,
        hasher,
        mailer or VerificationMailer(settings),
        code_ttl=timedelta(minutes=settings.CODE_TTL_MINUTES),
    )
    app.state.challenge_verifier = ChallengeVerifier(store, directory, hasher, token_manager)

    app.add_middleware(RequestContextMiddleware)

    app.include_router(health.router, tags=["health"])
    app.include_router(api.router, prefix="/api")

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
            logger.error(
                "Request failed for %s %s [request_id=%s]",
                request.method,
                request.url.path,
                getattr(request.state, "request_id", "-"),
                exc_info=exc,
            )
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "error": exc.message},
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        errors = [
            {"field": ".".join(str(part) for part in error.get("loc", ())[1:]), "message": error.get("msg")}
            for error in exc.errors()
        ]
        invalid = ValidationError()
        return JSONResponse(
            status_code=invalid.status_code,
            content=jsonable_encoder({"success": False, "error": invalid.message, "errors": errors}),
        )

    return app


setup_logging()

app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True, proxy_headers=True)
