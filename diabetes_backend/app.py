# --- imports (top of diabetes_backend/app.py) ---
import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.exceptions import HTTPException as StarletteHTTPException

from diabetes_backend.auth.jwt import hash_password
from diabetes_backend.config import Settings, load_settings
from diabetes_backend.middleware.tracing import TracingMiddleware
from diabetes_backend.ratelimit import DiagnosisLimitMiddleware, limiter
from diabetes_backend.routes import (
    admin_routes,
    diagnoses_routes,
    diagnosis_routes,
    recs_routes,
    symptoms_routes,
    system_routes,
    users_routes,
)
from diabetes_backend.services.classifier import RiskClassifier, build_classifier
from diabetes_backend.services.store import DataStore, DataStoreError, DuplicateRecordError
from diabetes_backend.utils.exceptions import (
    error_body,
    handle_data_store_error,
    handle_duplicate_record,
    handle_http_exception,
    handle_unhandled_exception,
    handle_validation_error,
)
from diabetes_backend.utils.log import configure_logging

logger = logging.getLogger("diabetes")


async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    # Window length of the exceeded limit, e.g. 60 for "2/minute"
    try:
        retry_after = max(1, int(exc.limit.limit.get_expiry()))
    except AttributeError:
        retry_after = 60
    logger.info({
        "function": "rate_limit",
        "path": str(request.url.path),
        "client": get_remote_address(request),
    })
    return JSONResponse(
        status_code=429,
        headers={"Retry-After": str(retry_after)},
        content=error_body(429, "Too many requests. Please wait a bit and try again."),
    )


def create_app(
    store: DataStore,
    settings: Optional[Settings] = None,
    classifier: Optional[RiskClassifier] = None,
    close_store_on_shutdown: bool = False,
) -> FastAPI:
    """Assemble the HTTP layer around an already-built data store."""
    settings = settings or load_settings()
    configure_logging(settings.LOG_LEVEL)

    app = FastAPI(title="Diabetes Risk Screening Backend", version="0.1.0")
    app.state.settings = settings
    app.state.store = store
    app.state.classifier = classifier or build_classifier(settings.SCORING_STRATEGY)
    app.state.admin_password_hash = hash_password(settings.ADMIN_PASSWORD)

    # ---- rate limiting (slowapi) ----
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_handler)

    # ---- error envelope ----
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(DuplicateRecordError, handle_duplicate_record)
    app.add_exception_handler(DataStoreError, handle_data_store_error)
    app.add_exception_handler(Exception, handle_unhandled_exception)

    # ---- middleware ----
    app.add_middleware(DiagnosisLimitMiddleware)
    app.add_middleware(TracingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials="*" not in settings.CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ---- routers ----
    app.include_router(admin_routes.router)
    app.include_router(users_routes.router)
    app.include_router(symptoms_routes.router)
    app.include_router(symptoms_routes.legacy_router)
    app.include_router(diagnoses_routes.router)
    app.include_router(diagnoses_routes.user_symptoms_router)
    app.include_router(recs_routes.router)
    app.include_router(diagnosis_routes.router)
    app.include_router(system_routes.router)

    @app.on_event("startup")
    def _log_startup():
        logger.info({
            "function": "startup",
            "store": store.name,
            "strategy": app.state.classifier.strategy_name,
        })

    @app.on_event("shutdown")
    def _close_store():
        if close_store_on_shutdown:
            store.close()
            logger.info({"function": "shutdown", "store": store.name, "status": "closed"})

    return app
