import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from app.core.config import settings, require_jwt_secret
from app.core.errors import AppError
from app.core.security import AccessTokenConfig, AccessTokenIssuer
from app.routes.audit import router as audit_router
from app.routes.auth import router as auth_router
from app.routes.comments import router as comments_router
from app.routes.invites import router as invites_router
from app.routes.labels import router as labels_router
from app.routes.orgs import router as orgs_router
from app.routes.projects import router as projects_router
from app.routes.tasks import router as tasks_router
from app.services.refresh_tokens import RefreshTokenConfig, RefreshTokenService

logging.basicConfig(level=settings.LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

require_jwt_secret()

app = FastAPI(title="Kanban Task Manager")

# Secrets are read once here and handed to the issuers; nothing reads env at request time.
app.state.access_tokens = AccessTokenIssuer(AccessTokenConfig.from_settings(settings))
app.state.refresh_tokens = RefreshTokenService(RefreshTokenConfig.from_settings(settings))

logger.info(
    "Startup config: ENV=%s access_ttl_min=%s refresh_ttl_days=%s refresh_cookie_path=%s",
    settings.ENV,
    settings.ACCESS_TOKEN_EXPIRE_MINUTES,
    settings.REFRESH_TOKEN_EXPIRE_DAYS,
    app.state.refresh_tokens.config.cookie_path,
)


def _error_body(message: str, details: dict | None = None) -> dict:
    payload: dict = {"error": message}
    if details:
        payload["details"] = details
    return payload


@app.exception_handler(AppError)
def app_error_handler(request: Request, exc: AppError):  # noqa: ARG001
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(exc.message, exc.details),
        headers=exc.headers,
    )


@app.exception_handler(HTTPException)
def http_exception_handler(request: Request, exc: HTTPException):  # noqa: ARG001
    detail = exc.detail
    if isinstance(detail, str):
        message = detail
    else:
        message = str(detail) if detail is not None else "Request failed"
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(message),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
def validation_exception_handler(request: Request, exc: RequestValidationError):  # noqa: ARG001
    return JSONResponse(
        status_code=400,
        content=_error_body("Invalid input", {"errors": jsonable_encoder(exc.errors())}),
    )


@app.exception_handler(Exception)
def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content=_error_body("Internal server error"))


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth_router)
app.include_router(orgs_router)
app.include_router(invites_router)
app.include_router(projects_router)
app.include_router(tasks_router)
app.include_router(labels_router)
app.include_router(comments_router)
app.include_router(audit_router)


@app.get("/health")
def health_check():
    return {"status": "ok"}
