"""FastAPI application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import DBAPIError, SQLAlchemyError

from policyportal.api.v1 import auth, families, policies, policy_requests, users
from policyportal.core.config import settings
from policyportal.core.errors import PortalError
from policyportal.core.logging import get_logger, setup_logging

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle hooks."""
    setup_logging("DEBUG" if settings.APP_ENV == "development" else "INFO")
    startup_logger = get_logger("startup")
    startup_logger.info(
        "Application starting",
        env=settings.APP_ENV,
        admin_accounts=len(settings.ADMIN_ACCOUNTS),
    )
    yield
    startup_logger.info("Application shutting down")


app = FastAPI(
    title="Family Policy Portal API",
    description="Family insurance policy portal with an admin approval workflow",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _public_details(exc: Exception) -> str:
    """Error text safe to return; never the SQL statement or its parameters."""
    if isinstance(exc, DBAPIError) and exc.orig is not None:
        return str(exc.orig)
    if isinstance(exc, SQLAlchemyError):
        return type(exc).__name__
    return str(exc)


@app.exception_handler(PortalError)
async def portal_error_handler(request: Request, exc: PortalError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("Request failed", path=request.url.path, error=exc.message, details=exc.details)
    return JSONResponse(status_code=exc.status_code, content=jsonable_encoder(exc.to_dict()))


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = [
        {"field": ".".join(str(part) for part in err["loc"][1:]), "message": err["msg"]}
        for err in exc.errors()
    ]
    logger.info("Request rejected by validation", path=request.url.path, errors=details)
    return JSONResponse(
        status_code=400,
        content={"error": "Missing required fields", "details": details},
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error", path=request.url.path)
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error", "details": _public_details(exc)},
    )


FUNCTIONS_PREFIX = "/functions"
app.include_router(auth.router)
app.include_router(families.router, prefix=FUNCTIONS_PREFIX)
app.include_router(policies.router, prefix=FUNCTIONS_PREFIX)
app.include_router(policy_requests.router, prefix=FUNCTIONS_PREFIX)
app.include_router(users.router, prefix=FUNCTIONS_PREFIX)


@app.get("/health", tags=["Health"])
async def health_check() -> dict[str, str]:
    """Public health-check endpoint."""
    return {"status": "ok", "env": settings.APP_ENV}
