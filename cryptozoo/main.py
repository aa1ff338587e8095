import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from cryptozoo.config import settings
from cryptozoo.routers import admin, auth, catalog, edit_requests, health, tool, users
from cryptozoo.domain.errors import (
    AuthenticationError, ConflictError, NotFoundError, PermissionDeniedError, RecordStoreError, ValidationError,
)
from cryptozoo.application.event_handlers import register_event_handlers

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


app = FastAPI(
    title="Crypto Zoo API",
    description="Catalog of cryptographic primitives and the relationships between them",
    version=settings.VERSION,
)

# Register domain event handlers on startup
@app.on_event("startup")
async def startup_event():
    configure_logging()
    register_event_handlers()
    logger.info(f"Crypto Zoo API starting ({settings.ENVIRONMENT})")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Domain error handlers
@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(ValidationError)
async def validation_error_handler(request: Request, exc: ValidationError):
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.exception_handler(ConflictError)
async def conflict_error_handler(request: Request, exc: ConflictError):
    return JSONResponse(status_code=409, content={"detail": str(exc)})


@app.exception_handler(AuthenticationError)
async def authentication_error_handler(request: Request, exc: AuthenticationError):
    return JSONResponse(status_code=401, content={"detail": str(exc)})


@app.exception_handler(PermissionDeniedError)
async def permission_denied_handler(request: Request, exc: PermissionDeniedError):
    return JSONResponse(status_code=403, content={"detail": str(exc)})


@app.exception_handler(RecordStoreError)
async def record_store_error_handler(request: Request, exc: RecordStoreError):
    logger.error(f"Record store failure on {request.url.path}: {exc}")
    return JSONResponse(status_code=502, content={"detail": str(exc)})

# Include routers
app.include_router(health.router, tags=["Health"])  # Health check endpoints first
app.include_router(auth.router, tags=["Auth"])
app.include_router(tool.router, tags=["Tool"])
app.include_router(edit_requests.router, tags=["Edit Requests"])
app.include_router(admin.router, tags=["Admin"])
app.include_router(users.router, tags=["Users"])
app.include_router(catalog.router, tags=["Catalog"])
