import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from starlette.exceptions import HTTPException

from smartauto.api.v1.api_router import api_router
from smartauto.core.config import settings
from smartauto.core.database import engine
from smartauto.core.startup import ensure_default_admin, ensure_tables

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables and seed the default admin on startup, release the pool on shutdown."""
    await ensure_tables()
    await ensure_default_admin()
    yield
    await engine.dispose()


app = FastAPI(
    title="SmartAuto API",
    description="Vehicle rental service: catalog, bookings and owner approval workflow",
    version="1.0.0",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)

app.include_router(api_router)


@app.get("/", summary="Service banner")
async def root():
    return {"msg": "SmartAutoApp"}


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error: method=%s path=%s", request.method, request.url.path)
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"message": "Internal server error"})


@app.exception_handler(HTTPException)
async def custom_http_exception_handler(request: Request, exc: HTTPException):
    return JSONResponse(status_code=exc.status_code, content={"message": exc.detail}, headers=exc.headers)


def _serializable_validation_errors(errors: list) -> list:
    """Convert validation error dicts to JSON-serializable form (e.g. ctx may contain Exception)."""
    out = []
    for e in errors:
        loc = [str(part) for part in e.get("loc", ())]
        # Drop the request section prefix ("body", "query", "path") from the field name
        field_parts = loc[1:] if loc and loc[0] in ("body", "query", "path", "header") else loc
        item = {"field": ".".join(field_parts), "loc": loc, "msg": e.get("msg"), "type": e.get("type")}
        if "ctx" in e and e["ctx"]:
            item["ctx"] = {k: str(v) for k, v in e["ctx"].items()}
        out.append(item)
    return out


def _validation_response(errors: list) -> JSONResponse:
    fields = {}
    for item in errors:
        fields.setdefault(item["field"], item["msg"])
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"message": "Validation error", "errors": errors, "fields": fields},
    )


@app.exception_handler(ValidationError)
async def pydantic_validation_exception_handler(request: Request, exc: ValidationError):
    return _validation_response(_serializable_validation_errors(exc.errors()))


@app.exception_handler(RequestValidationError)
async def request_validation_exception_handler(request: Request, exc: RequestValidationError):
    errors_serializable = _serializable_validation_errors(exc.errors())
    logger.info(
        "Validation error 400: method=%s path=%s errors=%s",
        request.method,
        request.url.path,
        errors_serializable,
    )
    return _validation_response(errors_serializable)
