import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException
import uvicorn

from config import get_settings
from database.init import Base, engine
import database.models  # noqa: F401  registers every table on Base.metadata
from logging_config import setup_logging
from responses.error import bad_request_error, error_for_status, internal_server_error
from routes import admin_routes, auth_routes, payment_routes
from routes.listing_routes import apartment_router, house_router, land_router

settings = get_settings()
setup_logging(settings.log_level, json_format=settings.log_format.lower() == "json")
logger = logging.getLogger(__name__)

API_NAME = "Real Estate API"
API_VERSION = "1.0.0"

Base.metadata.create_all(bind=engine)

app = FastAPI(title=API_NAME, version=API_VERSION, debug=settings.debug)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid value")
    return f"{location}: {message}" if location else message


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    message = _validation_message(exc)
    logger.info("Rejected %s %s: %s", request.method, request.url.path, message)
    return bad_request_error(message, error="validation_error")


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return error_for_status(exc.status_code, str(exc.detail))


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return internal_server_error(str(exc) or "Something went wrong")


app.include_router(auth_routes.router)
app.include_router(land_router)
app.include_router(house_router)
app.include_router(apartment_router)
app.include_router(payment_routes.router)
app.include_router(admin_routes.router)


@app.get("/")
def read_root():
    return {"name": API_NAME, "version": API_VERSION}


@app.get("/health")
def health():
    return {"status": "ok"}


if __name__ == "__main__":
    uvicorn.run("main:app", host=settings.app_host, port=settings.app_port, reload=settings.debug)
