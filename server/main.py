import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError
from starlette.exceptions import HTTPException as StarletteHTTPException

from config.config import SECRET_KEY, FRONTEND_URL, LOG_LEVEL
from database.DB import Database
from helpers.Errors import AppError, InternalError, ValidationError
from routes import AuthRouter, EventRouter, RegistrationRouter

''' The backend API Endpoints setup '''

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)


def _error_response(exc: AppError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"success": False, "error": exc.message})


def _validation_message(exc: RequestValidationError) -> str:
    """Message of the first violated constraint, prefixed with its field path."""
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    error = errors[0]
    field = ".".join(str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path"))
    message = error.get("msg", "Invalid value").removeprefix("Value error, ")
    return f"{field}: {message}" if field else message


def create_app(database: Database = None) -> FastAPI:
    if not SECRET_KEY:
        raise ValueError("SECRET_KEY environment variable not set!")

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup: open the store handle and make sure its indexes exist
        db = database or Database()
        db.connect()
        await db.ensure_indexes()
        app.state.db = db
        logger.info("Database connected successfully")

        yield

        logger.info("Application shutting down")
        db.close()

    app = FastAPI(title="NGO Volunteer Hub API", lifespan=lifespan)

    allowed_origins = [FRONTEND_URL]
    if FRONTEND_URL != "http://localhost:3000":
        allowed_origins.append("http://localhost:3000")
    logger.info("Allowed CORS origins: %s", allowed_origins)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        return _error_response(exc)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return _error_response(ValidationError(_validation_message(exc)))

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(status_code=exc.status_code, content={"success": False, "error": exc.detail})

    @app.exception_handler(PyMongoError)
    async def store_error_handler(request: Request, exc: PyMongoError):
        logger.exception("Database error on %s %s", request.method, request.url.path)
        return _error_response(InternalError("Database error"))

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return _error_response(InternalError("Internal server error"))

    @app.get('/api/health')
    async def health_check():
        """Simple health check endpoint"""
        return JSONResponse(content={"success": True, "message": "NGO Volunteer Hub API is running!"})

    # Include routers
    app.include_router(AuthRouter.router, prefix="/api/auth", tags=["Authentication"])
    app.include_router(EventRouter.router, prefix="/api/events", tags=["Events"])
    app.include_router(RegistrationRouter.router, prefix="/api/registrations", tags=["Registrations"])

    return app


app = create_app()
