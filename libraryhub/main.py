from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException

from libraryhub.core.config import Settings, settings as default_settings
from libraryhub.core.errors import LibraryError
from libraryhub.core.logging import get_logger, setup_logging
from libraryhub.db.session import build_engine, build_session_factory, init_db
from libraryhub.integrations.notifier import build_notifier
from libraryhub.scripts.seed import seed_defaults
from libraryhub.services.reminders import ReminderScheduler

# Import routers
from libraryhub.api.billing import router as billing_router
from libraryhub.api.books import router as books_router
from libraryhub.api.circulation import router as circulation_router
from libraryhub.api.dashboard import router as dashboard_router
from libraryhub.api.students import router as students_router
from libraryhub.api.subscriptions import router as subscriptions_router

log = get_logger("main")

def _message(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"message": message})

def _validation_message(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return "; ".join(parts) or "Invalid request"

def register_error_handlers(app: FastAPI) -> None:
    # Every failure leaves the API as {"message": ...}

    @app.exception_handler(LibraryError)
    async def library_error_handler(request: Request, exc: LibraryError):
        return _message(exc.status_code, exc.message)

    @app.exception_handler(HTTPException)
    async def http_error_handler(request: Request, exc: HTTPException):
        return _message(exc.status_code, str(exc.detail))

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return _message(400, _validation_message(exc))

    @app.exception_handler(IntegrityError)
    async def integrity_error_handler(request: Request, exc: IntegrityError):
        # Unique/FK/check violations that slipped past the explicit checks
        log.warning("integrity error on %s %s: %s", request.method, request.url.path, exc.orig)
        return _message(400, "Integrity error")

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        log.exception("unhandled error on %s %s", request.method, request.url.path)
        return _message(500, "Internal server error")

def create_app(config: Settings | None = None) -> FastAPI:
    config = config or default_settings
    setup_logging()

    engine = build_engine(config.database_url, echo=config.db_echo)
    init_db(engine)
    session_factory = build_session_factory(engine)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if config.seed_on_startup:
            db = session_factory()
            try:
                seeded = seed_defaults(db)
            finally:
                db.close()
            if any(seeded.values()):
                log.info("seeded %d plans, %d books", seeded["plans"], seeded["books"])

        scheduler = None
        if config.reminders_enabled:
            scheduler = ReminderScheduler(session_factory, build_notifier(config), config)
            scheduler.start()

        yield

        if scheduler:
            await scheduler.stop()
        engine.dispose()

    app = FastAPI(title=config.app_name, lifespan=lifespan)
    app.state.settings = config
    app.state.engine = engine
    app.state.session_factory = session_factory

    @app.get("/health")
    def health():
        return {"status" : "ok", "env" : config.app_env}

    register_error_handlers(app)

    app.include_router(students_router)
    app.include_router(books_router)
    app.include_router(subscriptions_router)
    app.include_router(circulation_router)
    app.include_router(billing_router)
    app.include_router(dashboard_router)

    return app

app = create_app()
