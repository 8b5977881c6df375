# persons/api/main.py
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from persons.api.errors import register_error_handlers
from persons.api.routes.persons import generate_person_router
from persons.config import Settings
from persons.db.connect import connect, make_session_factory
from persons.logging import get_logger

logger = get_logger(__file__)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the API for ``settings`` (default: read from the environment).

    The database is connected and the table created here, before any server
    is bound; a :class:`~persons.db.models.StorageInitError` propagates to
    the caller so a broken store never starts serving.
    """

    settings = settings or Settings.from_env()
    engine = connect(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        engine.dispose()
        logger.info("connection pool closed")

    app = FastAPI(title=f"{settings.vocabulary.entity} CRUD", lifespan=lifespan)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = make_session_factory(engine)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(app)

    @app.get("/status")
    def status():
        return {"ok": True}

    app.include_router(generate_person_router(settings.vocabulary))
    return app
