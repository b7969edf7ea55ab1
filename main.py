import inspect
import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles
from openai import AsyncOpenAI

from routes.history_route import router as history_router
from routes.realtime_ws import router as realtime_router
from routes.schedule_route import router as schedule_router
from routes.session_route import router as session_router
from routes.settings_route import router as settings_router
from services.openai.content_generator import ContentGenerator
from services.realtime.authenticator import ConnectionAuthenticator
from services.realtime.session_store import SessionStore
from utils.app_config import AppConfig
from utils.database_init import AsyncDatabaseInitializer

BASE_DIR = Path(__file__).resolve().parent
PUBLIC_DIR = BASE_DIR / "public"

load_dotenv()  # Load environment variables from .env file if present

LOGGER = logging.getLogger(__name__)


async def _close_client(client) -> None:
    """Close the OpenAI client if it exposes a close/aclose method."""
    aclose = getattr(client, "aclose", None) or getattr(client, "close", None)
    if aclose is None:
        return
    try:
        if inspect.iscoroutinefunction(aclose):
            await aclose()
        else:
            result = aclose()
            if inspect.isawaitable(result):
                await result
    except Exception as exc:
        # Shutdown errors must not mask more important issues.
        LOGGER.warning("Failed to close OpenAI client cleanly: %s", exc)


def create_app(
    config: Optional[AppConfig] = None,
    *,
    openai_client: Optional[AsyncOpenAI] = None,
    content_generator: Optional[ContentGenerator] = None,
    database_dir: Optional[Path | str] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application instance.

    Any of the OpenAI client, the content generator or the database directory
    may be injected; otherwise they are built from the environment at start-up.
    """
    config = config or AppConfig.from_env()
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Lifespan manager to initialize:
          - the SQLite database at DATABASE_DIR/app.db
          - the OpenAI async client and the shared content generator
          - the login session store and the connection authenticator
        and attach them to `app.state`.
        """
        db_initializer = AsyncDatabaseInitializer(database_dir)
        await db_initializer.ensure_database()
        app.state.db_initializer = db_initializer

        client = openai_client
        owns_client = False
        if content_generator is None and client is None:
            try:
                client = AsyncOpenAI()
            except Exception as exc:
                raise RuntimeError(
                    "Failed to initialize OpenAI Async client; is OPENAI_API_KEY set?"
                ) from exc
            owns_client = True

        app.state.openai_client = client
        app.state.content_generator = content_generator or ContentGenerator(
            client,
            model=config.openai_model,
            max_attempts=config.generation_max_attempts,
            retry_base_delay=config.generation_retry_base_delay,
        )

        session_store = SessionStore()
        app.state.session_store = session_store
        app.state.authenticator = ConnectionAuthenticator(session_store, config.session_cookie_name)

        try:
            yield
        finally:
            if owns_client:
                await _close_client(client)

    app = FastAPI(lifespan=lifespan)
    app.state.config = config

    # Serve static assets from the public directory, if it exists.
    if PUBLIC_DIR.exists():
        app.mount("/public", StaticFiles(directory=PUBLIC_DIR), name="public")

    @app.get("/", include_in_schema=False)
    async def serve_index():
        """
        Serve the frontend index page from the public directory.
        """
        index_path = PUBLIC_DIR / "index.html"
        if not index_path.exists():
            raise HTTPException(status_code=404, detail="Frontend not found")
        return FileResponse(index_path)

    @app.get("/health")
    async def health(request: Request):
        """
        Simple health check that verifies DB initializer and generator presence.
        """
        has_db = hasattr(request.app.state, "db_initializer")
        has_generator = getattr(request.app.state, "content_generator", None) is not None
        return {"ok": True, "db_initialized": has_db, "generator_available": has_generator}

    # Register application routers
    app.include_router(realtime_router)
    app.include_router(session_router)
    app.include_router(history_router)
    app.include_router(schedule_router)
    app.include_router(settings_router)

    return app


app = create_app()
