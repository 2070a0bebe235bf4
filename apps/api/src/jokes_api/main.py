from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
import logging
from pathlib import Path
from typing import Annotated

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse

from jokes_api.config import get_settings
from jokes_api.db import create_store_engine
from jokes_api.store import JokeSource, JokeStore, JokeStoreError
from jokes_shared.logging_config import setup_logging
from jokes_shared.models import ErrorResponse, JokeListResponse

logger = logging.getLogger(__name__)

ENTRY_DOCUMENT = "index.html"


def _error_response(status_code: int, message: str, details: str | None = None) -> JSONResponse:
    payload = ErrorResponse(message=message, details=details)
    return JSONResponse(status_code=status_code, content=payload.model_dump(exclude_none=True))


def get_store(request: Request) -> JokeSource:
    return request.app.state.store


def _resolve_static_file(static_dir: Path, requested: str) -> Path | None:
    if not requested:
        return None
    candidate = (static_dir / requested).resolve()
    if not candidate.is_relative_to(static_dir) or not candidate.is_file():
        return None
    return candidate


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    if app.state.store is None:
        app.state.store = JokeStore(create_store_engine(get_settings()))
    # Advisory only: the service keeps listening when the store is down.
    app.state.store.probe()

    yield

    store = app.state.store
    if isinstance(store, JokeStore):
        store.dispose()
    app.state.store = None


def create_app() -> FastAPI:
    setup_logging(get_settings().log_level)

    app = FastAPI(title="Jokes API", version="0.1.0", lifespan=lifespan)
    app.state.store = None

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_credentials=True,
    )

    @app.exception_handler(Exception)
    async def unhandled_exception(request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            "Unhandled error on %s %s",
            request.method,
            request.url.path,
            exc_info=(type(exc), exc, exc.__traceback__),
        )
        return _error_response(500, "Internal server error")

    @app.get("/post")
    def list_jokes(store: Annotated[JokeSource, Depends(get_store)]) -> JSONResponse:
        try:
            jokes = store.fetch_all()
        except JokeStoreError as exc:
            logger.exception("Failed to serve jokes: %s", exc)
            settings = get_settings()
            details = None if settings.is_production else str(exc)
            return _error_response(500, "Internal server error", details)

        if not jokes:
            return _error_response(404, "No jokes found")

        payload = JokeListResponse(data=jokes)
        return JSONResponse(status_code=200, content=payload.model_dump())

    @app.get("/{full_path:path}", response_model=None)
    def serve_client(full_path: str) -> FileResponse | JSONResponse:
        static_dir = Path(get_settings().static_dir).resolve()

        asset = _resolve_static_file(static_dir, full_path)
        if asset is not None:
            return FileResponse(asset)

        entry = static_dir / ENTRY_DOCUMENT
        if not entry.is_file():
            logger.warning("Client entry document missing at %s", entry)
            return _error_response(404, "Client build not found")
        return FileResponse(entry)

    return app


app = create_app()


def run() -> None:
    import uvicorn

    uvicorn.run("jokes_api.main:app", host="0.0.0.0", port=get_settings().port, reload=False)


if __name__ == "__main__":
    run()
