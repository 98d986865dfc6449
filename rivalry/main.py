import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Callable

import uvicorn
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from rivalry.db import create_engine, create_session_factory
from rivalry.errors import RivalryError
from rivalry.question_pool import QuestionPool
from rivalry.routers import quiz
from rivalry.services.daily_quiz import DailyQuizService, local_now
from rivalry.services.submission_db import SqlSubmissionStore
from rivalry.services.submission_store import InMemorySubmissionStore, SubmissionStore
from rivalry.settings import Settings


def build_store(settings: Settings) -> SubmissionStore:
    if settings.store_backend == "memory":
        return InMemorySubmissionStore()
    engine = create_engine(settings.database_url)
    return SqlSubmissionStore(engine, create_session_factory(engine))


def create_app(
    settings: Settings | None = None,
    pool: QuestionPool | None = None,
    store: SubmissionStore | None = None,
    clock: Callable[[], datetime] = local_now,
) -> FastAPI:
    """Wire the pool, store and quiz service into a FastAPI app.

    The question pool is loaded here, before the app exists, so a misconfigured
    pool stops the process instead of failing the first request.
    """
    settings = settings or Settings.from_env()
    pool = pool or QuestionPool.from_file(settings.question_file)
    store = store or build_store(settings)
    service = DailyQuizService(pool, store, settings, clock=clock)
    scheduler = AsyncIOScheduler()

    @asynccontextmanager
    async def lifespan(app):
        """Create the submission table and start housekeeping.
        This function is called to start the server.
        """
        if isinstance(store, SqlSubmissionStore):
            await store.create_tables()

        # Drop submissions older than the retention window once a day
        if settings.retention_days > 0:
            scheduler.add_job(service.purge_expired, "interval", hours=24)
            scheduler.start()
            logging.info(f"Purge job scheduled (retention {settings.retention_days} days)")
        try:
            yield
        finally:
            if scheduler.running:
                scheduler.shutdown()
                logging.info("Purge job stopped")
            if isinstance(store, SqlSubmissionStore):
                await store.dispose()
            logging.info("Stop Server")

    app = FastAPI(title="Relative Rivalry", lifespan=lifespan)
    app.state.settings = settings
    app.state.quiz_service = service
    app.include_router(quiz.quiz_router)

    @app.exception_handler(RivalryError)
    async def rivalry_error_handler(request: Request, exc: RivalryError):
        if exc.status_code >= 500:
            logging.error(f"{request.url.path} failed: {exc!r}")
        return JSONResponse(status_code=int(exc.status_code), content={"message": exc.message})

    @app.exception_handler(RequestValidationError)
    async def malformed_body_handler(request: Request, exc: RequestValidationError):
        logging.info(f"Malformed request to {request.url.path}: {exc.errors()}")
        return JSONResponse(status_code=400, content={"message": "Request body must be a JSON object."})

    return app


logging.basicConfig(level=Settings.from_env().log_level)

app = create_app()


def run():
    settings: Settings = app.state.settings
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
