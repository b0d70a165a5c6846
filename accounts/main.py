from contextlib import asynccontextmanager

from fastapi import FastAPI

from accounts.infrastructure.db.pool import close_pool, get_pool
from accounts.logging import setup_logging
from accounts.presentation.api import api
from accounts.settings import get_settings

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    pool = get_pool()
    await pool.open()
    try:
        yield
    finally:
        await close_pool()


def create_app() -> FastAPI:
    setup_logging(settings.log_level)
    app = FastAPI(title="Accounts API", version="0.1.0", lifespan=lifespan)
    app.state.settings = settings
    app.include_router(api)
    return app


app = create_app()
