import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from window_catalog.api import rpc
from window_catalog.core.config import settings
from window_catalog.core.error_handlers import register_rpc_error_handlers
from window_catalog.db.engine import Store
from window_catalog.db.init_db import init_db

logger = logging.getLogger(__name__)


def create_app(store: Optional[Store] = None) -> FastAPI:
    """Build the API application.

    The store is opened when the application starts and closed when it shuts
    down. Pass one in to run against a different database (tests, tooling).
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.store.open()
        init_db(app.state.store.engine)
        logger.info("Window catalog API ready for requests")
        yield
        app.state.store.close()

    app = FastAPI(title=settings.PROJECT_NAME, version=settings.APP_VERSION, lifespan=lifespan)
    app.state.store = store or Store()
    register_rpc_error_handlers(app)

    if settings.BACKEND_CORS_ORIGINS:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    app.include_router(rpc.router, prefix=f"{settings.API_V1_STR}/rpc", tags=["rpc"])

    @app.get("/")
    def root():
        return {"message": f"Welcome to {settings.PROJECT_NAME} API"}

    return app


app = create_app()


def main() -> None:
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info("Starting server", extra={"host": settings.SERVER_HOST, "port": settings.SERVER_PORT})
    uvicorn.run(app, host=settings.SERVER_HOST, port=settings.SERVER_PORT, log_level=settings.LOG_LEVEL.lower())


if __name__ == "__main__":
    main()
