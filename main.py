"""
main.py
-------
Entry point for the Shareholders Registry web app.

Responsibilities:
    - Open the database connection pool and create the schema on startup.
    - Build the FastAPI application and register the routes.
    - Close the pool on shutdown.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI

import config
from db.connection import Database
from db.init_db import create_tables
from handlers.shareholder_handler import router as shareholder_router
from utils.logger import get_logger

logger = get_logger(__name__)


def create_app(database: Optional[Database] = None, init_schema: Optional[bool] = None) -> FastAPI:
    """
    Build the application.

    Args:
        database: Gateway to use; defaults to one built from config.py.
        init_schema: Create the table on startup; defaults to DB_INIT_SCHEMA.
    """
    if init_schema is None:
        init_schema = config.DB_INIT_SCHEMA

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        # ── 1. Database setup ─────────────────────────────────
        db = database if database is not None else Database.from_config()
        logger.info("Initializing database...")
        db.open()
        if init_schema:
            try:
                create_tables(db)
            except Exception:
                logger.error("Schema bootstrap failed, closing the pool.")
                db.close()
                raise
        app.state.database = db

        logger.info("Shareholders Registry is running.")
        yield

        # ── 2. Cleanup on shutdown ────────────────────────────
        db.close()
        logger.info("Shareholders Registry stopped.")

    app = FastAPI(title="Shareholders Registry", lifespan=lifespan)
    app.include_router(shareholder_router)
    return app


def main() -> None:
    """Run the app under uvicorn."""
    uvicorn.run(create_app(), host=config.APP_HOST, port=config.APP_PORT, log_config=None)


if __name__ == "__main__":
    main()
