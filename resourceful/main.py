"""
Resourceful — Application Factory
==================================

What:  Builds a FastAPI application serving an API's resources.
Why:   The API object only produces routing decisions; an application also
       needs logging, middleware, lifecycle handling and a health route.
How:   create_app(api) returns a configured FastAPI instance; serve(api) runs
       it under uvicorn.

Application layout:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │  Middleware: Request ID → Access Log → [GZip/CORS]  │
    │  Routes:     resource routes (API.router)           │
    │              GET /health                            │
    │  Lifespan:   logging setup, startup/shutdown logs,  │
    │              engine disposal                        │
    └─────────────────────────────────────────────────────┘

Example:
    api = API(prefix="v1")
    api.add_resource(Post, MemoryDataSource(Post))
    app = create_app(api)       # uvicorn module:app
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from sqlalchemy.ext.asyncio import AsyncEngine

from resourceful import __version__
from resourceful.api import API
from resourceful.config import settings
from resourceful.database import dispose_engine
from resourceful.middleware.logging import RequestLoggingMiddleware
from resourceful.middleware.request_id import RequestIDMiddleware
from resourceful.routes import health

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: Optional[str] = None) -> None:
    """
    Configure root logging for the process.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s on stdout.
    Noisy third-party loggers are raised to WARNING.
    """
    logging.basicConfig(
        level=getattr(logging, level or settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    setup_logging()
    api: API = app.state.api
    logger.info("Resourceful %s starting up", __version__)
    for resource in api.resources:
        logger.info("Serving %s%s", api.prefix, resource.name)

    yield

    logger.info("Shutting down...")
    engine: Optional[AsyncEngine] = app.state.engine
    if engine is not None:
        await dispose_engine(engine)
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    api: API,
    engine: Optional[AsyncEngine] = None,
    title: str = "Resourceful API",
) -> FastAPI:
    """
    Assemble a FastAPI application around `api`.

    Building the router freezes `api`: register every resource first.

    Args:
        api:    the registered resources
        engine: optional async engine, disposed on shutdown
        title:  OpenAPI title
    """
    app = FastAPI(title=title, version=__version__, lifespan=lifespan)
    app.state.api = api
    app.state.engine = engine

    # Last added executes first: Request ID → Access Log → GZip → CORS
    origins = settings.cors_origins_list
    if origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
            expose_headers=["Location", "X-Request-ID"],
        )
    app.add_middleware(GZipMiddleware, minimum_size=settings.gzip_minimum_size)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    api.mount(app)
    app.include_router(health.router)
    return app


def serve(api: API, engine: Optional[AsyncEngine] = None) -> None:
    """Run the application with uvicorn on settings.backend_host:backend_port."""
    uvicorn.run(
        create_app(api, engine=engine),
        host=settings.backend_host,
        port=settings.backend_port,
        log_level=settings.log_level.lower(),
    )
