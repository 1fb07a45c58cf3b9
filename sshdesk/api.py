"""
FastAPI app entry point aggregating per-domain routers under sshdesk/routes.
Keep as `uvicorn sshdesk.api:app`.
"""
from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .services.app_svc import init_app

logger = logging.getLogger(__name__)

app = FastAPI(title="sshdesk-api", version=__version__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:1420",
        "http://127.0.0.1:1420",
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
def on_startup():
    logger.info(init_app())


# Include routers (split by domain)
from .routes import base as base_routes
from .routes import ssh_keys as ssh_keys_routes
from .routes import servers as servers_routes
from .routes import settings as settings_routes
from .routes import logs as logs_routes
from .routes import invoke as invoke_routes

app.include_router(base_routes.router)
app.include_router(ssh_keys_routes.router)
app.include_router(servers_routes.router)
app.include_router(settings_routes.router)
app.include_router(logs_routes.router)
app.include_router(invoke_routes.router)
