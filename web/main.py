"""FastAPI application for the MiniSocial feed"""

import os
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from minisocial import __version__
from minisocial.app import MiniSocialApp
from minisocial.utils.logger import get_logger

from .routes import auth_router, posts_router

logger = get_logger(__name__)


def create_app(social: Optional[MiniSocialApp] = None) -> FastAPI:
    """Build the web app around an initialized MiniSocialApp"""
    if social is None:
        social = MiniSocialApp().initialize()

    app = FastAPI(
        title="MiniSocial",
        description="Local social feed with posts, likes and comments",
        version=__version__,
    )

    cors_origins = os.getenv("CORS_ORIGINS", "*").split(",")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.social = social
    app.include_router(auth_router)
    app.include_router(posts_router)

    @app.get("/api/health")
    async def health():
        return {"status": "ok", "version": __version__}

    logger.info("Web app created", routes=len(app.routes))
    return app
