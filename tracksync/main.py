from __future__ import annotations

import logging
import secrets

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse
from fastapi.staticfiles import StaticFiles

from tracksync.auth import router as auth_router
from tracksync.config import Settings
from tracksync.deps import get_token_manager, templates
from tracksync.spotify_client import SpotifyGateway
from tracksync.tokens import TokenManager
from tracksync.tracks import router as tracks_router


logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None, gateway: SpotifyGateway | None = None) -> FastAPI:
    settings = settings or Settings.from_env()
    gateway = gateway or SpotifyGateway(settings)

    app = FastAPI(title="Spotify Recent + Top Tracks API", version="1.0.0")
    app.state.settings = settings
    app.state.token_manager = TokenManager(gateway, refresh_token=settings.refresh_token)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.frontend_origin],
        allow_credentials=settings.frontend_origin != "*",
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(auth_router)
    app.include_router(tracks_router)

    @app.get("/", response_class=HTMLResponse)
    def index(
        request: Request,
        tokens: TokenManager = Depends(get_token_manager),
    ):
        """Landing page; ?key=<API_KEY> shows the whole refresh token."""
        key = request.query_params.get("key")
        is_valid_key = bool(settings.api_key and key) and secrets.compare_digest(key.encode(), settings.api_key.encode())
        return templates.TemplateResponse(
            request,
            "index.html",
            {
                "playlist_id": settings.playlist_id,
                "display_token": tokens.display_token(reveal=is_valid_key),
                "show_key_tip": not is_valid_key and tokens.is_authenticated,
            },
        )

    app.mount("/static", StaticFiles(directory=settings.static_dir), name="static")
    return app


def run() -> None:
    import uvicorn

    settings = Settings.from_env()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app = create_app(settings)
    logger.info("Server running at http://localhost:%d", settings.port)
    logger.info("Visit /login to authorize your Spotify account.")
    if not settings.refresh_token:
        logger.info("No SPOTIFY_REFRESH_TOKEN set; it will be stored in memory after the first login.")
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    run()
