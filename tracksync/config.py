from __future__ import annotations

import os

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field


load_dotenv()

DEFAULT_PORT = 3000
DEFAULT_STATIC_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "static")


class Settings(BaseModel):
    """Static configuration, read once at startup.

    Uses environment variables:
    - SPOTIFY_CLIENT_ID, SPOTIFY_CLIENT_SECRET, SPOTIFY_REDIRECT_URI
    - SPOTIFY_PLAYLIST_ID (playlist overwritten by /update-top-tracks)
    - SPOTIFY_REFRESH_TOKEN (optional, seeds the in-memory token)
    - FRONTEND_ORIGIN (CORS origin, defaults to "*")
    - API_KEY (reveals the full refresh token on the landing page)
    - HOST, PORT, LOG_LEVEL, SPOTIFY_REQUESTS_TIMEOUT, STATIC_DIR
    """

    model_config = ConfigDict(frozen=True)

    client_id: str | None = Field(None, description="Spotify app client id")
    client_secret: str | None = Field(None, description="Spotify app client secret")
    redirect_uri: str | None = Field(None, description="Registered OAuth redirect URI")
    frontend_origin: str = "*"
    api_key: str | None = None
    playlist_id: str | None = None
    refresh_token: str = ""
    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT
    log_level: str = "INFO"
    requests_timeout: float = 10.0
    static_dir: str = DEFAULT_STATIC_DIR

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            client_id=os.getenv("SPOTIFY_CLIENT_ID"),
            client_secret=os.getenv("SPOTIFY_CLIENT_SECRET"),
            redirect_uri=os.getenv("SPOTIFY_REDIRECT_URI"),
            frontend_origin=os.getenv("FRONTEND_ORIGIN") or "*",
            api_key=os.getenv("API_KEY") or None,
            playlist_id=os.getenv("SPOTIFY_PLAYLIST_ID") or None,
            refresh_token=os.getenv("SPOTIFY_REFRESH_TOKEN", ""),
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT") or DEFAULT_PORT),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            requests_timeout=float(os.getenv("SPOTIFY_REQUESTS_TIMEOUT") or 10),
            static_dir=os.getenv("STATIC_DIR") or DEFAULT_STATIC_DIR,
        )
