from __future__ import annotations

import logging
from typing import Iterable

from tracksync.errors import UpstreamAuthError
from tracksync.spotify_client import DEFAULT_SCOPES, SpotifyGateway


logger = logging.getLogger(__name__)

PREVIEW_LENGTH = 10


class TokenManager:
    """Owns the process-wide refresh token.

    The refresh token is held in memory only and is replaced on every
    successful /callback (last write wins). Access tokens are never cached:
    each protected request trades the refresh token for a new one.
    """

    def __init__(self, gateway: SpotifyGateway, refresh_token: str = ""):
        self.gateway = gateway
        self.refresh_token = refresh_token or ""

    @property
    def is_authenticated(self) -> bool:
        return bool(self.refresh_token)

    def build_authorization_url(self, scopes: Iterable[str] = DEFAULT_SCOPES) -> str:
        return self.gateway.authorize_url(scopes)

    def exchange_code_for_refresh_token(self, code: str) -> str:
        """Trade an authorization code for a refresh token and keep it.

        A failed exchange leaves the currently held token untouched.
        """
        token_info = self.gateway.exchange_code(code)
        refresh_token = token_info.get("refresh_token")
        if not refresh_token:
            raise UpstreamAuthError("Spotify returned no refresh token")
        self.refresh_token = refresh_token
        logger.info("Refresh token updated: %s", preview_token(refresh_token))
        return refresh_token

    def get_access_token(self) -> str:
        if not self.refresh_token:
            raise UpstreamAuthError("No refresh token held; visit /login first")
        return self.gateway.refresh_access_token(self.refresh_token)

    def display_token(self, reveal: bool = False) -> str:
        if reveal and self.refresh_token:
            return self.refresh_token
        return preview_token(self.refresh_token)


def preview_token(token: str | None) -> str:
    if not token:
        return "Not available"
    return token[:PREVIEW_LENGTH] + "..."
