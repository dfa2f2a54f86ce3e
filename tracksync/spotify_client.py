from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Sequence

import requests
import spotipy
from spotipy.cache_handler import MemoryCacheHandler
from spotipy.oauth2 import SpotifyOAuth, SpotifyOauthError

from tracksync.config import Settings
from tracksync.errors import UpstreamApiError, UpstreamAuthError


logger = logging.getLogger(__name__)

DEFAULT_SCOPES = (
    "user-read-recently-played",
    "user-top-read",
    "playlist-modify-private",
    "playlist-modify-public",
)


def create_spotify_client(access_token: str, *, requests_timeout: float = 10.0) -> spotipy.Spotify:
    """Create a Spotipy client using a raw access token.

    Spotipy's own retry loop is switched off; a failed call fails the request.
    """
    return spotipy.Spotify(
        auth=access_token,
        requests_timeout=requests_timeout,
        retries=0,
        status_retries=0,
    )


class SpotifyGateway:
    """Typed access to the handful of Spotify endpoints this service uses.

    Every method raises ``UpstreamAuthError`` (token endpoint) or
    ``UpstreamApiError`` (Web API) instead of leaking spotipy/requests
    exceptions, so route handlers only deal with one hierarchy.
    """

    def __init__(self, settings: Settings):
        self.settings = settings

    def get_oauth(self, scopes: Iterable[str] = DEFAULT_SCOPES) -> SpotifyOAuth:
        # Tokens never touch disk; the refresh token lives on the TokenManager.
        return SpotifyOAuth(
            client_id=self.settings.client_id,
            client_secret=self.settings.client_secret,
            redirect_uri=self.settings.redirect_uri,
            scope=list(scopes),
            cache_handler=MemoryCacheHandler(),
            show_dialog=False,
            open_browser=False,
            requests_timeout=self.settings.requests_timeout,
        )

    def authorize_url(self, scopes: Iterable[str] = DEFAULT_SCOPES) -> str:
        try:
            return self.get_oauth(scopes).get_authorize_url()
        except SpotifyOauthError as exc:
            # spotipy refuses to build the client without an id or redirect URI
            raise UpstreamAuthError(f"Cannot build authorization URL: {exc}") from exc

    def exchange_code(self, code: str) -> Dict[str, Any]:
        """Trade an authorization code for the token payload."""
        try:
            token_info = self.get_oauth().get_access_token(code, check_cache=False)
        except (SpotifyOauthError, requests.RequestException) as exc:
            raise UpstreamAuthError(f"Authorization code exchange failed: {exc}") from exc
        if not isinstance(token_info, dict):
            raise UpstreamAuthError("Unexpected token response from Spotify")
        return token_info

    def refresh_access_token(self, refresh_token: str) -> str:
        try:
            token_info = self.get_oauth().refresh_access_token(refresh_token)
        except (SpotifyOauthError, requests.RequestException) as exc:
            raise UpstreamAuthError(f"Refresh token exchange failed: {exc}") from exc
        access_token = (token_info or {}).get("access_token")
        if not access_token:
            raise UpstreamAuthError("No access token returned from Spotify")
        return access_token

    def _client(self, access_token: str) -> spotipy.Spotify:
        return create_spotify_client(access_token, requests_timeout=self.settings.requests_timeout)

    def get_recently_played(self, access_token: str, *, limit: int) -> List[Dict[str, Any]]:
        try:
            results = self._client(access_token).current_user_recently_played(limit=limit)
        except (spotipy.SpotifyException, requests.RequestException) as exc:
            raise UpstreamApiError(f"Could not fetch recently played tracks: {exc}") from exc
        return list((results or {}).get("items") or [])

    def get_top_tracks(self, access_token: str, *, limit: int, time_range: str) -> List[Dict[str, Any]]:
        try:
            results = self._client(access_token).current_user_top_tracks(limit=limit, time_range=time_range)
        except (spotipy.SpotifyException, requests.RequestException) as exc:
            raise UpstreamApiError(f"Could not fetch top tracks: {exc}") from exc
        return list((results or {}).get("items") or [])

    def replace_playlist_tracks(self, access_token: str, playlist_id: str, uris: Sequence[str]) -> None:
        """Overwrite the playlist's whole track list with ``uris``, in order."""
        logger.debug("Replacing items of playlist %s with %d tracks", playlist_id, len(uris))
        try:
            self._client(access_token).playlist_replace_items(playlist_id, list(uris))
        except (spotipy.SpotifyException, requests.RequestException) as exc:
            raise UpstreamApiError(f"Could not replace items of playlist {playlist_id}: {exc}") from exc
