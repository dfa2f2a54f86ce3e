from __future__ import annotations

import logging
from typing import List

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from tracksync.config import Settings
from tracksync.deps import get_settings, get_token_manager
from tracksync.errors import PlaylistNotConfigured, TrackSyncError, UpstreamApiError
from tracksync.models import ErrorResponse, RecentTracksResponse, TopTracksUpdateResponse, Track
from tracksync.tokens import TokenManager


logger = logging.getLogger(__name__)

RECENT_TRACKS_LIMIT = 30
TOP_TRACKS_LIMIT = 5
TOP_TRACKS_TIME_RANGE = "short_term"

RESHAPE_ERRORS = (AttributeError, KeyError, TypeError, ValueError)

router = APIRouter()


def reshape_play_history(items) -> List[Track]:
    try:
        return [Track.from_play_history(item) for item in items]
    except RESHAPE_ERRORS as exc:
        raise UpstreamApiError(f"Unexpected recently played payload: {exc!r}") from exc


def top_track_uris(top) -> List[str]:
    """URIs of the top tracks, in rank order."""
    try:
        return [t["uri"] for t in top if t.get("uri")]
    except RESHAPE_ERRORS as exc:
        raise UpstreamApiError(f"Unexpected top tracks payload: {exc!r}") from exc


@router.get("/recent-tracks", response_model=RecentTracksResponse)
def recent_tracks(tokens: TokenManager = Depends(get_token_manager)):
    """Return the user's last 30 played tracks in a flattened shape."""
    try:
        access_token = tokens.get_access_token()
        items = tokens.gateway.get_recently_played(access_token, limit=RECENT_TRACKS_LIMIT)
        tracks = reshape_play_history(items)
    except TrackSyncError as exc:
        logger.error("Failed to fetch recent tracks: %s", exc)
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(error="Failed to fetch recent tracks").model_dump(),
        )

    logger.info("Fetched %d recently played tracks.", len(tracks))
    return RecentTracksResponse(total=len(tracks), tracks=tracks)


@router.get("/update-top-tracks", response_model=TopTracksUpdateResponse)
def update_top_tracks(
    settings: Settings = Depends(get_settings),
    tokens: TokenManager = Depends(get_token_manager),
):
    """Overwrite the configured playlist with the current short-term top 5."""
    playlist_id = settings.playlist_id
    try:
        if not playlist_id:
            raise PlaylistNotConfigured("SPOTIFY_PLAYLIST_ID is not set")
        access_token = tokens.get_access_token()
        top = tokens.gateway.get_top_tracks(
            access_token, limit=TOP_TRACKS_LIMIT, time_range=TOP_TRACKS_TIME_RANGE
        )
        uris = top_track_uris(top)
        tokens.gateway.replace_playlist_tracks(access_token, playlist_id, uris)
    except TrackSyncError as exc:
        logger.error("Failed to update top tracks playlist %s: %s", playlist_id, exc)
        content = ErrorResponse(error="Failed to update top tracks playlist").model_dump()
        content["playlist_id"] = playlist_id
        return JSONResponse(status_code=500, content=content)

    logger.info("Updated playlist %s with %d top tracks", playlist_id, len(uris))
    return TopTracksUpdateResponse(
        message="Top Tracks Playlist has been successfully updated!",
        playlist_id=playlist_id,
        total_tracks=len(uris),
    )
