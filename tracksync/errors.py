from __future__ import annotations


class TrackSyncError(Exception):
    """Base class for failures surfaced by the route handlers."""


class MissingAuthorizationCode(TrackSyncError):
    """The provider redirected to /callback without a ``code`` parameter."""


class UpstreamAuthError(TrackSyncError):
    """Trading a code or refresh token at the Spotify token endpoint failed."""


class UpstreamApiError(TrackSyncError):
    """A Spotify Web API data fetch or playlist write failed."""


class PlaylistNotConfigured(TrackSyncError):
    """No target playlist id is configured for /update-top-tracks."""
