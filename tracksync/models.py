from __future__ import annotations

from typing import Any, Dict, List

from pydantic import BaseModel, Field


class ArtistRef(BaseModel):
    name: str | None = None
    id: str | None = None
    url: str | None = None


class AlbumRef(BaseModel):
    name: str | None = None
    id: str | None = None
    release_date: str | None = None
    total_tracks: int | None = None
    image: str | None = Field(None, description="URL of the first (largest) album image")
    url: str | None = None


class Track(BaseModel):
    played_at: str | None = None
    id: str | None = None
    track_name: str | None = None
    artists: List[ArtistRef] = Field(default_factory=list)
    album: AlbumRef = Field(default_factory=AlbumRef)
    duration_ms: int = 0
    duration_min: str = Field("0.00", description="duration_ms / 60000 with two decimals")
    explicit: bool = False
    popularity: int | None = None
    preview_url: str | None = None
    external_url: str | None = None
    available_markets: int = Field(0, description="Number of markets the track is available in")

    @classmethod
    def from_play_history(cls, item: Dict[str, Any]) -> "Track":
        """Reshape one item of /me/player/recently-played."""
        track = item.get("track") or {}
        album = track.get("album") or {}
        images = album.get("images") or []
        duration_ms = int(track.get("duration_ms") or 0)
        return cls(
            played_at=item.get("played_at"),
            id=track.get("id"),
            track_name=track.get("name"),
            artists=[
                ArtistRef(
                    name=a.get("name"),
                    id=a.get("id"),
                    url=(a.get("external_urls") or {}).get("spotify"),
                )
                for a in track.get("artists") or []
            ],
            album=AlbumRef(
                name=album.get("name"),
                id=album.get("id"),
                release_date=album.get("release_date"),
                total_tracks=album.get("total_tracks"),
                image=images[0].get("url") if images else None,
                url=(album.get("external_urls") or {}).get("spotify"),
            ),
            duration_ms=duration_ms,
            duration_min=format_minutes(duration_ms),
            explicit=bool(track.get("explicit", False)),
            popularity=track.get("popularity"),
            preview_url=track.get("preview_url"),
            external_url=(track.get("external_urls") or {}).get("spotify"),
            available_markets=len(track.get("available_markets") or []),
        )


def format_minutes(duration_ms: int) -> str:
    """210000 -> "3.50"."""
    return f"{duration_ms / 60000:.2f}"


class RecentTracksResponse(BaseModel):
    success: bool = True
    total: int
    tracks: List[Track]


class TopTracksUpdateResponse(BaseModel):
    success: bool = True
    message: str
    playlist_id: str | None = None
    total_tracks: int


class ErrorResponse(BaseModel):
    success: bool = False
    error: str
