from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, PlainTextResponse, RedirectResponse

from tracksync.deps import get_token_manager, templates
from tracksync.errors import MissingAuthorizationCode, TrackSyncError
from tracksync.tokens import TokenManager


logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/login")
def login(tokens: TokenManager = Depends(get_token_manager)):
    """Redirect the user to Spotify's authorization URL."""
    try:
        auth_url = tokens.build_authorization_url()
    except TrackSyncError as exc:
        logger.error("Login failed: %s", exc)
        return PlainTextResponse("Spotify login is not configured.", status_code=500)
    return RedirectResponse(auth_url, status_code=302)


@router.get("/callback", response_class=HTMLResponse)
def callback(request: Request, tokens: TokenManager = Depends(get_token_manager)):
    """Handle the Spotify redirect and keep the refresh token in memory.

    The held token only changes when the exchange succeeds and Spotify
    actually returns a refresh token.
    """
    code = request.query_params.get("code")
    try:
        if not code:
            error = request.query_params.get("error")
            raise MissingAuthorizationCode(
                f"Missing authorization code ({error})." if error else "Missing authorization code."
            )
        tokens.exchange_code_for_refresh_token(code)
    except MissingAuthorizationCode as exc:
        logger.warning("OAuth callback: %s", exc)
        return PlainTextResponse(str(exc), status_code=400)
    except TrackSyncError as exc:
        logger.error("OAuth callback: %s", exc)
        return PlainTextResponse("Failed to fetch refresh token.", status_code=500)

    return templates.TemplateResponse(request, "callback.html", {})
