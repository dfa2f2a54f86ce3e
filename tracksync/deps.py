from __future__ import annotations

import os

from fastapi import Request
from fastapi.templating import Jinja2Templates

from tracksync.config import Settings
from tracksync.tokens import TokenManager


templates = Jinja2Templates(directory=os.path.join(os.path.dirname(os.path.abspath(__file__)), "templates"))


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_token_manager(request: Request) -> TokenManager:
    return request.app.state.token_manager
