"""
FastAPI dependencies shared by the endpoint modules.

The store and the service are created once by ``main.create_app`` and
kept on ``app.state``; these helpers hand them to route functions so a
test can swap the store by building the app with another one.
"""

from fastapi import Request

from greeting_card_api.app.core.config import Settings
from greeting_card_api.app.services.greeting_service import GreetingService
from greeting_card_api.app.services.greeting_store import GreetingStore


def get_greeting_store(request: Request) -> GreetingStore:
    return request.app.state.greeting_store


def get_greeting_service(request: Request) -> GreetingService:
    return request.app.state.greeting_service


def request_base_url(request: Request) -> str:
    """Return ``scheme://host`` under which the client reached us.

    ``PUBLIC_BASE_URL`` wins when configured.  Otherwise the
    ``X-Forwarded-Proto`` / ``X-Forwarded-Host`` headers set by a reverse
    proxy take precedence over the request's own scheme and ``Host``.
    """
    settings: Settings = request.app.state.settings
    if settings.public_base_url:
        return settings.public_base_url.rstrip("/")
    headers = request.headers
    scheme = headers.get("x-forwarded-proto", "").split(",")[0].strip() or request.url.scheme
    host = headers.get("x-forwarded-host", "").split(",")[0].strip() or headers.get("host") or request.url.netloc
    return f"{scheme}://{host}"
