"""
Server-rendered greeting page.

``GET /`` shows the greeting named by the ``id`` query parameter, or the
creation form when there is none.  A greeting that cannot be loaded
(malformed id, unknown id, store failure) degrades to the placeholder
page with the form instead of an error page.

``POST /`` receives the creation form, stores the greeting through the
same service as ``POST /api/create`` and answers with the share panel:
the link, WhatsApp / Telegram / Facebook share links and a copy button.
"""

import logging
from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Depends, Form, Query, Request, status
from fastapi.responses import HTMLResponse
from jinja2 import Environment, FileSystemLoader

from greeting_card_api.app.api.deps import get_greeting_service, request_base_url
from greeting_card_api.app.core.errors import (
    GreetingError,
    GreetingStoreError,
    GreetingValidationError,
)
from greeting_card_api.app.schemas.greeting import (
    MAX_MESSAGE_LENGTH,
    MAX_NAME_LENGTH,
    MAX_QUOTE_LENGTH,
    MAX_SUBTITLE_LENGTH,
    GreetingCreate,
)
from greeting_card_api.app.services.greeting_service import GreetingService
from greeting_card_api.app.services.page_service import DAY_THEMES, PageContext, PageService

logger = logging.getLogger(__name__)

router = APIRouter()

TEMPLATES_DIR = Path(__file__).resolve().parent.parent.parent / "templates"

# Autoescaping keeps user-supplied names, quotes and memory lines as text.
_jinja = Environment(
    autoescape=True,
    enable_async=True,
    loader=FileSystemLoader(TEMPLATES_DIR),
)

_LIMITS = {
    "name": MAX_NAME_LENGTH,
    "message": MAX_MESSAGE_LENGTH,
    "subtitle": MAX_SUBTITLE_LENGTH,
    "quote": MAX_QUOTE_LENGTH,
}


async def render_page(page: PageContext, status_code: int = status.HTTP_200_OK) -> HTMLResponse:
    template = _jinja.get_template("greeting.html.jinja")
    content = await template.render_async(page=page, days=DAY_THEMES, limits=_LIMITS)
    return HTMLResponse(content=content, status_code=status_code)


def _parse_day_index(raw: str) -> Optional[int]:
    raw = raw.strip()
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        raise GreetingValidationError("Day index must be a number") from None


@router.get("/", response_class=HTMLResponse)
async def greeting_page(
    greeting_id: Optional[str] = Query(None, alias="id"),
    service: GreetingService = Depends(get_greeting_service),
) -> HTMLResponse:
    """Show a greeting, or the creation form when there is none."""
    if not greeting_id:
        return await render_page(PageService.build_default_page())
    try:
        greeting = await service.get_greeting(greeting_id)
    except GreetingStoreError:
        logger.exception("Failed to load greeting %s for the page", greeting_id)
        return await render_page(PageService.build_default_page())
    except GreetingError as exc:
        logger.info("Greeting %r unavailable (%s), showing defaults", greeting_id, exc.code)
        return await render_page(PageService.build_default_page())
    return await render_page(PageService.build_greeting_page(greeting))


@router.post("/", response_class=HTMLResponse)
async def submit_greeting_form(
    request: Request,
    sender: str = Form(""),
    receiver: str = Form(""),
    message: str = Form(""),
    day_index: str = Form(""),
    subtitle: str = Form(""),
    quote: str = Form(""),
    memories: str = Form(""),
    service: GreetingService = Depends(get_greeting_service),
) -> HTMLResponse:
    """Create a greeting from the HTML form and show its share links."""
    form_values = {
        "sender": sender,
        "receiver": receiver,
        "message": message,
        "subtitle": subtitle,
        "quote": quote,
        "memories": memories,
    }
    parsed_day: Optional[int] = None
    try:
        parsed_day = _parse_day_index(day_index)
        data = GreetingCreate(
            sender=sender,
            receiver=receiver,
            message=message,
            day_index=parsed_day,
            subtitle=subtitle,
            quote=quote,
            memories=memories,
        )
        created = await service.create_greeting(data, request_base_url(request))
    except GreetingValidationError as exc:
        page = PageService.build_default_page(
            parsed_day or 0, form_error=exc.message, form_values=form_values
        )
        return await render_page(page, status.HTTP_400_BAD_REQUEST)
    except GreetingStoreError:
        logger.exception("Failed to store greeting submitted from the form")
        page = PageService.build_default_page(
            parsed_day or 0,
            form_error="Failed to create greeting, please try again",
            form_values=form_values,
        )
        return await render_page(page, status.HTTP_500_INTERNAL_SERVER_ERROR)
    return await render_page(PageService.build_created_page(created.url, parsed_day or 0))
