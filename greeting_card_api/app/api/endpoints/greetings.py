"""
Greeting endpoints.

``POST /api/create`` stores a greeting and returns its identifier and a
shareable URL; ``GET /api/get?id=ID`` returns a stored greeting.  Errors
are raised by ``GreetingService`` and rendered as
``{"error": ..., "message": ...}`` by the handlers registered in
``main.create_app``.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, Response, status

from greeting_card_api.app.api.deps import get_greeting_service, request_base_url
from greeting_card_api.app.schemas.greeting import (
    ErrorResponse,
    GreetingCreate,
    GreetingCreated,
    GreetingRead,
)
from greeting_card_api.app.services.greeting_service import GreetingService

router = APIRouter()

CACHE_CONTROL = "s-maxage=3600, stale-while-revalidate"


@router.post(
    "/create",
    response_model=GreetingCreated,
    status_code=status.HTTP_201_CREATED,
    responses={
        status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
        status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
    },
)
async def create_greeting(
    greeting_in: GreetingCreate,
    request: Request,
    service: GreetingService = Depends(get_greeting_service),
) -> GreetingCreated:
    """Create a greeting and return its shareable URL."""
    return await service.create_greeting(greeting_in, request_base_url(request))


@router.get(
    "/get",
    response_model=GreetingRead,
    responses={
        status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
        status.HTTP_404_NOT_FOUND: {"model": ErrorResponse},
        status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
    },
)
async def get_greeting(
    response: Response,
    greeting_id: Optional[str] = Query(None, alias="id", description="Greeting identifier"),
    service: GreetingService = Depends(get_greeting_service),
) -> GreetingRead:
    """Return a stored greeting.

    Greetings never change once created, so shared caches may keep the
    response for an hour.
    """
    greeting = await service.get_greeting(greeting_id)
    response.headers["Cache-Control"] = CACHE_CONTROL
    return greeting
