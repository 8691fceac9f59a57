"""
Top‑level router for the JSON API.

Mounted under ``/api`` by ``main.create_app``, which gives the public
paths ``/api/create`` and ``/api/get``.
"""

from fastapi import APIRouter

from .endpoints import greetings

router = APIRouter()

router.include_router(greetings.router, tags=["greetings"])
