"""
Endpoint modules.

Each module defines an ``APIRouter``: ``greetings`` for the JSON API and
``pages`` for the server-rendered greeting page.
"""
