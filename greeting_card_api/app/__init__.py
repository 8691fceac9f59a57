"""
Application package.

``main`` builds the FastAPI application; ``core`` holds configuration,
logging, errors and the SQLite schema; ``schemas`` the Pydantic models;
``services`` the store interface, the greeting operations and the page
content; ``api`` the routers.
"""

from .main import app  # noqa: F401
