"""
Top‑level package for the Greeting Card API.

This file makes ``greeting_card_api`` a Python package so that modules
within ``app`` can be imported using fully qualified names like
``greeting_card_api.app.main``.  The HTTP client for the API lives in
``greeting_card_api.client``; everything else lives under ``app``.
"""

__all__ = []
