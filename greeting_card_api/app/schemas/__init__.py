"""
Pydantic schema definitions for API payloads.

Request schemas accept loosely typed input so that the service layer can
report precise validation errors; response schemas describe exactly what
the API returns.
"""
