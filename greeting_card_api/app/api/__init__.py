"""
HTTP layer.

``router`` aggregates the JSON API routers; the HTML page router is
mounted separately at the site root by ``main.create_app``.
"""
