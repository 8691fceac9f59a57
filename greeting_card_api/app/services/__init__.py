"""
Service layer.

``greeting_store`` defines the persistence interface and its backends,
``greeting_service`` the create/get operations on top of it and
``page_service`` the content of the HTML page.
"""
