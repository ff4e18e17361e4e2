"""API router package.

This package contains the HTTP route modules for the pet store API service.

Most code should import the composed router via:

    from petstore_api.routes import router

The actual composition lives in `petstore_api/routes/api_router.py`.
"""

from .api_router import router
