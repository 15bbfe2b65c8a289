"""
Application package.

``main`` builds the FastAPI app; ``core`` holds configuration, the
database layer, logging and the error types; ``schemas`` the pydantic
models; ``services`` the generic store, query engine and resource
service; ``api`` the versioned routers.
"""

from .main import app, create_app  # noqa: F401
