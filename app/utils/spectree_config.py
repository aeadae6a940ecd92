"""
Spectree configuration with Pydantic v2 compatibility.
"""
from flask import Flask
from spectree import SecurityScheme, SpecTree

# Global Spectree instance that can be imported by API modules
# This will be initialized by configure_spectree() before any imports of the API modules
api: SpecTree = None  # type: ignore


def configure_spectree(app: Flask) -> SpecTree:
    """
    Configure Spectree with proper Pydantic v2 integration and custom settings.

    Returns:
        SpecTree: Configured Spectree instance
    """
    global api

    # Create Spectree instance with Flask backend
    api = SpecTree(
        backend_name="flask",
        app=app,
        title="Aircraft Parts Inventory API",
        version="1.0.0",
        description="Role-gated aircraft parts inventory with a stock movement ledger",
        path="api/docs",  # OpenAPI docs available at /api/docs
        validation_error_status=400,
        security_schemes=[
            SecurityScheme(
                name="bearer",
                data={"type": "http", "scheme": "bearer", "bearerFormat": "JWT"},
            )
        ],
        security={"bearer": []},
    )

    return api
