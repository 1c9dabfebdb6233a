"""FastAPI Application.

REST API layer for the IFC specialty analyzer.
"""
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ifc_specialty.presentation.api import routes
from ifc_specialty.shared.config import get_settings
from ifc_specialty.shared.logging import configure_logging


def create_app() -> FastAPI:
    """Create FastAPI application.

    Returns:
        Configured FastAPI app
    """
    configure_logging()
    settings = get_settings()

    app = FastAPI(
        title="IFC Specialty API",
        description="REST API for IFC specialty analysis and WBS generation",
        version=settings.app_version,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.api_cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # API v1 - Current stable version
    app.include_router(routes.analysis.router, prefix="/api/v1", tags=["v1-ifc"])

    @app.get("/health")
    async def health_check() -> dict:
        """Health check endpoint."""
        return {"status": "healthy", "service": "ifc-specialty-api"}

    return app


# Create app instance
app = create_app()


def main() -> None:
    """Run the API with uvicorn."""
    import uvicorn

    uvicorn.run("ifc_specialty.presentation.api.app:app", host="0.0.0.0", port=8000)
