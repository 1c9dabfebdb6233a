"""API Routes."""
from ifc_specialty.presentation.api.routes import analysis

__all__ = ["analysis"]
