"""Services package for backend business logic."""

from . import analysis_service
from . import auth_service
from . import storage_service

from .artifact_detection import detect_artifact
from .storage_service import StorageService

__all__ = [
    "analysis_service",
    "auth_service",
    "storage_service",
    "detect_artifact",
    "StorageService",
]
