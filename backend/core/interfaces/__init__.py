# Interfaces (Abstract Contracts)
# Adapters and services implement these interfaces
from .repositories import (
    CatalogRepository,
    DirectoryStore,
    DirectoryStoreError,
    ProfileRepository,
)
from .services import ContentService, ImageResult, ImageService

__all__ = [
    "CatalogRepository",
    "ProfileRepository",
    "DirectoryStore",
    "DirectoryStoreError",
    "ContentService",
    "ImageService",
    "ImageResult",
]
