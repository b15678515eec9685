"""Singleton pattern for the shared registry service."""

from typing import Optional

from .registry_service import RegistryService

# Global service instance (singleton pattern)
_registry_service: Optional[RegistryService] = None


def get_registry() -> RegistryService:
    """
    Get or create the singleton registry service instance.

    Returns:
        RegistryService instance
    """
    global _registry_service
    if _registry_service is None:
        _registry_service = RegistryService()
    return _registry_service


def reset_registry() -> None:
    """Close and drop the singleton (process shutdown)."""
    global _registry_service
    if _registry_service is not None:
        _registry_service.close()
        _registry_service = None
