"""Service layer."""

from .registry_service import RegistryService
from .singleton import get_registry, reset_registry

__all__ = ["RegistryService", "get_registry", "reset_registry"]
