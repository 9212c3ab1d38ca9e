"""Service layer for remote access and tree logic."""
from resource_hub.services.gateway import ResourceGateway
from resource_hub.services.resources.service import ResourceManager

__all__ = [
    "ResourceGateway",
    "ResourceManager",
]
