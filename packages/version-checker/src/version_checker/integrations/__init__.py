"""Registry clients that list tags for image URLs."""

from version_checker.integrations.dockerhub import DockerHubClient
from version_checker.integrations.registry import ClientManager, RegistryClient

__all__ = [
    "ClientManager",
    "DockerHubClient",
    "RegistryClient",
]
