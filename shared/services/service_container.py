"""
Service container for dependency injection
"""
from typing import Dict, Any


class ServiceContainer:
    """
    Lazily builds one instance per service name.
    Imports happen on first use since services look each other up through the container.
    """

    def __init__(self):
        self._services: Dict[str, Any] = {}

    def get_service(self, service_name: str):
        """
        Get service instance with lazy initialization

        Raises:
            ValueError: If service is unknown
        """
        if service_name not in self._services:
            self._services[service_name] = self._create_service(service_name)

        return self._services[service_name]

    def _create_service(self, service_name: str):
        if service_name == 'auth_service':
            from .auth_service import AuthService
            return AuthService()
        elif service_name == 'media_service':
            from .media_service import MediaService
            return MediaService()
        elif service_name == 'album_service':
            from .album_service import AlbumService
            return AlbumService()
        elif service_name == 'face_service':
            from .face_service import FaceService
            return FaceService()
        else:
            raise ValueError(f"Unknown service: {service_name}")

    def register_service(self, service_name: str, service_instance):
        """Register a service instance, replacing any cached one"""
        self._services[service_name] = service_instance

    def clear_services(self):
        """Clear all cached services (useful for testing)"""
        self._services.clear()


# Global service container instance
_service_container = ServiceContainer()


def get_service(service_name: str):
    return _service_container.get_service(service_name)


def register_service(service_name: str, service_instance):
    _service_container.register_service(service_name, service_instance)


def clear_services():
    """Clear all services (useful for testing)"""
    _service_container.clear_services()
