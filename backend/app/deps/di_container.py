"""
Dependency injection container using dependency-injector.
Holds process-wide singletons: the invalidation bus and the health controller.
Per-request objects (sessions, domain controllers) are built by the endpoints.
"""

from typing import Optional

from dependency_injector import containers, providers

from app.core.invalidation import InvalidationBus
from app.services.health_service import HealthService
from app.controllers.health_controller import HealthController


class Container(containers.DeclarativeContainer):
    """Dependency injection container."""
    
    # Configuration
    config = providers.Configuration()
    
    # Mutations publish here; views subscribe or poll versions
    invalidation_bus = providers.Singleton(
        InvalidationBus,
    )
    
    # Services
    health_service = providers.Singleton(
        HealthService,
    )
    
    # Controllers
    health_controller = providers.Factory(
        HealthController,
        health_service=health_service,
    )


# Global container instance
_container: Optional[Container] = None


def get_container() -> Container:
    """Get the global dependency injection container."""
    global _container
    if _container is None:
        _container = Container()
    return _container


def set_container(container: Optional[Container]) -> None:
    """Replace the global container (application startup and tests)."""
    global _container
    _container = container
