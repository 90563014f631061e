"""
Dependency injection services.

Provides type aliases and provider functions for FastAPI dependency injection.
"""

from infrastructure.services.dependencies import (
    BroadcastServiceDep,
    DatabaseDep,
    DeliveryLogDep,
    DispatcherDep,
    SettingsDep,
)
from infrastructure.services.providers import (
    get_audience_resolver,
    get_broadcast_service,
    get_database,
    get_delivery_log,
    get_dispatcher,
    get_settings,
)

__all__ = [
    "BroadcastServiceDep",
    "DatabaseDep",
    "DeliveryLogDep",
    "DispatcherDep",
    "SettingsDep",
    "get_audience_resolver",
    "get_broadcast_service",
    "get_database",
    "get_delivery_log",
    "get_dispatcher",
    "get_settings",
]
