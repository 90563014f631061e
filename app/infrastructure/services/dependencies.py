"""
Type aliases for FastAPI dependency injection.

Provides annotated type hints for common infrastructure dependencies.
"""

from typing import Annotated

from fastapi import Depends

from infrastructure.configuration import Settings
from infrastructure.notifications import BroadcastService, DeliveryLog, Dispatcher
from infrastructure.persistence import Database
from infrastructure.services.providers import (
    get_broadcast_service,
    get_database,
    get_delivery_log,
    get_dispatcher,
    get_settings,
)

# Settings dependency
SettingsDep = Annotated[Settings, Depends(get_settings)]

# Database dependency
DatabaseDep = Annotated[Database, Depends(get_database)]

# Delivery log dependency - internal feed listing and read-state
DeliveryLogDep = Annotated[DeliveryLog, Depends(get_delivery_log)]

# Dispatcher dependency
DispatcherDep = Annotated[Dispatcher, Depends(get_dispatcher)]

# Broadcast service dependency - broadcasts and audience previews
BroadcastServiceDep = Annotated[BroadcastService, Depends(get_broadcast_service)]

__all__ = [
    "SettingsDep",
    "DatabaseDep",
    "DeliveryLogDep",
    "DispatcherDep",
    "BroadcastServiceDep",
]
