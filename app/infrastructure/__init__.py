"""Infrastructure modules for the Ekklesia messaging service.

Centralized infrastructure components:
- configuration: Settings management (settings, MessagingSettings)
- logging: Structured logging (get_module_logger)
- operations: Operation results and error classification
- persistence: Database engine, ORM models and repositories
- notifications: Dispatcher, channels, audience resolution, delivery log
- services: Dependency injection services (SettingsDep, get_settings)
"""

# Configuration
from infrastructure.configuration import settings

# Logging
from infrastructure.logging import get_module_logger

# Operations
from infrastructure.operations import OperationResult, OperationStatus

__all__ = [
    # Configuration
    "settings",
    # Logging
    "get_module_logger",
    # Operations
    "OperationResult",
    "OperationStatus",
]
