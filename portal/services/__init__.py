"""
Service layer for business logic and orchestration.
"""

from portal.services.auth import AuthService
from portal.services.property import PropertyService
from portal.services.agent import AgentService
from portal.services.complex import ComplexService
from portal.services.storage import StorageClient, StorageInitResult, initialize_storage

__all__ = [
    "AuthService",
    "PropertyService",
    "AgentService",
    "ComplexService",
    "StorageClient",
    "StorageInitResult",
    "initialize_storage",
]
