"""
Service Layer - MetaStore and ServicesContainer.
"""

from gitmeta.services.container import ServicesContainer, create_services
from gitmeta.services.meta_store import APPLY_ORDER, MetaStore, create_meta_store
from gitmeta.services.models import ApplyResult, SnapshotStatus, StoreResult

__all__ = [
    # Container and factory
    "ServicesContainer",
    "create_services",
    # Store
    "MetaStore",
    "create_meta_store",
    "APPLY_ORDER",
    # Results
    "StoreResult",
    "ApplyResult",
    "SnapshotStatus",
]
