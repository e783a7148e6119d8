"""Data access for the directory service."""

from .directory import DirectoryClient
from .query import OrganizationsQuery, QueryResult, Snapshot
from .service import OrganizationService

__all__ = [
    "DirectoryClient",
    "OrganizationService",
    "OrganizationsQuery",
    "QueryResult",
    "Snapshot",
]
