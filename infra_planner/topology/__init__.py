"""
Replication Topology

In-memory graph of directory sites, domain controllers and replication
links, with guarded mutators and HA/connectivity validation.
"""

from .models import (
    MAX_LINKS_PER_DC,
    MIN_LINKS_PER_DC,
    UNASSIGNED,
    Severity,
    LinkRejection,
    Site,
    DomainController,
    ReplicationLink,
    LinkResult,
    ValidationIssue,
    TopologyData,
)
from .store import TopologyStore
from .validator import TopologyValidator, build_site_graph, validate_topology

__all__ = [
    # Constants
    "MAX_LINKS_PER_DC",
    "MIN_LINKS_PER_DC",
    "UNASSIGNED",
    # Enums
    "Severity",
    "LinkRejection",
    # Entities
    "Site",
    "DomainController",
    "ReplicationLink",
    # Results
    "LinkResult",
    "ValidationIssue",
    "TopologyData",
    # Store and validation
    "TopologyStore",
    "TopologyValidator",
    "build_site_graph",
    "validate_topology",
]
