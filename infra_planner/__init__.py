"""
Infrastructure Planner

Sizing and replication topology design for directory-service deployments.

Sizing:
    Users/groups + site layout -> DCs per site, per-DC hardware,
    auxiliary subsystem servers, totals and warnings

Topology:
    Sites, domain controllers and replication links with link capacity
    rules and HA/connectivity validation

Usage:
    from infra_planner import SizingConfig, calculate_infrastructure
    result = calculate_infrastructure(SizingConfig(total_users=5000, total_groups=300))

    from infra_planner import TopologyStore
    store = TopologyStore()
    site = store.add_site("HQ")
    store.add_dc("DC1", site.id)
    issues = store.validate_topology()
"""

from .sizing import (
    SizingConfig,
    SizingResult,
    calculate_infrastructure,
    default_site_distribution,
    default_subsystem_distribution,
)
from .topology import (
    TopologyStore,
    TopologyData,
    TopologyValidator,
    ValidationIssue,
)

__all__ = [
    "SizingConfig",
    "SizingResult",
    "calculate_infrastructure",
    "default_site_distribution",
    "default_subsystem_distribution",
    "TopologyStore",
    "TopologyData",
    "TopologyValidator",
    "ValidationIssue",
]

__version__ = "1.0.0"
